import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, JSONB
from .base import Base, now_utc


class UserSettings(Base):
    __tablename__ = 'user_settings'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    currency = Column(String(3), nullable=False, default='USD')
    language = Column(String(10), nullable=False, default='en')
    theme = Column(String(10), nullable=False, default='light')
    notifications = Column(JSONB, nullable=False, default=dict)
    privacy = Column(JSONB, nullable=False, default=dict)
    security = Column(JSONB, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)
