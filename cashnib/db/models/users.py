import uuid
from sqlalchemy import Column, String, DateTime, Boolean, Date
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc


class User(Base):
    __tablename__ = 'users'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, nullable=False, unique=True, index=True)
    display_name = Column(String, nullable=True)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    phone_number = Column(String(32), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    profile_image = Column(String(500), nullable=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    is_superadmin = Column(Boolean, nullable=False, default=False)
    # Identity provider name and its stable subject ("uid") for this user
    auth_provider = Column(String, nullable=True)
    external_subject = Column(String, nullable=True, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)
