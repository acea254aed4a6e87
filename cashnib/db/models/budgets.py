import uuid
from sqlalchemy import Column, String, Text, Date, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from .base import Base, Money, now_utc


class Budget(Base):
    __tablename__ = 'budgets'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    period = Column(String(20), nullable=False, default='monthly')
    total_amount = Column(Money(), nullable=False)
    currency = Column(String(3), nullable=False, default='USD')
    # [{"category_name": str, "allocated_amount": float, "color": str|None}]
    categories = Column(JSONB, nullable=False, default=list)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default='active')
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    __table_args__ = (
        Index('idx_budgets_user_id_created_at', 'user_id', 'created_at'),
    )
