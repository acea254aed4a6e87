import uuid
from sqlalchemy import Column, String, Text, Date, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from .base import Base, Money, now_utc


class Transaction(Base):
    __tablename__ = 'transactions'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    amount = Column(Money(), nullable=False)
    type = Column(String(20), nullable=False, default='expense')
    category = Column(String(100), nullable=False)
    subcategory = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    account_id = Column(String(100), nullable=True)
    tags = Column(JSONB, nullable=True)
    location = Column(JSONB, nullable=True)
    receipt = Column(JSONB, nullable=True)
    is_manual = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    __table_args__ = (
        Index('idx_transactions_user_id_date', 'user_id', 'date'),
        Index('idx_transactions_user_id_category', 'user_id', 'category'),
    )

    @property
    def is_income(self) -> bool:
        return self.type == 'income'
