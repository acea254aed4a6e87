import uuid
from sqlalchemy import Column, String, Text, Date, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from .base import Base, Money, now_utc


class Goal(Base):
    __tablename__ = 'goals'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(30), nullable=False, default='savings')
    target_amount = Column(Money(), nullable=False)
    current_amount = Column(Money(), nullable=False, default=0)
    target_date = Column(Date, nullable=False)
    priority = Column(String(10), nullable=False, default='medium')
    category = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default='active')
    is_completed = Column(Boolean, nullable=False, default=False)
    auto_contribute = Column(JSONB, nullable=True)
    milestones = Column(JSONB, nullable=True)
    tags = Column(JSONB, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    __table_args__ = (
        Index('idx_goals_user_id_status', 'user_id', 'status'),
    )

    @property
    def progress(self) -> float:
        target = self.target_amount or 0
        if target <= 0:
            return 0.0
        return round((self.current_amount or 0) / target * 100, 2)

    def sync_completion(self) -> bool:
        """Mark the goal completed once the target is reached.

        Returns True when this call flipped the goal to completed.
        """
        reached = (self.current_amount or 0) >= (self.target_amount or 0) > 0
        newly_completed = reached and not self.is_completed
        self.is_completed = reached
        if reached:
            self.status = 'completed'
        return newly_completed
