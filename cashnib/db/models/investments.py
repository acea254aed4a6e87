import uuid
from sqlalchemy import Column, String, Date, DateTime, Numeric, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, Money, now_utc


class Investment(Base):
    __tablename__ = 'investments'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    symbol = Column(String(20), nullable=False)
    name = Column(String(200), nullable=False)
    type = Column(String(20), nullable=False, default='stock')
    quantity = Column(Numeric(20, 8, asdecimal=False), nullable=False)
    purchase_price = Column(Numeric(20, 6, asdecimal=False), nullable=False)
    current_price = Column(Numeric(20, 6, asdecimal=False), nullable=False)
    # Derived on every write from quantity and prices
    total_value = Column(Money(), nullable=False, default=0)
    gain_loss = Column(Money(), nullable=False, default=0)
    gain_loss_percentage = Column(Numeric(12, 4, asdecimal=False), nullable=False, default=0)
    purchase_date = Column(Date, nullable=False)
    last_updated = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    __table_args__ = (
        Index('idx_investments_user_id_symbol', 'user_id', 'symbol'),
    )

    def refresh_valuation(self) -> None:
        """Recompute total value and gain/loss from quantity and prices."""
        quantity = float(self.quantity or 0)
        cost = quantity * float(self.purchase_price or 0)
        self.total_value = round(quantity * float(self.current_price or 0), 2)
        self.gain_loss = round(self.total_value - cost, 2)
        self.gain_loss_percentage = round(self.gain_loss / cost * 100, 4) if cost > 0 else 0.0
        self.last_updated = now_utc()

    @property
    def cost_basis(self) -> float:
        return float(self.quantity or 0) * float(self.purchase_price or 0)
