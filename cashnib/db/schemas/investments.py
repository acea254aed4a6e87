import uuid
import datetime as dt
from typing import Optional, List, Dict, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import PartialUpdate

InvestmentType = Literal['stock', 'etf', 'crypto', 'bond', 'mutual_fund']


class InvestmentBase(BaseModel):
    symbol: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=200)
    type: InvestmentType = 'stock'
    quantity: float = Field(gt=0)
    purchase_price: float = Field(ge=0)
    current_price: Optional[float] = Field(default=None, ge=0)
    purchase_date: dt.date

    @field_validator('symbol')
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.strip().upper()


class InvestmentCreate(InvestmentBase):
    pass


class InvestmentUpdate(PartialUpdate):
    required_fields = ("symbol", "name", "type", "quantity", "purchase_price", "purchase_date")

    symbol: Optional[str] = Field(default=None, min_length=1, max_length=20)
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    type: Optional[InvestmentType] = None
    quantity: Optional[float] = Field(default=None, gt=0)
    purchase_price: Optional[float] = Field(default=None, ge=0)
    current_price: Optional[float] = Field(default=None, ge=0)
    purchase_date: Optional[dt.date] = None

    @field_validator('symbol')
    @classmethod
    def _upper_symbol(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().upper() if value else value


class Investment(InvestmentBase):
    id: uuid.UUID
    user_id: uuid.UUID
    current_price: float
    total_value: float
    gain_loss: float
    gain_loss_percentage: float
    last_updated: dt.datetime
    model_config = ConfigDict(from_attributes=True)


class Portfolio(BaseModel):
    user_id: uuid.UUID
    total_value: float
    total_cost: float
    total_gain_loss: float
    total_gain_loss_percentage: float
    investments: List[Investment]
    last_updated: dt.datetime


class PriceRefreshRequest(BaseModel):
    # Explicit quotes; when omitted the configured price provider is asked
    prices: Optional[Dict[str, float]] = None


class PriceRefreshResult(BaseModel):
    updated: int
    skipped: List[str] = Field(default_factory=list)
    investments: List[Investment] = Field(default_factory=list)
