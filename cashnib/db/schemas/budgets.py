import uuid
import datetime as dt
from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import PartialUpdate

BudgetPeriod = Literal['weekly', 'monthly', 'yearly']
BudgetStatus = Literal['active', 'paused', 'completed']


class BudgetCategory(BaseModel):
    category_name: str = Field(min_length=1, max_length=100)
    allocated_amount: float = Field(ge=0)
    color: Optional[str] = None


class BudgetBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    period: BudgetPeriod = 'monthly'
    total_amount: float = Field(gt=0)
    currency: str = Field(default='USD', min_length=3, max_length=3)
    categories: List[BudgetCategory] = Field(default_factory=list)
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


class BudgetCreate(BudgetBase):
    @model_validator(mode='after')
    def _check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError('end_date must not be before start_date')
        return self


class BudgetUpdate(PartialUpdate):
    required_fields = ("name", "period", "total_amount", "currency", "categories", "status")

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    period: Optional[BudgetPeriod] = None
    total_amount: Optional[float] = Field(default=None, gt=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    categories: Optional[List[BudgetCategory]] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    status: Optional[BudgetStatus] = None


class Budget(BudgetBase):
    id: uuid.UUID
    user_id: uuid.UUID
    status: BudgetStatus
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime
    model_config = ConfigDict(from_attributes=True)


class CategoryPerformance(BaseModel):
    category: str
    budgeted: float
    spent: float
    remaining: float
    percentage_used: float
    status: Literal['under', 'on_track', 'over']


class BudgetPerformance(BaseModel):
    budget_id: uuid.UUID
    budget_name: str
    window_start: dt.date
    window_end: dt.date
    total_budget: float
    total_spent: float
    remaining_budget: float
    percentage_used: float
    category_performance: List[CategoryPerformance]
