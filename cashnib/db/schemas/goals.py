import uuid
import datetime as dt
from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field

from .common import PartialUpdate

GoalType = Literal['savings', 'debt_payoff', 'investment', 'emergency_fund', 'custom']
GoalPriority = Literal['low', 'medium', 'high']
GoalStatus = Literal['active', 'completed', 'paused']


class AutoContribute(BaseModel):
    enabled: bool = False
    amount: float = Field(default=0, ge=0)
    frequency: Literal['daily', 'weekly', 'monthly'] = 'monthly'
    source_account: Optional[str] = None


class Milestone(BaseModel):
    name: str
    amount: float = Field(gt=0)
    reward: Optional[str] = None


class GoalBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    type: GoalType = 'savings'
    target_amount: float = Field(gt=0)
    current_amount: float = Field(default=0, ge=0)
    target_date: dt.date
    priority: GoalPriority = 'medium'
    category: Optional[str] = None
    auto_contribute: Optional[AutoContribute] = None
    milestones: Optional[List[Milestone]] = None
    tags: Optional[List[str]] = None
    is_public: bool = False


class GoalCreate(GoalBase):
    pass


class GoalUpdate(PartialUpdate):
    required_fields = (
        "name", "type", "target_amount", "current_amount",
        "target_date", "priority", "status", "is_public",
    )

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    type: Optional[GoalType] = None
    target_amount: Optional[float] = Field(default=None, gt=0)
    current_amount: Optional[float] = Field(default=None, ge=0)
    target_date: Optional[dt.date] = None
    priority: Optional[GoalPriority] = None
    category: Optional[str] = None
    status: Optional[GoalStatus] = None
    auto_contribute: Optional[AutoContribute] = None
    milestones: Optional[List[Milestone]] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None


class Goal(GoalBase):
    id: uuid.UUID
    user_id: uuid.UUID
    status: GoalStatus
    is_completed: bool
    progress: float
    created_at: dt.datetime
    updated_at: dt.datetime
    model_config = ConfigDict(from_attributes=True)


class ContributionRequest(BaseModel):
    amount: float = Field(gt=0)
