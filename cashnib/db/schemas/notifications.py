import uuid
from datetime import datetime
from typing import Optional, Dict, Any, List, Literal
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

NotificationType = Literal['budget_alert', 'goal_milestone', 'transaction_anomaly', 'investment_update', 'general']
NotificationPriority = Literal['low', 'medium', 'high']


class NotificationCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    type: NotificationType = 'general'
    priority: NotificationPriority = 'medium'
    action_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    expires_days: Optional[int] = Field(default=30, ge=1)


class Notification(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    type: str
    priority: str
    title: str
    message: str
    action_url: Optional[str] = None
    # ORM rows expose the column as metadata_json
    metadata: Optional[Dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices('metadata_json', 'metadata')
    )
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    expires_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: List[Notification]
    unread_count: int
    total_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int
