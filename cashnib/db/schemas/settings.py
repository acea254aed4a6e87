from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

Theme = Literal['light', 'dark', 'system']


class NotificationSettings(BaseModel):
    budget_alerts: bool = True
    goal_milestones: bool = True
    transaction_anomalies: bool = True
    investment_updates: bool = True
    market_news: bool = False


class PrivacySettings(BaseModel):
    data_sharing: bool = False
    analytics: bool = True
    crash_reporting: bool = True


class SecuritySettings(BaseModel):
    biometric_auth: bool = False
    auto_lock: bool = True
    auto_lock_timeout: int = Field(default=5, ge=1, le=120)


class AppSettings(BaseModel):
    currency: str = 'USD'
    language: str = 'en'
    theme: Theme = 'light'
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    privacy: PrivacySettings = Field(default_factory=PrivacySettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    model_config = ConfigDict(from_attributes=True)


class NotificationSettingsUpdate(BaseModel):
    budget_alerts: Optional[bool] = None
    goal_milestones: Optional[bool] = None
    transaction_anomalies: Optional[bool] = None
    investment_updates: Optional[bool] = None
    market_news: Optional[bool] = None


class PrivacySettingsUpdate(BaseModel):
    data_sharing: Optional[bool] = None
    analytics: Optional[bool] = None
    crash_reporting: Optional[bool] = None


class SecuritySettingsUpdate(BaseModel):
    biometric_auth: Optional[bool] = None
    auto_lock: Optional[bool] = None
    auto_lock_timeout: Optional[int] = Field(default=None, ge=1, le=120)


class AppSettingsUpdate(BaseModel):
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    language: Optional[str] = Field(default=None, min_length=2, max_length=10)
    theme: Optional[Theme] = None
    notifications: Optional[NotificationSettingsUpdate] = None
    privacy: Optional[PrivacySettingsUpdate] = None
    security: Optional[SecuritySettingsUpdate] = None
