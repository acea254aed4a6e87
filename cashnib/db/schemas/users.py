import uuid
import datetime as dt
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    id: uuid.UUID
    email: str
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[dt.date] = None
    profile_image: Optional[str] = None
    email_verified: bool = False
    is_superadmin: bool = False
    auth_provider: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    model_config = ConfigDict(from_attributes=True)


class UserProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    phone_number: Optional[str] = Field(default=None, max_length=32)
    date_of_birth: Optional[dt.date] = None
    profile_image: Optional[str] = Field(default=None, max_length=500)
    model_config = ConfigDict(extra="forbid")
