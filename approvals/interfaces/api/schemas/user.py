"""Schemas for the current user's profile endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from approvals.domain.entities import UserRole


class NotificationPreferencesRead(BaseModel):
    push: bool
    sms: bool
    email: bool
    in_app: bool = Field(serialization_alias="inApp")

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferencesUpdate(BaseModel):
    push: bool | None = None
    sms: bool | None = None
    email: bool | None = None
    in_app: bool | None = Field(default=None, alias="inApp")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class PushTokenUpdate(BaseModel):
    push_token: str | None = Field(default=None, max_length=255)


class UserRead(BaseModel):
    id: int
    name: str
    role: UserRole
    email: str | None
    phone: str | None
    is_active: bool
    has_push_token: bool
    preferences: NotificationPreferencesRead


__all__ = [
    "NotificationPreferencesRead",
    "NotificationPreferencesUpdate",
    "PushTokenUpdate",
    "UserRead",
]
