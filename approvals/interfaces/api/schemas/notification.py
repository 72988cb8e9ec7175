"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from approvals.domain.entities import (
    DeliveryChannel,
    DeliveryStatus,
    NotificationStatus,
    NotificationType,
)


class DeliveryRead(BaseModel):
    id: int
    channel: DeliveryChannel
    status: DeliveryStatus
    error_message: str | None = None
    delivered_at: datetime | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    project_id: int | None = None
    type: NotificationType
    title: str
    message: str
    channels: list[DeliveryChannel] = Field(default_factory=list)
    status: NotificationStatus
    payload: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    created_at: datetime | None = None
    sent_at: datetime | None = None
    read_at: datetime | None = None
    deliveries: list[DeliveryRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class NotificationPageRead(BaseModel):
    notifications: list[NotificationRead] = Field(default_factory=list)
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int


class CleanupResponse(BaseModel):
    deleted: int


__all__ = [
    "CleanupResponse",
    "DeliveryRead",
    "MarkAllReadResponse",
    "NotificationPageRead",
    "NotificationRead",
]
