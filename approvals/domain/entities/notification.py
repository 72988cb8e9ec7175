"""Domain entities representing notifications and their channel deliveries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    PROJECT_SUBMITTED = "PROJECT_SUBMITTED"
    PROJECT_ACCEPTED = "PROJECT_ACCEPTED"
    PROJECT_ASSIGNED = "PROJECT_ASSIGNED"
    PROJECT_DECLINED = "PROJECT_DECLINED"
    PROJECT_DELETED = "PROJECT_DELETED"
    REMINDER = "REMINDER"


class NotificationStatus(str, Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


class DeliveryChannel(str, Enum):
    PUSH = "PUSH"
    SMS = "SMS"
    EMAIL = "EMAIL"


class DeliveryStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


DEFAULT_CHANNELS: tuple[DeliveryChannel, ...] = (
    DeliveryChannel.PUSH,
    DeliveryChannel.SMS,
    DeliveryChannel.EMAIL,
)


@dataclass
class Delivery:
    """Outcome of one attempted send on one channel."""

    id: int | None
    notification_id: int
    channel: DeliveryChannel
    status: DeliveryStatus
    error_message: str | None = None
    delivered_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is DeliveryStatus.SUCCESS


@dataclass
class Notification:
    """Information message fanned out to a specific user."""

    id: int | None
    user_id: int
    type: NotificationType
    title: str
    message: str
    project_id: int | None = None
    channels: list[DeliveryChannel] = field(default_factory=list)
    status: NotificationStatus = NotificationStatus.PENDING
    payload: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None
    sent_at: datetime | None = None
    read_at: datetime | None = None
    deliveries: list[Delivery] = field(default_factory=list)


__all__ = [
    "DEFAULT_CHANNELS",
    "Delivery",
    "DeliveryChannel",
    "DeliveryStatus",
    "Notification",
    "NotificationStatus",
    "NotificationType",
]
