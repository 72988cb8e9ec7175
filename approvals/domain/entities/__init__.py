"""Domain entities exposed by the application."""

from .acceptance import Acceptance
from .notification import (
    DEFAULT_CHANNELS,
    Delivery,
    DeliveryChannel,
    DeliveryStatus,
    Notification,
    NotificationStatus,
    NotificationType,
)
from .preferences import NotificationPreferences
from .project import Project, ProjectStatus
from .role import UserRole
from .user import User

__all__ = [
    "Acceptance",
    "DEFAULT_CHANNELS",
    "Delivery",
    "DeliveryChannel",
    "DeliveryStatus",
    "Notification",
    "NotificationPreferences",
    "NotificationStatus",
    "NotificationType",
    "Project",
    "ProjectStatus",
    "User",
    "UserRole",
]
