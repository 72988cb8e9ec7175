"""Notification fan-out and inbox use cases."""

from .events import FanOutResult, ProjectNotifier
from .inbox import (
    NotificationPage,
    cleanup_old_notifications,
    get_user_notifications,
    mark_all_notifications_as_read,
    mark_notification_as_read,
)

__all__ = [
    "FanOutResult",
    "NotificationPage",
    "ProjectNotifier",
    "cleanup_old_notifications",
    "get_user_notifications",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
]
