"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .project_repository import AcceptanceRecord, ProjectRepository
from .user_repository import UserRepository

__all__ = [
    "AcceptanceRecord",
    "NotificationRepository",
    "ProjectRepository",
    "UserRepository",
]
