"""ORM models used by the application infrastructure."""

from .acceptance import AcceptanceModel
from .delivery import DeliveryModel
from .notification import NotificationModel
from .project import ProjectModel
from .user import UserModel

__all__ = [
    "AcceptanceModel",
    "DeliveryModel",
    "NotificationModel",
    "ProjectModel",
    "UserModel",
]
