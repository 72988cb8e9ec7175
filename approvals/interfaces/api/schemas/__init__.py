from .notification import (
    CleanupResponse,
    DeliveryRead,
    MarkAllReadResponse,
    NotificationPageRead,
    NotificationRead,
)
from .project import (
    AcceptProjectRequest,
    AcceptanceRead,
    AssignProjectRequest,
    ProjectCreate,
    ProjectRead,
    ProjectStatsRead,
    ProjectUpdate,
)
from .reminder import ReminderCandidateRead, ReminderStatsRead, ReminderTriggerResponse
from .user import (
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
    PushTokenUpdate,
    UserRead,
)

__all__ = [
    "AcceptProjectRequest",
    "AcceptanceRead",
    "AssignProjectRequest",
    "CleanupResponse",
    "DeliveryRead",
    "MarkAllReadResponse",
    "NotificationPageRead",
    "NotificationPreferencesRead",
    "NotificationPreferencesUpdate",
    "NotificationRead",
    "ProjectCreate",
    "ProjectRead",
    "ProjectStatsRead",
    "ProjectUpdate",
    "PushTokenUpdate",
    "ReminderCandidateRead",
    "ReminderStatsRead",
    "ReminderTriggerResponse",
    "UserRead",
]
