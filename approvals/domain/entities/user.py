"""Domain entity representing a user."""

from dataclasses import dataclass, field
from datetime import datetime

from .notification import DeliveryChannel
from .preferences import NotificationPreferences
from .role import UserRole


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    name: str
    role: UserRole
    email: str | None = None
    phone: str | None = None
    push_token: str | None = None
    is_active: bool = True
    preferences: NotificationPreferences = field(default_factory=NotificationPreferences)
    created_at: datetime | None = None

    def has_role(self, role: UserRole) -> bool:
        """Return ``True`` when the user holds ``role``."""

        return self.role == role

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(UserRole.ADMIN)

    def contact_for(self, channel: DeliveryChannel) -> str | None:
        """Return the address used to reach the user on ``channel``."""

        if channel is DeliveryChannel.PUSH:
            return self.push_token or None
        if channel is DeliveryChannel.SMS:
            return self.phone or None
        if channel is DeliveryChannel.EMAIL:
            return self.email or None
        return None


__all__ = ["User"]
