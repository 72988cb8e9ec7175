"""Per-channel notification preferences."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .notification import DeliveryChannel

_IN_APP_KEYS = ("in_app", "inApp")


@dataclass(frozen=True)
class NotificationPreferences:
    """Channels a user agreed to receive notifications on.

    Every flag defaults to ``True`` so a user without stored preferences is
    reachable on all channels.
    """

    push: bool = True
    sms: bool = True
    email: bool = True
    in_app: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "NotificationPreferences":
        """Build preferences from a stored mapping, filling missing flags."""

        if not data:
            return cls()

        in_app = True
        for key in _IN_APP_KEYS:
            if key in data and data[key] is not None:
                in_app = bool(data[key])
                break

        return cls(
            push=_flag(data, "push"),
            sms=_flag(data, "sms"),
            email=_flag(data, "email"),
            in_app=in_app,
        )

    def allows(self, channel: DeliveryChannel) -> bool:
        """Return ``True`` when deliveries on ``channel`` are enabled."""

        if channel is DeliveryChannel.PUSH:
            return self.push
        if channel is DeliveryChannel.SMS:
            return self.sms
        if channel is DeliveryChannel.EMAIL:
            return self.email
        return False

    def to_dict(self) -> dict[str, bool]:
        return {
            "push": self.push,
            "sms": self.sms,
            "email": self.email,
            "inApp": self.in_app,
        }


def _flag(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    return True if value is None else bool(value)


__all__ = ["NotificationPreferences"]
