"""Notification delivery infrastructure."""

from .dispatcher import ChannelOutcome, DispatchResult, NotificationDispatcher

__all__ = ["ChannelOutcome", "DispatchResult", "NotificationDispatcher"]
