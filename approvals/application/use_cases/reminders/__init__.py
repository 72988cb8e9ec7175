"""Reminder scheduling use cases."""

from .scheduler import ReminderCandidate, ReminderRunSummary, ReminderScheduler, ReminderStats

__all__ = ["ReminderCandidate", "ReminderRunSummary", "ReminderScheduler", "ReminderStats"]
