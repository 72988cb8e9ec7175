"""Aggregate application use cases."""

from .notifications import ProjectNotifier
from .projects import accept_project, assign_project, create_project, delete_project
from .reminders import ReminderScheduler

__all__ = [
    "ProjectNotifier",
    "ReminderScheduler",
    "accept_project",
    "assign_project",
    "create_project",
    "delete_project",
]
