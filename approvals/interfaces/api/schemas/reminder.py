"""Schemas for reminder scheduler endpoints."""

from pydantic import BaseModel

from .project import ProjectRead


class ReminderStatsRead(BaseModel):
    threshold_days: int
    schedule: str
    is_running: bool
    pending_total: int
    pending_needing_reminder: int
    reminded_today: int


class ReminderCandidateRead(BaseModel):
    project: ProjectRead
    days_old: int
    days_since_last_reminder: int | None = None


class ReminderTriggerResponse(BaseModel):
    message: str


__all__ = ["ReminderCandidateRead", "ReminderStatsRead", "ReminderTriggerResponse"]
