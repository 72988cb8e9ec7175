"""Administrative endpoints for the reminder scheduler."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from approvals.bootstrap import Services
from approvals.domain.entities import User
from approvals.interfaces.api.dependencies import get_services, require_admin
from approvals.interfaces.api.schemas import (
    ProjectRead,
    ReminderCandidateRead,
    ReminderStatsRead,
    ReminderTriggerResponse,
)

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.get("/stats", response_model=ReminderStatsRead)
def read_reminder_stats(
    services: Services = Depends(get_services),
    _: User = Depends(require_admin),
) -> ReminderStatsRead:
    stats = services.scheduler.get_stats()
    return ReminderStatsRead(
        threshold_days=stats.threshold_days,
        schedule=stats.schedule,
        is_running=stats.is_running,
        pending_total=stats.pending_total,
        pending_needing_reminder=stats.pending_needing_reminder,
        reminded_today=stats.reminded_today,
    )


@router.get("/projects", response_model=list[ReminderCandidateRead])
def list_projects_needing_reminder(
    services: Services = Depends(get_services),
    _: User = Depends(require_admin),
) -> list[ReminderCandidateRead]:
    return [
        ReminderCandidateRead(
            project=ProjectRead.model_validate(candidate.project),
            days_old=candidate.days_old,
            days_since_last_reminder=candidate.days_since_last_reminder,
        )
        for candidate in services.scheduler.list_projects_needing_reminder()
    ]


@router.post(
    "/trigger",
    response_model=ReminderTriggerResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def trigger_reminders(
    services: Services = Depends(get_services),
    _: User = Depends(require_admin),
) -> ReminderTriggerResponse:
    """Start a reminder pass in the background."""

    services.runner.submit(services.scheduler.trigger_manually)
    return ReminderTriggerResponse(message="Reminder check triggered")
