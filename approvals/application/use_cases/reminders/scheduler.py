"""Periodic reminders for projects that have been pending for too long."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from functools import partial

import anyio
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from approvals.application.use_cases.notifications import ProjectNotifier
from approvals.domain.entities import Project, UserRole
from approvals.infrastructure.repositories import ProjectRepository, UserRepository
from approvals.utils import (
    get_app_timezone,
    now_in_app_timezone,
    start_of_app_day,
    whole_days_between,
)

logger = logging.getLogger(__name__)

JOB_ID = "project-reminders"


@dataclass(frozen=True)
class ReminderCandidate:
    project: Project
    days_old: int
    days_since_last_reminder: int | None


@dataclass(frozen=True)
class ReminderRunSummary:
    candidates: int
    reminded: int
    skipped: int
    failed: int


@dataclass(frozen=True)
class ReminderStats:
    threshold_days: int
    schedule: str
    is_running: bool
    pending_total: int
    pending_needing_reminder: int
    reminded_today: int


class ReminderScheduler:
    """Remind users about projects left PENDING past the threshold.

    A project qualifies when it is PENDING, not deleted, older than
    ``threshold_days`` and was never reminded or last reminded before the
    same cutoff. Projects are processed one at a time; each project's fan-out
    completes before ``reminder_sent_at`` is stamped and the next one starts.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        notifier: ProjectNotifier,
        *,
        threshold_days: int = 7,
        schedule: str = "0 9 * * *",
        timezone: tzinfo | None = None,
    ) -> None:
        if threshold_days < 1:
            raise ValueError("threshold_days must be positive")
        self._session_factory = session_factory
        self.notifier = notifier
        self.threshold_days = threshold_days
        self.schedule = schedule
        self.timezone = timezone or get_app_timezone()
        self._scheduler: BackgroundScheduler | None = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        if self.is_running:
            logger.warning("Reminder scheduler is already running")
            return

        scheduler = BackgroundScheduler(timezone=self.timezone)
        scheduler.add_job(
            self._tick,
            CronTrigger.from_crontab(self.schedule, timezone=self.timezone),
            id=JOB_ID,
            coalesce=True,
            max_instances=1,
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            "Reminder scheduler started (schedule=%r, threshold=%d days)",
            self.schedule,
            self.threshold_days,
        )

    def stop(self) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Reminder scheduler stopped")

    def trigger_manually(self) -> ReminderRunSummary:
        logger.info("Reminder pass triggered manually")
        return self.run_pass()

    def run_pass(self) -> ReminderRunSummary:
        """Run one reminder pass and return what happened to each candidate."""

        started = time.monotonic()
        try:
            with self._session_factory() as session:
                candidates = ProjectRepository(session).list_needing_reminder(self._cutoff())
        except Exception:
            logger.exception("Could not load projects needing a reminder")
            return ReminderRunSummary(candidates=0, reminded=0, skipped=0, failed=0)

        reminded = skipped = failed = 0
        for project in candidates:
            try:
                if self._remind(project):
                    reminded += 1
                else:
                    skipped += 1
            except Exception:
                failed += 1
                logger.exception("Failed to send reminders for project %s", project.id)

        summary = ReminderRunSummary(
            candidates=len(candidates),
            reminded=reminded,
            skipped=skipped,
            failed=failed,
        )
        logger.info(
            "Reminder pass finished in %d ms: %s",
            int((time.monotonic() - started) * 1000),
            summary,
        )
        return summary

    def list_projects_needing_reminder(self) -> Sequence[ReminderCandidate]:
        now = now_in_app_timezone()
        with self._session_factory() as session:
            projects = ProjectRepository(session).list_needing_reminder(self._cutoff(now))
        return [
            ReminderCandidate(
                project=project,
                days_old=whole_days_between(project.created_at, now),
                days_since_last_reminder=(
                    whole_days_between(project.reminder_sent_at, now)
                    if project.reminder_sent_at
                    else None
                ),
            )
            for project in projects
        ]

    def get_stats(self) -> ReminderStats:
        with self._session_factory() as session:
            repository = ProjectRepository(session)
            return ReminderStats(
                threshold_days=self.threshold_days,
                schedule=self.schedule,
                is_running=self.is_running,
                pending_total=repository.count_pending(),
                pending_needing_reminder=repository.count_needing_reminder(self._cutoff()),
                reminded_today=repository.count_reminded_since(start_of_app_day()),
            )

    def _tick(self) -> None:
        try:
            self.run_pass()
        except Exception:
            logger.exception("Reminder pass failed")

    def _cutoff(self, now: datetime | None = None) -> datetime:
        return (now or now_in_app_timezone()) - timedelta(days=self.threshold_days)

    def _remind(self, project: Project) -> bool:
        with self._session_factory() as session:
            recipients = self._recipients(session, project)
        if not recipients:
            logger.info("Project %s has no users left to remind", project.id)
            return False

        anyio.run(
            partial(
                self.notifier.send_project_reminder,
                project_id=project.id,
                project_title=project.title,
                user_ids=recipients,
            )
        )
        with self._session_factory() as session:
            ProjectRepository(session).mark_reminder_sent(
                project.id, sent_at=now_in_app_timezone()
            )
        return True

    @staticmethod
    def _recipients(session: Session, project: Project) -> list[int]:
        acceptors = ProjectRepository(session).list_acceptor_ids(project.id)
        return [
            user.id
            for user in UserRepository(session).list_active_by_role(UserRole.USER)
            if user.id != project.created_by and user.id not in acceptors
        ]


__all__ = [
    "ReminderCandidate",
    "ReminderRunSummary",
    "ReminderScheduler",
    "ReminderStats",
]
