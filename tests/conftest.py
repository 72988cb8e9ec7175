"""Shared fixtures for the approval workflow tests."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

TESTS_DIR = Path(__file__).resolve().parent

os.environ.setdefault("DATABASE_URL", f"sqlite:///{TESTS_DIR / 'test.db'}")
os.environ.setdefault("REMINDER_ENABLED", "false")

from approvals.application.use_cases.notifications import FanOutResult, ProjectNotifier
from approvals.application.use_cases.users import create_user
from approvals.domain.entities import (
    NotificationPreferences,
    Project,
    ProjectStatus,
    User,
    UserRole,
)
from approvals.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from approvals.infrastructure.notifications import NotificationDispatcher
from approvals.infrastructure.repositories import ProjectRepository
from approvals.infrastructure.tasks import BackgroundRunner
from approvals.utils import now_in_app_timezone


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def engine(tmp_path: Path):
    engine = build_engine(f"sqlite:///{tmp_path / 'approvals.db'}")
    initialize_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def session(session_factory):
    with session_factory() as db:
        yield db


@pytest.fixture
def make_user(session_factory) -> Callable[..., User]:
    counter = iter(range(1, 10_000))

    def factory(
        *,
        role: UserRole = UserRole.USER,
        name: str | None = None,
        email: str | None = "",
        phone: str | None = "+15550000000",
        push_token: str | None = "push-token",
        preferences: NotificationPreferences | None = None,
        is_active: bool = True,
    ) -> User:
        index = next(counter)
        with session_factory() as db:
            return create_user(
                db,
                name=name or f"{role.value.title()} {index}",
                role=role,
                email=f"user{index}@example.com" if email == "" else email,
                phone=phone,
                push_token=push_token,
                preferences=preferences,
                is_active=is_active,
            )

    return factory


@pytest.fixture
def admin(make_user) -> User:
    return make_user(role=UserRole.ADMIN, name="Alice Admin")


@pytest.fixture
def make_project(session_factory) -> Callable[..., Project]:
    """Insert a project row directly, bypassing the workflow."""

    def factory(
        *,
        created_by: int,
        title: str = "Solar panels",
        required_approvals: int = 2,
        current_approvals: int = 0,
        status: ProjectStatus = ProjectStatus.PENDING,
        age_days: float = 0,
        reminder_age_days: float | None = None,
    ) -> Project:
        now = now_in_app_timezone()
        project = Project(
            id=None,
            title=title,
            description="Roof installation",
            proposed_amount=Decimal("1500.00"),
            required_approvals=required_approvals,
            current_approvals=current_approvals,
            status=status,
            created_by=created_by,
            created_at=now - timedelta(days=age_days),
            reminder_sent_at=(
                now - timedelta(days=reminder_age_days)
                if reminder_age_days is not None
                else None
            ),
        )
        with session_factory() as db:
            return ProjectRepository(db).create(project)

    return factory


class RecordingSender:
    """Channel fake recording every call and returning a configurable result."""

    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[Any, ...]] = []
        self.on_send: Callable[[], None] | None = None
        self._lock = threading.Lock()

    def _record(self, *args: Any) -> bool:
        with self._lock:
            self.calls.append(args)
        if self.on_send is not None:
            self.on_send()
        if self.error is not None:
            raise self.error
        return self.result

    def send_push(self, token, title, body, data=None) -> bool:
        return self._record(token, title, body, data)

    def send_sms(self, phone, text) -> bool:
        return self._record(phone, text)

    def send_email(self, address, subject, html, text=None) -> bool:
        return self._record(address, subject, html, text)


@pytest.fixture
def push_sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def sms_sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def email_sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def dispatcher(session_factory, push_sender, sms_sender, email_sender) -> NotificationDispatcher:
    return NotificationDispatcher(
        session_factory,
        push_sender=push_sender,
        sms_sender=sms_sender,
        email_sender=email_sender,
        frontend_url="https://approvals.example.com/",
    )


@pytest.fixture
def runner():
    runner = BackgroundRunner(4)
    yield runner
    runner.drain()
    runner.shutdown()


@pytest.fixture
def notifier(dispatcher, session_factory, runner) -> ProjectNotifier:
    return ProjectNotifier(dispatcher, session_factory, runner)


class RecordingNotifier:
    """Stand-in for :class:`ProjectNotifier` that records fired events."""

    def __init__(self) -> None:
        self.fired: list[tuple[str, dict[str, Any]]] = []
        self.reminders: list[dict[str, Any]] = []
        self.failing_projects: set[int] = set()
        self._lock = threading.Lock()

    def fire(self, handler, **kwargs) -> None:
        with self._lock:
            self.fired.append((handler.__name__, kwargs))

    def events(self, name: str) -> list[dict[str, Any]]:
        return [kwargs for handler, kwargs in self.fired if handler == name]

    async def _noop(self, **kwargs) -> FanOutResult:
        return FanOutResult(recipients=0, succeeded=0, failed=0)

    async def notify_project_submitted(self, **kwargs) -> FanOutResult:
        return await self._noop(**kwargs)

    async def notify_project_accepted(self, **kwargs) -> FanOutResult:
        return await self._noop(**kwargs)

    async def notify_project_approved(self, **kwargs) -> FanOutResult:
        return await self._noop(**kwargs)

    async def notify_project_assigned(self, **kwargs) -> FanOutResult:
        return await self._noop(**kwargs)

    async def notify_project_declined(self, **kwargs) -> FanOutResult:
        return await self._noop(**kwargs)

    async def notify_project_deleted(self, **kwargs) -> FanOutResult:
        return await self._noop(**kwargs)

    async def send_project_reminder(
        self, *, project_id: int, project_title: str, user_ids
    ) -> FanOutResult:
        if project_id in self.failing_projects:
            raise RuntimeError("reminder delivery exploded")
        user_ids = list(user_ids)
        with self._lock:
            self.reminders.append(
                {"project_id": project_id, "project_title": project_title, "user_ids": user_ids}
            )
        return FanOutResult(recipients=len(user_ids), succeeded=len(user_ids), failed=0)


@pytest.fixture
def recording_notifier() -> RecordingNotifier:
    return RecordingNotifier()
