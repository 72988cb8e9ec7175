"""Fan project events out to the users who should hear about them."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from functools import partial
from typing import Any, TypeVar

import anyio
from sqlalchemy.orm import Session

from approvals.domain.entities import NotificationType, UserRole
from approvals.infrastructure.notifications import NotificationDispatcher
from approvals.infrastructure.tasks import BackgroundRunner
from approvals.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FanOutResult:
    """Outcome of one fan-out.

    ``succeeded`` counts recipients whose dispatch completed, whatever the
    channel outcomes were; ``failed`` counts dispatches that raised.
    """

    recipients: int
    succeeded: int
    failed: int


class ProjectNotifier:
    """Build the message for each project event and dispatch it per recipient."""

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        session_factory: Callable[[], Session],
        runner: BackgroundRunner,
    ) -> None:
        self.dispatcher = dispatcher
        self._session_factory = session_factory
        self.runner = runner

    def fire(self, handler: Callable[..., Awaitable[Any]], **kwargs: Any) -> None:
        """Schedule ``handler`` in the background and return immediately.

        Scheduling failures are logged; the caller has already committed.
        """

        try:
            self.runner.submit(handler, **kwargs)
        except Exception:
            logger.exception("Could not schedule %s", getattr(handler, "__name__", handler))

    async def notify_project_submitted(
        self, *, project_id: int, project_title: str, creator_id: int
    ) -> FanOutResult:
        def load(session: Session) -> tuple[str, list[int]]:
            repository = UserRepository(session)
            creator = repository.get(creator_id)
            recipients = [
                user.id
                for user in repository.list_active_by_role(UserRole.USER)
                if user.id != creator_id
            ]
            return (creator.name if creator else "An administrator"), recipients

        creator_name, recipients = await self._read(load)
        result = await self._fan_out(
            recipients,
            project_id=project_id,
            notification_type=NotificationType.PROJECT_SUBMITTED,
            title=f"New Project: {project_title}",
            message=(
                f"{creator_name} has submitted a new project for your review. "
                "Check it out and accept if you're interested!"
            ),
            data={"projectId": project_id, "action": "view_project"},
        )
        logger.info(
            "PROJECT_SUBMITTED: sent to %d/%d users for project %s",
            result.succeeded,
            result.recipients,
            project_id,
        )
        return result

    async def notify_project_accepted(
        self,
        *,
        project_id: int,
        project_title: str,
        accepted_by_id: int,
        creator_id: int,
    ) -> FanOutResult:
        user_name = await self._user_name(accepted_by_id, default="A user")
        return await self._fan_out(
            [creator_id],
            project_id=project_id,
            notification_type=NotificationType.PROJECT_ACCEPTED,
            title=f"Project Accepted: {project_title}",
            message=(
                f'{user_name} has accepted your project "{project_title}". '
                "View the project details to see all acceptances."
            ),
            data={
                "projectId": project_id,
                "acceptedBy": accepted_by_id,
                "action": "view_acceptances",
            },
        )

    async def notify_project_approved(
        self, *, project_id: int, project_title: str, creator_id: int
    ) -> FanOutResult:
        return await self._fan_out(
            [creator_id],
            project_id=project_id,
            notification_type=NotificationType.PROJECT_ACCEPTED,
            title=f"Project Approved: {project_title}",
            message=(
                f'Great news! Your project "{project_title}" has received enough '
                "acceptances and is now approved. You can assign it to a user."
            ),
            data={"projectId": project_id, "action": "assign_project"},
        )

    async def notify_project_assigned(
        self,
        *,
        project_id: int,
        project_title: str,
        assigned_to_id: int,
        assigned_by_id: int,
    ) -> FanOutResult:
        admin_name = await self._user_name(assigned_by_id, default="An administrator")
        return await self._fan_out(
            [assigned_to_id],
            project_id=project_id,
            notification_type=NotificationType.PROJECT_ASSIGNED,
            title=f"Project Assigned: {project_title}",
            message=(
                f'Congratulations! {admin_name} has assigned the project "{project_title}" '
                "to you. Check the project details to get started."
            ),
            data={"projectId": project_id, "action": "view_assigned_project"},
        )

    async def notify_project_declined(
        self, *, project_id: int, project_title: str, user_ids: Iterable[int]
    ) -> FanOutResult:
        return await self._fan_out(
            user_ids,
            project_id=project_id,
            notification_type=NotificationType.PROJECT_DECLINED,
            title=f"Project Update: {project_title}",
            message=(
                f'The project "{project_title}" has been assigned to another user. '
                "Thank you for your interest!"
            ),
            data={"projectId": project_id, "action": "view_projects"},
        )

    async def notify_project_deleted(
        self, *, project_id: int, project_title: str, user_ids: Iterable[int]
    ) -> FanOutResult:
        return await self._fan_out(
            user_ids,
            project_id=project_id,
            notification_type=NotificationType.PROJECT_DELETED,
            title=f"Project Deleted: {project_title}",
            message=f'The project "{project_title}" has been deleted by the admin.',
            data={"projectId": project_id, "action": "view_projects"},
        )

    async def send_project_reminder(
        self, *, project_id: int, project_title: str, user_ids: Iterable[int]
    ) -> FanOutResult:
        result = await self._fan_out(
            user_ids,
            project_id=project_id,
            notification_type=NotificationType.REMINDER,
            title=f"Reminder: Review {project_title}",
            message=(
                f'Don\'t forget! The project "{project_title}" is still awaiting '
                "your review and approval."
            ),
            data={"projectId": project_id, "action": "review_project"},
        )
        logger.info(
            "REMINDER: sent to %d/%d users for project %s",
            result.succeeded,
            result.recipients,
            project_id,
        )
        return result

    async def _fan_out(
        self,
        user_ids: Iterable[int],
        *,
        project_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        data: dict[str, Any],
    ) -> FanOutResult:
        recipients = list(dict.fromkeys(user_ids))
        if not recipients:
            return FanOutResult(recipients=0, succeeded=0, failed=0)

        failures: list[int] = []

        async def deliver(user_id: int) -> None:
            try:
                await self.dispatcher.dispatch(
                    user_id,
                    notification_type,
                    title,
                    message,
                    project_id=project_id,
                    data=data,
                )
            except Exception:
                logger.exception(
                    "Failed to notify user %s about project %s (%s)",
                    user_id,
                    project_id,
                    notification_type.value,
                )
                failures.append(user_id)

        async with anyio.create_task_group() as task_group:
            for user_id in recipients:
                task_group.start_soon(deliver, user_id)

        return FanOutResult(
            recipients=len(recipients),
            succeeded=len(recipients) - len(failures),
            failed=len(failures),
        )

    async def _user_name(self, user_id: int, *, default: str) -> str:
        def load(session: Session) -> str:
            user = UserRepository(session).get(user_id)
            return user.name if user else default

        return await self._read(load)

    async def _read(self, func: Callable[[Session], T]) -> T:
        return await anyio.to_thread.run_sync(partial(self._with_session, func))

    def _with_session(self, func: Callable[[Session], T]) -> T:
        with self._session_factory() as session:
            return func(session)


__all__ = ["FanOutResult", "ProjectNotifier"]
