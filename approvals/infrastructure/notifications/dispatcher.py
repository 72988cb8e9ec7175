"""Persist a notification and deliver it over the user's enabled channels."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Any

import anyio
from sqlalchemy.orm import Session

from approvals.domain.entities import (
    DEFAULT_CHANNELS,
    Delivery,
    DeliveryChannel,
    DeliveryStatus,
    Notification,
    NotificationStatus,
    NotificationType,
    User,
)
from approvals.domain.errors import NotFoundError
from approvals.infrastructure.channels import (
    PRODUCT_NAME,
    EmailSender,
    PushSender,
    SmsSender,
    format_project_sms,
    render_project_email,
)
from approvals.infrastructure.repositories import NotificationRepository, UserRepository
from approvals.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

_FAILURE_MESSAGES = {
    DeliveryChannel.PUSH: "Push notification failed",
    DeliveryChannel.SMS: "SMS sending failed",
    DeliveryChannel.EMAIL: "Email sending failed",
}
_CHANNEL_ORDER = {channel: index for index, channel in enumerate(DeliveryChannel)}


@dataclass(frozen=True)
class ChannelOutcome:
    channel: DeliveryChannel
    success: bool
    error: str | None = None
    delivered_at: datetime | None = None


@dataclass(frozen=True)
class DispatchResult:
    """Summary of one :meth:`NotificationDispatcher.dispatch` call."""

    notification_id: int
    status: NotificationStatus
    outcomes: list[ChannelOutcome] = field(default_factory=list)

    @property
    def any_succeeded(self) -> bool:
        return any(outcome.success for outcome in self.outcomes)


class NotificationDispatcher:
    """Create notification records and fan them out to delivery channels.

    The notification row is committed with ``PENDING`` status before any
    channel is contacted, so the in-app record exists even when every channel
    fails. Channel sends for one notification run concurrently; the dispatch
    completes once each attempt has produced a delivery row.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        push_sender: PushSender,
        sms_sender: SmsSender,
        email_sender: EmailSender,
        frontend_url: str,
        sms_sender_name: str = PRODUCT_NAME,
    ) -> None:
        self._session_factory = session_factory
        self.push_sender = push_sender
        self.sms_sender = sms_sender
        self.email_sender = email_sender
        self.frontend_url = frontend_url.rstrip("/")
        self.sms_sender_name = sms_sender_name

    def project_link(self, project_id: int | None) -> str | None:
        if project_id is None:
            return None
        return f"{self.frontend_url}/projects/{project_id}"

    async def dispatch(
        self,
        user_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        *,
        project_id: int | None = None,
        channels: Iterable[DeliveryChannel] | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> DispatchResult:
        if channels is None:
            requested = list(DEFAULT_CHANNELS)
        else:
            requested = list(dict.fromkeys(DeliveryChannel(channel) for channel in channels))
        payload = dict(data or {})

        user, notification = await anyio.to_thread.run_sync(
            partial(
                self._create_notification,
                user_id=user_id,
                notification_type=notification_type,
                title=title,
                message=message,
                project_id=project_id,
                channels=requested,
                payload=payload,
            )
        )

        attempts: list[tuple[DeliveryChannel, str]] = []
        for channel in requested:
            contact = user.contact_for(channel)
            if contact and user.preferences.allows(channel):
                attempts.append((channel, contact))

        outcomes: list[ChannelOutcome] = []
        async with anyio.create_task_group() as task_group:
            for channel, contact in attempts:
                task_group.start_soon(
                    self._attempt,
                    channel,
                    contact,
                    title,
                    message,
                    project_id,
                    payload,
                    outcomes,
                )
        outcomes.sort(key=lambda outcome: _CHANNEL_ORDER[outcome.channel])

        succeeded = any(outcome.success for outcome in outcomes)
        status = NotificationStatus.SENT if succeeded else NotificationStatus.FAILED
        await anyio.to_thread.run_sync(
            partial(
                self._finalize,
                notification.id,
                outcomes=outcomes,
                status=status,
                sent_at=now_in_app_timezone() if succeeded else None,
            )
        )

        logger.info(
            "Notification %s (%s) for user %s: %s via %d/%d channel(s)",
            notification.id,
            NotificationType(notification_type).value,
            user_id,
            status.value,
            sum(1 for outcome in outcomes if outcome.success),
            len(outcomes),
        )
        return DispatchResult(notification_id=notification.id, status=status, outcomes=outcomes)

    async def _attempt(
        self,
        channel: DeliveryChannel,
        contact: str,
        title: str,
        message: str,
        project_id: int | None,
        payload: Mapping[str, Any],
        outcomes: list[ChannelOutcome],
    ) -> None:
        try:
            send = self._sender_call(channel, contact, title, message, project_id, payload)
            success = await anyio.to_thread.run_sync(send)
        except Exception as exc:
            logger.exception("%s delivery raised for %s", channel.value, contact)
            outcomes.append(ChannelOutcome(channel=channel, success=False, error=str(exc)))
            return

        if success:
            outcomes.append(
                ChannelOutcome(channel=channel, success=True, delivered_at=now_in_app_timezone())
            )
        else:
            outcomes.append(
                ChannelOutcome(channel=channel, success=False, error=_FAILURE_MESSAGES[channel])
            )

    def _sender_call(
        self,
        channel: DeliveryChannel,
        contact: str,
        title: str,
        message: str,
        project_id: int | None,
        payload: Mapping[str, Any],
    ) -> Callable[[], bool]:
        if channel is DeliveryChannel.PUSH:
            data = {key: str(value) for key, value in payload.items()}
            return partial(self.push_sender.send_push, contact, title, message, data)
        if channel is DeliveryChannel.SMS:
            text = format_project_sms(self.sms_sender_name, title, message)
            return partial(self.sms_sender.send_sms, contact, text)
        html = render_project_email(title, message, self.project_link(project_id))
        return partial(self.email_sender.send_email, contact, title, html, message)

    def _create_notification(
        self,
        *,
        user_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        project_id: int | None,
        channels: list[DeliveryChannel],
        payload: dict[str, Any],
    ) -> tuple[User, Notification]:
        with self._session_factory() as session:
            user = UserRepository(session).get(user_id)
            if user is None:
                raise NotFoundError(f"User with id {user_id} not found")
            notification = NotificationRepository(session).create(
                Notification(
                    id=None,
                    user_id=user_id,
                    type=NotificationType(notification_type),
                    title=title,
                    message=message,
                    project_id=project_id,
                    channels=channels,
                    status=NotificationStatus.PENDING,
                    payload=payload,
                )
            )
        return user, notification

    def _finalize(
        self,
        notification_id: int,
        *,
        outcomes: list[ChannelOutcome],
        status: NotificationStatus,
        sent_at: datetime | None,
    ) -> None:
        created_at = now_in_app_timezone()
        deliveries = [
            Delivery(
                id=None,
                notification_id=notification_id,
                channel=outcome.channel,
                status=DeliveryStatus.SUCCESS if outcome.success else DeliveryStatus.FAILED,
                error_message=outcome.error,
                delivered_at=outcome.delivered_at,
                created_at=created_at,
            )
            for outcome in outcomes
        ]
        with self._session_factory() as session:
            NotificationRepository(session).finalize(
                notification_id,
                deliveries=deliveries,
                status=status,
                sent_at=sent_at,
            )


__all__ = ["ChannelOutcome", "DispatchResult", "NotificationDispatcher"]
