"""Wire the approval workflow components together."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from approvals.application.use_cases.notifications import ProjectNotifier
from approvals.application.use_cases.reminders import ReminderScheduler
from approvals.config import Settings
from approvals.infrastructure.channels import (
    EmailSender,
    FirebasePushSender,
    PushSender,
    SendGridEmailSender,
    SmsSender,
    TwilioSmsSender,
)
from approvals.infrastructure.notifications import NotificationDispatcher
from approvals.infrastructure.tasks import BackgroundRunner
from approvals.utils import resolve_timezone

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Long-lived components shared by the HTTP layer and background jobs."""

    session_factory: Callable[[], Session]
    runner: BackgroundRunner
    dispatcher: NotificationDispatcher
    notifier: ProjectNotifier
    scheduler: ReminderScheduler

    def shutdown(self) -> None:
        self.scheduler.stop()
        self.runner.drain()
        self.runner.shutdown()


def build_services(
    settings: Settings,
    session_factory: Callable[[], Session],
    *,
    push_sender: PushSender | None = None,
    sms_sender: SmsSender | None = None,
    email_sender: EmailSender | None = None,
) -> Services:
    """Create the dispatcher, notifier and scheduler for ``settings``.

    Channel senders default to the Firebase, Twilio and SendGrid adapters
    configured from ``settings``.
    """

    dispatcher = NotificationDispatcher(
        session_factory,
        push_sender=push_sender or FirebasePushSender(settings.firebase_credentials_file),
        sms_sender=sms_sender
        or TwilioSmsSender(
            settings.twilio_account_sid,
            settings.twilio_auth_token,
            settings.twilio_phone_number,
        ),
        email_sender=email_sender
        or SendGridEmailSender(
            settings.sendgrid_api_key,
            settings.sendgrid_sender,
            sender_name=settings.sms_sender_name,
        ),
        frontend_url=settings.frontend_url,
        sms_sender_name=settings.sms_sender_name,
    )
    runner = BackgroundRunner(settings.notification_workers)
    notifier = ProjectNotifier(dispatcher, session_factory, runner)
    scheduler = ReminderScheduler(
        session_factory,
        notifier,
        threshold_days=settings.reminder_threshold_days,
        schedule=settings.reminder_cron_schedule,
        timezone=resolve_timezone(settings.app_timezone),
    )
    return Services(
        session_factory=session_factory,
        runner=runner,
        dispatcher=dispatcher,
        notifier=notifier,
        scheduler=scheduler,
    )


__all__ = ["Services", "build_services"]
