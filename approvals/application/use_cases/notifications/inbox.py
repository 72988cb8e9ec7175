"""Read and housekeeping operations over a user's notification inbox."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from sqlalchemy.orm import Session

from approvals.domain.entities import Notification
from approvals.domain.errors import NotFoundError, ValidationError
from approvals.infrastructure.repositories import NotificationRepository
from approvals.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass
class NotificationPage:
    notifications: list[Notification] = field(default_factory=list)
    unread_count: int = 0


def get_user_notifications(
    session: Session,
    *,
    user_id: int,
    limit: int = 50,
    offset: int = 0,
) -> NotificationPage:
    """Return the newest notifications for ``user_id`` with their deliveries."""

    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    if offset < 0:
        raise ValidationError("offset must not be negative")

    repository = NotificationRepository(session)
    return NotificationPage(
        notifications=list(repository.list_for_user(user_id, limit=limit, offset=offset)),
        unread_count=repository.count_unread(user_id),
    )


def mark_notification_as_read(session: Session, *, notification_id: int, user_id: int) -> None:
    repository = NotificationRepository(session)
    if not repository.mark_as_read(
        notification_id, user_id=user_id, read_at=now_in_app_timezone()
    ):
        raise NotFoundError("Notification not found")


def mark_all_notifications_as_read(session: Session, *, user_id: int) -> int:
    updated = NotificationRepository(session).mark_all_as_read(
        user_id, read_at=now_in_app_timezone()
    )
    logger.info("Marked %d notification(s) as read for user %s", updated, user_id)
    return updated


def cleanup_old_notifications(session: Session, *, days_old: int = 90) -> int:
    """Delete read notifications older than ``days_old`` days."""

    if days_old < 1:
        raise ValidationError("days_old must be a positive number of days")

    cutoff = now_in_app_timezone() - timedelta(days=days_old)
    deleted = NotificationRepository(session).delete_read_before(cutoff)
    logger.info("Cleaned up %d notification(s) older than %d days", deleted, days_old)
    return deleted


__all__ = [
    "NotificationPage",
    "cleanup_old_notifications",
    "get_user_notifications",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
]
