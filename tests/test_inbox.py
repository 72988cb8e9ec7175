"""Tests for reading and cleaning up notification inboxes."""

from __future__ import annotations

from datetime import timedelta

import pytest

from approvals.application.use_cases.notifications import (
    cleanup_old_notifications,
    get_user_notifications,
    mark_all_notifications_as_read,
    mark_notification_as_read,
)
from approvals.domain.entities import (
    Delivery,
    DeliveryChannel,
    DeliveryStatus,
    Notification,
    NotificationStatus,
    NotificationType,
)
from approvals.domain.errors import NotFoundError, ValidationError
from approvals.infrastructure.models import DeliveryModel
from approvals.infrastructure.repositories import NotificationRepository
from approvals.utils import now_in_app_timezone


@pytest.fixture
def add_notification(session_factory):
    def factory(user_id: int, *, title: str = "Hello", age_days: float = 0, is_read: bool = False):
        created_at = now_in_app_timezone() - timedelta(days=age_days)
        with session_factory() as db:
            repository = NotificationRepository(db)
            notification = repository.create(
                Notification(
                    id=None,
                    user_id=user_id,
                    type=NotificationType.REMINDER,
                    title=title,
                    message="Please review",
                    channels=[DeliveryChannel.EMAIL],
                    is_read=is_read,
                    read_at=created_at if is_read else None,
                    created_at=created_at,
                )
            )
            return repository.finalize(
                notification.id,
                deliveries=[
                    Delivery(
                        id=None,
                        notification_id=notification.id,
                        channel=DeliveryChannel.EMAIL,
                        status=DeliveryStatus.SUCCESS,
                        delivered_at=created_at,
                    )
                ],
                status=NotificationStatus.SENT,
                sent_at=created_at,
            )

    return factory


def test_notifications_are_paged_newest_first(session, make_user, add_notification) -> None:
    user = make_user()
    for index, age in enumerate((3, 2, 1)):
        add_notification(user.id, title=f"n{index}", age_days=age, is_read=index == 0)

    page = get_user_notifications(session, user_id=user.id, limit=2, offset=0)

    assert [notification.title for notification in page.notifications] == ["n2", "n1"]
    assert page.unread_count == 2
    assert all(len(notification.deliveries) == 1 for notification in page.notifications)

    rest = get_user_notifications(session, user_id=user.id, limit=2, offset=2)
    assert [notification.title for notification in rest.notifications] == ["n0"]


@pytest.mark.parametrize(("limit", "offset"), [(0, 0), (101, 0), (10, -1)])
def test_invalid_pagination_is_rejected(session, make_user, limit, offset) -> None:
    user = make_user()

    with pytest.raises(ValidationError):
        get_user_notifications(session, user_id=user.id, limit=limit, offset=offset)


def test_mark_as_read_only_for_owner(session, make_user, add_notification) -> None:
    owner, stranger = make_user(), make_user()
    notification = add_notification(owner.id)

    with pytest.raises(NotFoundError):
        mark_notification_as_read(session, notification_id=notification.id, user_id=stranger.id)

    mark_notification_as_read(session, notification_id=notification.id, user_id=owner.id)

    stored = NotificationRepository(session).get(notification.id)
    assert stored.is_read is True
    assert stored.read_at is not None


def test_mark_all_as_read_returns_count(session, make_user, add_notification) -> None:
    user, other = make_user(), make_user()
    add_notification(user.id)
    add_notification(user.id)
    add_notification(user.id, is_read=True)
    add_notification(other.id)

    assert mark_all_notifications_as_read(session, user_id=user.id) == 2
    assert get_user_notifications(session, user_id=user.id).unread_count == 0
    assert get_user_notifications(session, user_id=other.id).unread_count == 1


def test_cleanup_removes_only_old_read_notifications(
    session, make_user, add_notification
) -> None:
    user = make_user()
    old_read = add_notification(user.id, title="old read", age_days=120, is_read=True)
    add_notification(user.id, title="old unread", age_days=120)
    add_notification(user.id, title="recent read", age_days=5, is_read=True)

    assert cleanup_old_notifications(session, days_old=90) == 1

    remaining = get_user_notifications(session, user_id=user.id).notifications
    assert sorted(notification.title for notification in remaining) == [
        "old unread",
        "recent read",
    ]
    orphaned = (
        session.query(DeliveryModel)
        .filter(DeliveryModel.notification_id == old_read.id)
        .count()
    )
    assert orphaned == 0
