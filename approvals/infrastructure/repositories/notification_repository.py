"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from approvals.domain.entities import (
    Delivery,
    DeliveryChannel,
    DeliveryStatus,
    Notification,
    NotificationStatus,
    NotificationType,
)
from approvals.infrastructure.models import DeliveryModel, NotificationModel
from approvals.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: int,
        *,
        limit: int | None = 50,
        offset: int = 0,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: int) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .count()
        )

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def finalize(
        self,
        notification_id: int,
        *,
        deliveries: Iterable[Delivery],
        status: NotificationStatus,
        sent_at: datetime | None,
    ) -> Notification:
        """Store the channel outcomes and the aggregated status in one commit."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)

        for delivery in deliveries:
            model.deliveries.append(
                DeliveryModel(
                    channel=DeliveryChannel(delivery.channel).value,
                    status=DeliveryStatus(delivery.status).value,
                    error_message=delivery.error_message,
                    delivered_at=ensure_app_naive_datetime(delivery.delivered_at),
                    created_at=ensure_app_naive_datetime(
                        delivery.created_at or now_in_app_timezone()
                    ),
                )
            )
        model.status = NotificationStatus(status).value
        model.sent_at = ensure_app_naive_datetime(sent_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: int, *, user_id: int, read_at: datetime) -> bool:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: ensure_app_naive_datetime(read_at),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def mark_all_as_read(self, user_id: int, *, read_at: datetime) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .update(
                {
                    NotificationModel.is_read: True,
                    NotificationModel.read_at: ensure_app_naive_datetime(read_at),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def delete_read_before(self, cutoff: datetime) -> int:
        """Delete read notifications created before ``cutoff`` with their deliveries."""

        naive_cutoff = ensure_app_naive_datetime(cutoff)
        stale_ids = select(NotificationModel.id).where(
            NotificationModel.created_at < naive_cutoff,
            NotificationModel.is_read.is_(True),
        )
        self.session.query(DeliveryModel).filter(
            DeliveryModel.notification_id.in_(stale_ids)
        ).delete(synchronize_session=False)
        deleted = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.created_at < naive_cutoff,
                NotificationModel.is_read.is_(True),
            )
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.user_id = notification.user_id
        model.project_id = notification.project_id
        model.type = NotificationType(notification.type).value
        model.title = notification.title
        model.message = notification.message
        model.channels = [DeliveryChannel(channel).value for channel in notification.channels]
        model.status = NotificationStatus(notification.status).value
        model.payload = notification.payload or {}
        model.is_read = notification.is_read
        model.sent_at = ensure_app_naive_datetime(notification.sent_at)
        model.read_at = ensure_app_naive_datetime(notification.read_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            project_id=model.project_id,
            channels=[DeliveryChannel(channel) for channel in model.channels or []],
            status=NotificationStatus(model.status),
            payload=model.payload or {},
            is_read=model.is_read,
            created_at=ensure_app_timezone(model.created_at),
            sent_at=ensure_app_timezone(model.sent_at),
            read_at=ensure_app_timezone(model.read_at),
            deliveries=[
                NotificationRepository._delivery_to_entity(delivery)
                for delivery in model.deliveries
            ],
        )

    @staticmethod
    def _delivery_to_entity(model: DeliveryModel) -> Delivery:
        return Delivery(
            id=model.id,
            notification_id=model.notification_id,
            channel=DeliveryChannel(model.channel),
            status=DeliveryStatus(model.status),
            error_message=model.error_message,
            delivered_at=ensure_app_timezone(model.delivered_at),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
