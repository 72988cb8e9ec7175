"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from approvals.infrastructure.database import Base
from approvals.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    # Lookup only: deleting a project never removes its notifications.
    project_id = Column(Integer, nullable=True, index=True)
    type = Column(String(40), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    channels = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="PENDING")
    payload = Column(JSON, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    sent_at = Column(DateTime(), nullable=True)
    read_at = Column(DateTime(), nullable=True)

    deliveries = relationship(
        "DeliveryModel",
        back_populates="notification",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DeliveryModel.id",
        lazy="selectin",
    )


__all__ = ["NotificationModel"]
