"""SQLAlchemy model for per-channel notification deliveries."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from approvals.infrastructure.database import Base
from approvals.utils import now_in_app_naive_datetime


class DeliveryModel(Base):
    """Database representation of one channel attempt for a notification."""

    __tablename__ = "notification_delivery"

    id = Column(Integer, primary_key=True, index=True)
    notification_id = Column(
        Integer,
        ForeignKey("notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    channel = Column(String(10), nullable=False)
    status = Column(String(10), nullable=False)
    error_message = Column(Text, nullable=True)
    delivered_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    notification = relationship("NotificationModel", back_populates="deliveries")


__all__ = ["DeliveryModel"]
