"""SQLAlchemy model for the user table."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String

from approvals.infrastructure.database import Base
from approvals.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of a workflow participant."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=True, unique=True, index=True)
    phone = Column(String(32), nullable=True)
    push_token = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default="USER", index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    notification_preferences = Column(JSON, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["UserModel"]
