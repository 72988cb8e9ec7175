"""SQLAlchemy model for proposed projects."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from approvals.infrastructure.database import Base
from approvals.utils import now_in_app_naive_datetime


class ProjectModel(Base):
    """Database representation of a project and its approval counter."""

    __tablename__ = "project"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    proposed_amount = Column(Numeric(14, 2), nullable=False)
    required_approvals = Column(Integer, nullable=False, default=1)
    current_approvals = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="PENDING", index=True)
    created_by = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    assigned_to = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True)
    deleted_at = Column(DateTime(), nullable=True)
    reminder_sent_at = Column(DateTime(), nullable=True)

    acceptances = relationship(
        "AcceptanceModel",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["ProjectModel"]
