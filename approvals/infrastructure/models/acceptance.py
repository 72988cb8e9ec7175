"""SQLAlchemy model for project acceptances."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from approvals.infrastructure.database import Base
from approvals.utils import now_in_app_naive_datetime


class AcceptanceModel(Base):
    """Database representation of one user's approval of a project."""

    __tablename__ = "project_acceptance"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_acceptance_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer, ForeignKey("project.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    note = Column(String(500), nullable=True)
    accepted_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    project = relationship("ProjectModel", back_populates="acceptances")


__all__ = ["AcceptanceModel"]
