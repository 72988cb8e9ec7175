"""Domain entity representing a proposed project."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from .user import User


class ProjectStatus(str, Enum):
    """Lifecycle states of a project.

    ``PENDING -> APPROVED -> ASSIGNED`` with ``DELETED`` reachable from any
    non-terminal state.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ASSIGNED = "ASSIGNED"
    DELETED = "DELETED"


@dataclass
class Project:
    """Core attributes describing a project awaiting approvals."""

    id: int | None
    title: str
    description: str
    proposed_amount: Decimal
    required_approvals: int
    current_approvals: int
    status: ProjectStatus
    created_by: int
    assigned_to: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    reminder_sent_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None or self.status is ProjectStatus.DELETED

    def can_be_managed_by(self, user: User | None) -> bool:
        """Return ``True`` when ``user`` is the creator or an administrator."""

        if user is None:
            return False
        return user.id == self.created_by or user.is_admin()


__all__ = ["Project", "ProjectStatus"]
