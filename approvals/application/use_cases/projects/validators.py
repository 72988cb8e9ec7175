"""Validation helpers for project use cases."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy.orm import Session

from approvals.domain.entities import Project, User
from approvals.domain.errors import (
    ForbiddenError,
    NotFoundError,
    ProjectDeletedError,
    ValidationError,
)
from approvals.infrastructure.repositories import ProjectRepository, UserRepository

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 5000
NOTE_MAX_LENGTH = 500
MIN_REQUIRED_APPROVALS = 1
MAX_REQUIRED_APPROVALS = 10
MAX_AMOUNT = Decimal("999999999999.99")


def normalize_title(title: Any) -> str:
    if not isinstance(title, str):
        raise ValidationError("Title is required")
    normalized = title.strip()
    if len(normalized) < TITLE_MIN_LENGTH:
        raise ValidationError(f"Title must be at least {TITLE_MIN_LENGTH} characters")
    if len(normalized) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must not exceed {TITLE_MAX_LENGTH} characters")
    return normalized


def normalize_description(description: Any) -> str:
    if description is None:
        return ""
    if not isinstance(description, str):
        raise ValidationError("Description must be text")
    normalized = description.strip()
    if len(normalized) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters"
        )
    return normalized


def normalize_amount(amount: Any) -> Decimal:
    """Return ``amount`` as a positive two-decimal :class:`Decimal`."""

    if isinstance(amount, bool):
        raise ValidationError("Proposed amount must be a number")
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("Proposed amount must be a number") from exc
    if not value.is_finite() or value <= 0:
        raise ValidationError("Proposed amount must be positive")
    if value > MAX_AMOUNT:
        raise ValidationError("Proposed amount is too large")
    return value.quantize(Decimal("0.01"))


def validate_required_approvals(required_approvals: Any) -> int:
    if isinstance(required_approvals, bool) or not isinstance(required_approvals, int):
        raise ValidationError("Required approvals must be an integer")
    if not MIN_REQUIRED_APPROVALS <= required_approvals <= MAX_REQUIRED_APPROVALS:
        raise ValidationError(
            f"Required approvals must be between {MIN_REQUIRED_APPROVALS} "
            f"and {MAX_REQUIRED_APPROVALS}"
        )
    return required_approvals


def normalize_note(note: str | None) -> str | None:
    if note is None:
        return None
    normalized = note.strip()
    if len(normalized) > NOTE_MAX_LENGTH:
        raise ValidationError(f"Note must not exceed {NOTE_MAX_LENGTH} characters")
    return normalized or None


def load_live_project(session: Session, project_id: int) -> Project:
    """Return the project unless it is missing or soft-deleted."""

    project = ProjectRepository(session).get(project_id, include_deleted=True)
    if project is None:
        raise NotFoundError("Project not found")
    if project.is_deleted:
        raise ProjectDeletedError()
    return project


def load_active_user(session: Session, user_id: int, *, label: str = "User") -> User:
    user = UserRepository(session).get(user_id)
    if user is None or not user.is_active:
        raise NotFoundError(f"{label} not found")
    return user


def ensure_can_manage(project: Project, actor: User | None) -> None:
    if not project.can_be_managed_by(actor):
        raise ForbiddenError("You do not have permission to modify this project")


def ensure_admin(actor: User | None, message: str) -> User:
    if actor is None or not actor.is_admin():
        raise ForbiddenError(message)
    return actor


__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "MAX_REQUIRED_APPROVALS",
    "MIN_REQUIRED_APPROVALS",
    "NOTE_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "TITLE_MIN_LENGTH",
    "ensure_admin",
    "ensure_can_manage",
    "load_active_user",
    "load_live_project",
    "normalize_amount",
    "normalize_description",
    "normalize_note",
    "normalize_title",
    "validate_required_approvals",
]
