"""Use case for editing a project's details."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from approvals.domain.entities import Project, ProjectStatus
from approvals.domain.errors import ValidationError
from approvals.infrastructure.repositories import ProjectRepository, UserRepository
from approvals.utils import now_in_app_timezone
from .validators import (
    ensure_can_manage,
    load_live_project,
    normalize_amount,
    normalize_description,
    normalize_title,
    validate_required_approvals,
)

logger = logging.getLogger(__name__)


def update_project(
    session: Session,
    *,
    project_id: int,
    actor_id: int,
    title: str | None = None,
    description: str | None = None,
    proposed_amount: Decimal | int | float | str | None = None,
    required_approvals: int | None = None,
) -> Project:
    """Update the provided fields of a live project."""

    project = load_live_project(session, project_id)
    ensure_can_manage(project, UserRepository(session).get(actor_id))

    changes: dict[str, Any] = {}
    if title is not None:
        changes["title"] = normalize_title(title)
    if description is not None:
        changes["description"] = normalize_description(description)
    if proposed_amount is not None:
        changes["proposed_amount"] = normalize_amount(proposed_amount)
    if required_approvals is not None:
        required = validate_required_approvals(required_approvals)
        if required != project.required_approvals:
            if project.status is not ProjectStatus.PENDING:
                raise ValidationError(
                    "Required approvals can only change while the project is pending"
                )
            if required <= project.current_approvals:
                raise ValidationError(
                    "Required approvals must exceed the approvals already received"
                )
            changes["required_approvals"] = required

    if not changes:
        return project

    repository = ProjectRepository(session)
    if not repository.patch(project_id, changes, updated_at=now_in_app_timezone()):
        load_live_project(session, project_id)
        raise ValidationError("Project changed while it was being updated")

    logger.info("Project %s updated by user %s: %s", project_id, actor_id, sorted(changes))
    return repository.get(project_id)
