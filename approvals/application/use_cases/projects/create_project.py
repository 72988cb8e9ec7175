"""Use case for submitting a new project for approval."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from approvals.application.use_cases.notifications import ProjectNotifier
from approvals.domain.entities import Project, ProjectStatus
from approvals.domain.errors import NotFoundError
from approvals.infrastructure.repositories import ProjectRepository, UserRepository
from approvals.utils import now_in_app_timezone
from .validators import (
    ensure_admin,
    normalize_amount,
    normalize_description,
    normalize_title,
    validate_required_approvals,
)

logger = logging.getLogger(__name__)


def create_project(
    session: Session,
    *,
    notifier: ProjectNotifier,
    title: str,
    description: str | None,
    proposed_amount: Decimal | int | float | str,
    required_approvals: int = 1,
    created_by: int,
) -> Project:
    """Create a PENDING project and announce it to every active user."""

    entity = Project(
        id=None,
        title=normalize_title(title),
        description=normalize_description(description),
        proposed_amount=normalize_amount(proposed_amount),
        required_approvals=validate_required_approvals(required_approvals),
        current_approvals=0,
        status=ProjectStatus.PENDING,
        created_by=created_by,
        created_at=now_in_app_timezone(),
    )

    creator = UserRepository(session).get(created_by)
    if creator is None:
        raise NotFoundError("Creator not found")
    ensure_admin(creator, "Only administrators can create projects")

    project = ProjectRepository(session).create(entity)
    logger.info("Project %s created by user %s", project.id, created_by)

    notifier.fire(
        notifier.notify_project_submitted,
        project_id=project.id,
        project_title=project.title,
        creator_id=created_by,
    )
    return project
