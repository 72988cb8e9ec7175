"""Use case for listing projects."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from approvals.domain.entities import Project, ProjectStatus
from approvals.domain.errors import ValidationError
from approvals.infrastructure.repositories import ProjectRepository


def list_projects(
    session: Session,
    *,
    status: ProjectStatus | None = None,
    created_by: int | None = None,
    assigned_to: int | None = None,
    include_deleted: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> Sequence[Project]:
    """Return projects matching the filters, newest first."""

    if skip < 0 or limit < 1:
        raise ValidationError("Invalid pagination parameters")
    return ProjectRepository(session).list(
        status=status,
        created_by=created_by,
        assigned_to=assigned_to,
        include_deleted=include_deleted,
        skip=skip,
        limit=limit,
    )
