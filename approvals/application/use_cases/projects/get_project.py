"""Use case for retrieving a single project."""

from sqlalchemy.orm import Session

from approvals.domain.entities import Project
from approvals.domain.errors import NotFoundError
from approvals.infrastructure.repositories import ProjectRepository


def get_project(session: Session, project_id: int, *, include_deleted: bool = False) -> Project:
    """Return the project identified by ``project_id`` or raise an error."""

    project = ProjectRepository(session).get(project_id, include_deleted=include_deleted)
    if project is None:
        raise NotFoundError("Project not found")
    return project
