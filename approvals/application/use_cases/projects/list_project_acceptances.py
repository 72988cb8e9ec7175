"""Use case for listing the acceptances of a project."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from approvals.domain.entities import Acceptance
from approvals.infrastructure.repositories import ProjectRepository
from .get_project import get_project


def list_project_acceptances(session: Session, project_id: int) -> Sequence[Acceptance]:
    get_project(session, project_id)
    return ProjectRepository(session).list_acceptances(project_id)
