"""Use case for listing the projects still awaiting a user's decision."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from approvals.domain.entities import Project
from approvals.infrastructure.repositories import ProjectRepository


def list_pending_projects_for_user(session: Session, user_id: int) -> Sequence[Project]:
    """Return pending projects ``user_id`` has not accepted yet."""

    return ProjectRepository(session).list_pending_not_accepted_by(user_id)
