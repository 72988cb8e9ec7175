"""Use case for soft-deleting a project."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from approvals.application.use_cases.notifications import ProjectNotifier
from approvals.domain.entities import Project
from approvals.domain.errors import ProjectDeletedError
from approvals.infrastructure.repositories import ProjectRepository, UserRepository
from approvals.utils import now_in_app_timezone
from .validators import ensure_can_manage, load_live_project

logger = logging.getLogger(__name__)


def delete_project(
    session: Session,
    *,
    notifier: ProjectNotifier,
    project_id: int,
    actor_id: int,
) -> Project:
    """Mark the project as deleted and notify acceptors and the assignee."""

    project = load_live_project(session, project_id)
    ensure_can_manage(project, UserRepository(session).get(actor_id))

    repository = ProjectRepository(session)
    if not repository.soft_delete(project_id, deleted_at=now_in_app_timezone()):
        raise ProjectDeletedError()

    affected = repository.list_acceptor_ids(project_id)
    if project.assigned_to is not None:
        affected.add(project.assigned_to)
    logger.info("Project %s deleted by user %s", project_id, actor_id)

    if affected:
        notifier.fire(
            notifier.notify_project_deleted,
            project_id=project_id,
            project_title=project.title,
            user_ids=sorted(affected),
        )
    return repository.get(project_id, include_deleted=True)
