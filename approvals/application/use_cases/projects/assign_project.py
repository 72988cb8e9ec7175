"""Use case for assigning an approved project to a user."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from approvals.application.use_cases.notifications import ProjectNotifier
from approvals.domain.entities import Project, ProjectStatus
from approvals.domain.errors import ValidationError
from approvals.infrastructure.repositories import ProjectRepository, UserRepository
from approvals.utils import now_in_app_timezone
from .validators import ensure_admin, load_active_user, load_live_project

logger = logging.getLogger(__name__)


def assign_project(
    session: Session,
    *,
    notifier: ProjectNotifier,
    project_id: int,
    assigned_to_id: int,
    acting_admin_id: int,
) -> Project:
    """Assign the project and tell the other acceptors they were not chosen.

    Assigning a project that is still PENDING is allowed and acts as an
    administrative override of the approval threshold.
    """

    ensure_admin(
        UserRepository(session).get(acting_admin_id),
        "Only administrators can assign projects",
    )
    project = load_live_project(session, project_id)
    if project.status is ProjectStatus.ASSIGNED:
        raise ValidationError("Project has already been assigned")
    load_active_user(session, assigned_to_id, label="Assignee")

    repository = ProjectRepository(session)
    if not repository.assign(
        project_id, assigned_to=assigned_to_id, assigned_at=now_in_app_timezone()
    ):
        # Lost a race with a concurrent delete or assignment.
        load_live_project(session, project_id)
        raise ValidationError("Project has already been assigned")

    assigned = repository.get(project_id)
    declined = repository.list_acceptor_ids(project_id) - {assigned_to_id}
    logger.info(
        "Project %s assigned to user %s by admin %s", project_id, assigned_to_id, acting_admin_id
    )

    notifier.fire(
        notifier.notify_project_assigned,
        project_id=project_id,
        project_title=project.title,
        assigned_to_id=assigned_to_id,
        assigned_by_id=acting_admin_id,
    )
    if declined:
        notifier.fire(
            notifier.notify_project_declined,
            project_id=project_id,
            project_title=project.title,
            user_ids=sorted(declined),
        )
    return assigned
