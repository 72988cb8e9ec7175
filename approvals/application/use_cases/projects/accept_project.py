"""Use case for recording a user's acceptance of a project."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from approvals.application.use_cases.notifications import ProjectNotifier
from approvals.domain.entities import Acceptance, ProjectStatus
from approvals.domain.errors import ValidationError
from approvals.infrastructure.repositories import ProjectRepository
from approvals.utils import now_in_app_timezone
from .validators import load_active_user, load_live_project, normalize_note

logger = logging.getLogger(__name__)


def accept_project(
    session: Session,
    *,
    notifier: ProjectNotifier,
    project_id: int,
    user_id: int,
    note: str | None = None,
) -> Acceptance:
    """Accept ``project_id`` on behalf of ``user_id``.

    The checks below only produce friendly errors early. The PENDING
    precondition, the duplicate check, the increment and the APPROVED
    transition are enforced again inside
    :meth:`ProjectRepository.record_acceptance`, which is the only write.
    """

    normalized_note = normalize_note(note)
    project = load_live_project(session, project_id)
    load_active_user(session, user_id)

    repository = ProjectRepository(session)
    if project.status is not ProjectStatus.PENDING:
        raise ValidationError("Project is no longer accepting approvals")
    if repository.has_acceptance(project_id, user_id):
        raise ValidationError("You have already accepted this project")

    record = repository.record_acceptance(
        project_id=project_id,
        user_id=user_id,
        note=normalized_note,
        accepted_at=now_in_app_timezone(),
    )
    logger.info(
        "Project %s accepted by user %s%s",
        project_id,
        user_id,
        " (approval threshold reached)" if record.approved_now else "",
    )

    notifier.fire(
        notifier.notify_project_accepted,
        project_id=project_id,
        project_title=project.title,
        accepted_by_id=user_id,
        creator_id=project.created_by,
    )
    if record.approved_now:
        notifier.fire(
            notifier.notify_project_approved,
            project_id=project_id,
            project_title=project.title,
            creator_id=project.created_by,
        )
    return record.acceptance
