"""Tests for creating, assigning, updating and deleting projects."""

from __future__ import annotations

from decimal import Decimal

import pytest

from approvals.application.use_cases.projects import (
    accept_project,
    assign_project,
    create_project,
    delete_project,
    get_project,
    get_project_stats,
    list_pending_projects_for_user,
    list_projects,
    update_project,
)
from approvals.domain.entities import ProjectStatus
from approvals.domain.errors import (
    ForbiddenError,
    NotFoundError,
    ProjectDeletedError,
    ValidationError,
)


def _create(session, notifier, admin, **overrides):
    values = {
        "title": "Bike shelter",
        "description": "Covered parking for twenty bikes",
        "proposed_amount": Decimal("4200"),
        "required_approvals": 2,
    }
    values.update(overrides)
    return create_project(session, notifier=notifier, created_by=admin.id, **values)


def test_create_project_starts_pending_and_announces(session, admin, recording_notifier) -> None:
    project = _create(session, recording_notifier, admin, title="  Bike shelter  ")

    assert project.id is not None
    assert project.title == "Bike shelter"
    assert project.status is ProjectStatus.PENDING
    assert project.current_approvals == 0
    assert project.proposed_amount == Decimal("4200.00")
    assert project.created_at is not None
    assert recording_notifier.events("notify_project_submitted") == [
        {"project_id": project.id, "project_title": "Bike shelter", "creator_id": admin.id}
    ]


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"title": "x" * 201},
        {"proposed_amount": 0},
        {"proposed_amount": "-10"},
        {"proposed_amount": "lots"},
        {"required_approvals": 0},
        {"required_approvals": 11},
        {"required_approvals": True},
    ],
)
def test_create_project_rejects_malformed_input(
    session, admin, recording_notifier, overrides
) -> None:
    with pytest.raises(ValidationError):
        _create(session, recording_notifier, admin, **overrides)

    assert recording_notifier.fired == []


def test_create_project_requires_admin(session, make_user, recording_notifier) -> None:
    user = make_user()

    with pytest.raises(ForbiddenError):
        _create(session, recording_notifier, user)


def test_assign_notifies_assignee_and_declined_acceptors(
    session, admin, make_user, recording_notifier
) -> None:
    project = _create(session, recording_notifier, admin)
    first, second = make_user(), make_user()
    for user in (first, second):
        accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=user.id)

    assigned = assign_project(
        session,
        notifier=recording_notifier,
        project_id=project.id,
        assigned_to_id=first.id,
        acting_admin_id=admin.id,
    )

    assert assigned.status is ProjectStatus.ASSIGNED
    assert assigned.assigned_to == first.id
    assert recording_notifier.events("notify_project_assigned") == [
        {
            "project_id": project.id,
            "project_title": project.title,
            "assigned_to_id": first.id,
            "assigned_by_id": admin.id,
        }
    ]
    assert recording_notifier.events("notify_project_declined") == [
        {"project_id": project.id, "project_title": project.title, "user_ids": [second.id]}
    ]


def test_assign_pending_project_skips_declined_when_nobody_else_accepted(
    session, admin, make_user, recording_notifier
) -> None:
    project = _create(session, recording_notifier, admin)
    user = make_user()

    assigned = assign_project(
        session,
        notifier=recording_notifier,
        project_id=project.id,
        assigned_to_id=user.id,
        acting_admin_id=admin.id,
    )

    assert assigned.status is ProjectStatus.ASSIGNED
    assert recording_notifier.events("notify_project_declined") == []


def test_assign_requires_admin(session, admin, make_user, recording_notifier) -> None:
    project = _create(session, recording_notifier, admin)
    user = make_user()

    with pytest.raises(ForbiddenError):
        assign_project(
            session,
            notifier=recording_notifier,
            project_id=project.id,
            assigned_to_id=user.id,
            acting_admin_id=user.id,
        )


def test_assign_to_inactive_user_fails(session, admin, make_user, recording_notifier) -> None:
    project = _create(session, recording_notifier, admin)
    inactive = make_user(is_active=False)

    with pytest.raises(NotFoundError):
        assign_project(
            session,
            notifier=recording_notifier,
            project_id=project.id,
            assigned_to_id=inactive.id,
            acting_admin_id=admin.id,
        )

    assert get_project(session, project.id).status is ProjectStatus.PENDING


def test_assigned_project_cannot_be_reassigned(
    session, admin, make_user, recording_notifier
) -> None:
    project = _create(session, recording_notifier, admin)
    first, second = make_user(), make_user()
    assign_project(
        session,
        notifier=recording_notifier,
        project_id=project.id,
        assigned_to_id=first.id,
        acting_admin_id=admin.id,
    )

    with pytest.raises(ValidationError):
        assign_project(
            session,
            notifier=recording_notifier,
            project_id=project.id,
            assigned_to_id=second.id,
            acting_admin_id=admin.id,
        )

    assert get_project(session, project.id).assigned_to == first.id


def test_assign_deleted_project_fails(session, admin, make_user, recording_notifier) -> None:
    project = _create(session, recording_notifier, admin)
    user = make_user()
    delete_project(session, notifier=recording_notifier, project_id=project.id, actor_id=admin.id)

    with pytest.raises(ProjectDeletedError):
        assign_project(
            session,
            notifier=recording_notifier,
            project_id=project.id,
            assigned_to_id=user.id,
            acting_admin_id=admin.id,
        )


def test_update_project_by_creator(session, admin, recording_notifier) -> None:
    project = _create(session, recording_notifier, admin)

    updated = update_project(
        session,
        project_id=project.id,
        actor_id=admin.id,
        title="Bigger bike shelter",
        proposed_amount="5100.75",
        required_approvals=3,
    )

    assert updated.title == "Bigger bike shelter"
    assert updated.proposed_amount == Decimal("5100.75")
    assert updated.required_approvals == 3
    assert updated.description == project.description
    assert updated.updated_at is not None


def test_update_project_rejects_other_users(session, admin, make_user, recording_notifier) -> None:
    project = _create(session, recording_notifier, admin)
    outsider = make_user()

    with pytest.raises(ForbiddenError):
        update_project(session, project_id=project.id, actor_id=outsider.id, title="Hijacked")


def test_update_deleted_project_fails(session, admin, recording_notifier) -> None:
    project = _create(session, recording_notifier, admin)
    delete_project(session, notifier=recording_notifier, project_id=project.id, actor_id=admin.id)

    with pytest.raises(ValidationError):
        update_project(session, project_id=project.id, actor_id=admin.id, title="Revived")


def test_update_cannot_lower_threshold_below_received_approvals(
    session, admin, make_user, recording_notifier
) -> None:
    project = _create(session, recording_notifier, admin, required_approvals=3)
    for user in (make_user(), make_user()):
        accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=user.id)

    with pytest.raises(ValidationError):
        update_project(session, project_id=project.id, actor_id=admin.id, required_approvals=2)

    assert get_project(session, project.id).required_approvals == 3


def test_delete_notifies_acceptors_and_assignee(
    session, admin, make_user, recording_notifier
) -> None:
    project = _create(session, recording_notifier, admin, required_approvals=3)
    acceptor, assignee = make_user(), make_user()
    accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=acceptor.id)
    assign_project(
        session,
        notifier=recording_notifier,
        project_id=project.id,
        assigned_to_id=assignee.id,
        acting_admin_id=admin.id,
    )

    deleted = delete_project(
        session, notifier=recording_notifier, project_id=project.id, actor_id=admin.id
    )

    assert deleted.status is ProjectStatus.DELETED
    assert deleted.deleted_at is not None
    assert recording_notifier.events("notify_project_deleted") == [
        {
            "project_id": project.id,
            "project_title": project.title,
            "user_ids": sorted([acceptor.id, assignee.id]),
        }
    ]


def test_delete_twice_fails(session, admin, recording_notifier) -> None:
    project = _create(session, recording_notifier, admin)
    delete_project(session, notifier=recording_notifier, project_id=project.id, actor_id=admin.id)

    with pytest.raises(ValidationError):
        delete_project(
            session, notifier=recording_notifier, project_id=project.id, actor_id=admin.id
        )


def test_delete_requires_creator_or_admin(session, admin, make_user, recording_notifier) -> None:
    project = _create(session, recording_notifier, admin)
    outsider = make_user()

    with pytest.raises(ForbiddenError):
        delete_project(
            session, notifier=recording_notifier, project_id=project.id, actor_id=outsider.id
        )


def test_deleted_projects_are_hidden_from_reads(session, admin, recording_notifier) -> None:
    kept = _create(session, recording_notifier, admin, title="Kept project")
    removed = _create(session, recording_notifier, admin, title="Removed project")
    delete_project(session, notifier=recording_notifier, project_id=removed.id, actor_id=admin.id)

    with pytest.raises(NotFoundError):
        get_project(session, removed.id)
    assert get_project(session, removed.id, include_deleted=True).status is ProjectStatus.DELETED

    assert [project.id for project in list_projects(session)] == [kept.id]
    assert {project.id for project in list_projects(session, include_deleted=True)} == {
        kept.id,
        removed.id,
    }
    assert list_projects(session, status=ProjectStatus.DELETED) == []


def test_list_pending_projects_for_user_excludes_accepted(
    session, admin, make_user, recording_notifier
) -> None:
    first = _create(session, recording_notifier, admin, title="First project")
    second = _create(session, recording_notifier, admin, title="Second project")
    user = make_user()
    accept_project(session, notifier=recording_notifier, project_id=first.id, user_id=user.id)

    pending = list_pending_projects_for_user(session, user.id)

    assert [project.id for project in pending] == [second.id]


def test_project_stats_count_live_projects(session, admin, make_user, recording_notifier) -> None:
    _create(session, recording_notifier, admin, title="Pending project")
    approved = _create(session, recording_notifier, admin, title="Approved", required_approvals=1)
    removed = _create(session, recording_notifier, admin, title="Removed project")
    accept_project(
        session, notifier=recording_notifier, project_id=approved.id, user_id=make_user().id
    )
    delete_project(session, notifier=recording_notifier, project_id=removed.id, actor_id=admin.id)

    stats = get_project_stats(session)

    assert stats.total == 2
    assert stats.by_status[ProjectStatus.PENDING] == 1
    assert stats.by_status[ProjectStatus.APPROVED] == 1
    assert stats.by_status[ProjectStatus.DELETED] == 1
    assert stats.by_status[ProjectStatus.ASSIGNED] == 0

