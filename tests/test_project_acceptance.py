"""Tests for accepting projects and the approval threshold transition."""

from __future__ import annotations

import threading

import pytest

from approvals.application.use_cases.projects import (
    accept_project,
    create_project,
    delete_project,
    get_project,
    list_project_acceptances,
)
from approvals.domain.entities import ProjectStatus
from approvals.domain.errors import NotFoundError, ProjectDeletedError, ValidationError
from approvals.infrastructure.repositories import ProjectRepository


@pytest.fixture
def project(session, admin, recording_notifier):
    return create_project(
        session,
        notifier=recording_notifier,
        title="Community garden",
        description="Raised beds for the courtyard",
        proposed_amount="2500.50",
        required_approvals=2,
        created_by=admin.id,
    )


def test_accept_increments_counter_and_notifies_creator(
    session, project, make_user, recording_notifier
) -> None:
    user = make_user()

    acceptance = accept_project(
        session,
        notifier=recording_notifier,
        project_id=project.id,
        user_id=user.id,
        note="  Happy to help  ",
    )

    assert acceptance.project_id == project.id
    assert acceptance.user_id == user.id
    assert acceptance.note == "Happy to help"

    refreshed = get_project(session, project.id)
    assert refreshed.current_approvals == 1
    assert refreshed.status is ProjectStatus.PENDING

    assert recording_notifier.events("notify_project_accepted") == [
        {
            "project_id": project.id,
            "project_title": "Community garden",
            "accepted_by_id": user.id,
            "creator_id": project.created_by,
        }
    ]
    assert recording_notifier.events("notify_project_approved") == []


def test_threshold_acceptance_approves_project_once(
    session, project, make_user, recording_notifier
) -> None:
    first, second = make_user(), make_user()

    accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=first.id)
    accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=second.id)

    refreshed = get_project(session, project.id)
    assert refreshed.status is ProjectStatus.APPROVED
    assert refreshed.current_approvals == 2
    assert len(recording_notifier.events("notify_project_accepted")) == 2
    assert recording_notifier.events("notify_project_approved") == [
        {
            "project_id": project.id,
            "project_title": "Community garden",
            "creator_id": project.created_by,
        }
    ]


def test_accept_after_approval_is_rejected(session, project, make_user, recording_notifier) -> None:
    users = [make_user() for _ in range(3)]
    for user in users[:2]:
        accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=user.id)

    with pytest.raises(ValidationError, match="no longer accepting approvals"):
        accept_project(
            session, notifier=recording_notifier, project_id=project.id, user_id=users[2].id
        )

    assert get_project(session, project.id).current_approvals == 2


def test_duplicate_acceptance_is_rejected(session, project, make_user, recording_notifier) -> None:
    user = make_user()
    accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=user.id)

    with pytest.raises(ValidationError, match="already accepted"):
        accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=user.id)

    assert get_project(session, project.id).current_approvals == 1
    assert len(list_project_acceptances(session, project.id)) == 1


def test_duplicate_acceptance_rolls_back_inside_store(session, project, make_user) -> None:
    """The unique constraint is enforced by the atomic write itself."""

    user = make_user()
    repository = ProjectRepository(session)
    repository.record_acceptance(
        project_id=project.id, user_id=user.id, note=None, accepted_at=project.created_at
    )

    with pytest.raises(ValidationError):
        repository.record_acceptance(
            project_id=project.id, user_id=user.id, note=None, accepted_at=project.created_at
        )

    assert repository.get(project.id).current_approvals == 1


def test_accept_missing_project_raises_not_found(session, make_user, recording_notifier) -> None:
    user = make_user()

    with pytest.raises(NotFoundError):
        accept_project(session, notifier=recording_notifier, project_id=999, user_id=user.id)


def test_accept_deleted_project_is_rejected(
    session, project, admin, make_user, recording_notifier
) -> None:
    user = make_user()
    delete_project(session, notifier=recording_notifier, project_id=project.id, actor_id=admin.id)

    with pytest.raises(ProjectDeletedError) as exc_info:
        accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=user.id)

    assert isinstance(exc_info.value, NotFoundError)
    assert isinstance(exc_info.value, ValidationError)
    assert recording_notifier.events("notify_project_accepted") == []


def test_accept_by_inactive_user_raises_not_found(
    session, project, make_user, recording_notifier
) -> None:
    user = make_user(is_active=False)

    with pytest.raises(NotFoundError):
        accept_project(session, notifier=recording_notifier, project_id=project.id, user_id=user.id)


def test_note_longer_than_limit_is_rejected(
    session, project, make_user, recording_notifier
) -> None:
    user = make_user()

    with pytest.raises(ValidationError):
        accept_project(
            session,
            notifier=recording_notifier,
            project_id=project.id,
            user_id=user.id,
            note="x" * 501,
        )

    assert get_project(session, project.id).current_approvals == 0


def test_concurrent_acceptances_cross_threshold_exactly_once(
    session_factory, admin, make_user, recording_notifier
) -> None:
    with session_factory() as db:
        project = create_project(
            db,
            notifier=recording_notifier,
            title="Shared workshop",
            description="",
            proposed_amount=900,
            required_approvals=3,
            created_by=admin.id,
        )
    users = [make_user() for _ in range(6)]
    barrier = threading.Barrier(len(users))
    outcomes: list[str] = []
    lock = threading.Lock()

    def accept(user_id: int) -> None:
        with session_factory() as db:
            barrier.wait()
            try:
                accept_project(
                    db, notifier=recording_notifier, project_id=project.id, user_id=user_id
                )
            except ValidationError:
                result = "rejected"
            else:
                result = "accepted"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=accept, args=(user.id,)) for user in users]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert outcomes.count("accepted") == 3
    assert outcomes.count("rejected") == 3

    with session_factory() as db:
        refreshed = get_project(db, project.id)
        assert refreshed.status is ProjectStatus.APPROVED
        assert refreshed.current_approvals == 3
        assert len(list_project_acceptances(db, project.id)) == 3

    assert len(recording_notifier.events("notify_project_approved")) == 1
    assert len(recording_notifier.events("notify_project_accepted")) == 3


def test_accept_succeeds_when_notifications_cannot_be_scheduled(
    session, project, make_user, notifier, runner, caplog
) -> None:
    user = make_user()
    runner.drain()
    runner.shutdown()

    with caplog.at_level("ERROR"):
        acceptance = accept_project(
            session, notifier=notifier, project_id=project.id, user_id=user.id
        )

    assert acceptance.user_id == user.id
    assert get_project(session, project.id).current_approvals == 1
    assert "Could not schedule notify_project_accepted" in caplog.text
