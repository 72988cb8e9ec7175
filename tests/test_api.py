"""Integration tests for the HTTP endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from approvals.bootstrap import build_services
from approvals.config import Settings
from approvals.domain.entities import UserRole


@pytest.fixture
def services(session_factory, push_sender, sms_sender, email_sender):
    return build_services(
        Settings(database_url="sqlite://", reminder_enabled=False),
        session_factory,
        push_sender=push_sender,
        sms_sender=sms_sender,
        email_sender=email_sender,
    )


@pytest.fixture
def client(services):
    from main import create_app

    app = create_app(services, start_scheduler=False)
    with TestClient(app) as test_client:
        yield test_client


def _as(user) -> dict[str, str]:
    return {"X-User-Id": str(user.id)}


def test_project_approval_flow(client, services, admin, make_user) -> None:
    first, second = make_user(), make_user()

    response = client.post(
        "/projects/",
        json={
            "title": "Reading corner",
            "description": "Shelves and beanbags",
            "proposed_amount": "750.00",
            "required_approvals": 2,
        },
        headers=_as(admin),
    )
    assert response.status_code == 201
    project = response.json()
    assert project["status"] == "PENDING"
    assert project["current_approvals"] == 0

    response = client.get("/projects/pending/me", headers=_as(first))
    assert [item["id"] for item in response.json()] == [project["id"]]

    for user in (first, second):
        response = client.post(
            f"/projects/{project['id']}/accept", json={"note": "Count me in"}, headers=_as(user)
        )
        assert response.status_code == 201

    response = client.post(f"/projects/{project['id']}/accept", headers=_as(first))
    assert response.status_code == 400

    response = client.get(f"/projects/{project['id']}", headers=_as(first))
    assert response.json()["status"] == "APPROVED"

    response = client.post(
        f"/projects/{project['id']}/assign",
        json={"assigned_to_id": first.id},
        headers=_as(admin),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "ASSIGNED"

    response = client.get(f"/projects/{project['id']}/acceptances", headers=_as(admin))
    assert {item["user_id"] for item in response.json()} == {first.id, second.id}

    services.runner.drain(timeout=30)
    response = client.get("/notifications/", headers=_as(second))
    body = response.json()
    titles = {item["title"] for item in body["notifications"]}
    assert "New Project: Reading corner" in titles
    assert "Project Update: Reading corner" in titles
    assert body["unread_count"] == len(body["notifications"])

    response = client.patch("/notifications/read-all", headers=_as(second))
    assert response.json()["updated"] == body["unread_count"]


def test_requests_without_identity_are_rejected(client) -> None:
    assert client.get("/projects/").status_code == 401


def test_domain_errors_map_to_status_codes(client, admin, make_user) -> None:
    user = make_user()
    payload = {"title": "Reading corner", "proposed_amount": "750", "required_approvals": 1}

    assert client.post("/projects/", json=payload, headers=_as(user)).status_code == 403
    assert client.get("/projects/999", headers=_as(user)).status_code == 404

    bad = dict(payload, required_approvals=20)
    assert client.post("/projects/", json=bad, headers=_as(admin)).status_code == 400

    project = client.post("/projects/", json=payload, headers=_as(admin)).json()
    assert client.delete(f"/projects/{project['id']}", headers=_as(user)).status_code == 403
    assert client.delete(f"/projects/{project['id']}", headers=_as(admin)).status_code == 200
    assert client.get(f"/projects/{project['id']}", headers=_as(admin)).status_code == 404
    response = client.post(f"/projects/{project['id']}/accept", headers=_as(user))
    assert response.status_code == 404

    assert client.patch("/notifications/999/read", headers=_as(user)).status_code == 404


def test_admin_endpoints(client, admin, make_user) -> None:
    user = make_user(role=UserRole.USER)

    assert client.get("/reminders/stats", headers=_as(user)).status_code == 403
    response = client.get("/reminders/stats", headers=_as(admin))
    assert response.status_code == 200
    assert response.json()["threshold_days"] == 7
    assert response.json()["is_running"] is False

    assert client.get("/reminders/projects", headers=_as(admin)).json() == []
    assert client.post("/reminders/trigger", headers=_as(admin)).status_code == 202

    response = client.delete("/notifications/cleanup?days_old=10", headers=_as(admin))
    assert response.status_code == 422
    response = client.delete("/notifications/cleanup?days_old=30", headers=_as(admin))
    assert response.json() == {"deleted": 0}

    response = client.get("/projects/stats", headers=_as(admin))
    assert response.json()["total"] == 0


def test_current_user_profile_updates(client, make_user) -> None:
    user = make_user(push_token=None)

    response = client.get("/users/me", headers=_as(user))
    assert response.status_code == 200
    assert response.json()["has_push_token"] is False
    assert response.json()["preferences"]["inApp"] is True

    response = client.put(
        "/users/push-token", json={"push_token": "device-42"}, headers=_as(user)
    )
    assert response.status_code == 200
    assert response.json()["has_push_token"] is True

    response = client.put(
        "/users/notification-preferences",
        json={"sms": False, "inApp": False},
        headers=_as(user),
    )
    assert response.status_code == 200
    assert response.json()["preferences"] == {
        "push": True,
        "sms": False,
        "email": True,
        "inApp": False,
    }

    response = client.put(
        "/users/notification-preferences", json={"fax": True}, headers=_as(user)
    )
    assert response.status_code == 422
