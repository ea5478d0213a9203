"""HTTP adapter: sessions, parameter merging and status codes."""

from __future__ import annotations

from datetime import datetime

from conftest import FakeEngine, StoreError, make_settings
from fastapi.testclient import TestClient
from taskgate.service.app import create_app


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "taskgate"}


def test_missing_session_is_unauthenticated(client, engine):
    response = client.get("/api/team/7/todos")

    assert response.status_code == 401
    assert response.json() == {"status": "failed", "error": "unauthenticated"}
    assert engine.statements == []


def test_forged_session_is_rejected(client, engine, settings):
    client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-token")

    response = client.get("/api/team/7/todos")

    assert response.status_code == 403
    assert response.json()["error"] == "invalidSession"
    assert engine.statements == []


def test_session_signed_with_another_secret_is_rejected(engine, settings):
    other = create_app(make_settings(JWT_SECRET="someone-else"), engine=FakeEngine())
    token = other.state.taskgate.identity.issue(42, "ada@example.com")
    client = TestClient(create_app(settings, engine=engine))
    client.cookies.set(settings.SESSION_COOKIE_NAME, token)

    response = client.get("/api/team/all")

    assert response.status_code == 403


def test_query_runs_as_session_user(authed_client, engine):
    engine.handlers["get_team_todos"] = lambda call: [
        {"id": 1, "title": "a", "due_date": datetime(2025, 5, 1, 9, 30)},
    ]

    response = authed_client.get("/api/team/7/todos")

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "data": [{"id": 1, "title": "a", "due_date": "2025-05-01T09:30:00"}],
    }
    call = engine.calls[0]
    assert call.principal == 42
    assert call.args == [7]


def test_path_parameters_override_body(authed_client, engine):
    response = authed_client.put("/api/todo/3", json={"todo_id": 99, "title": "Renamed"})

    assert response.status_code == 200
    assert response.json() == {"status": "success", "data": []}
    call = engine.calls[0]
    assert call.name == "update_todo"
    assert call.args[:3] == [3, None, "Renamed"]


def test_non_numeric_path_parameter_is_invalid(authed_client, engine):
    response = authed_client.get("/api/todo/abc")

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "invalidParams"
    assert body["data"][0][0] == "todo_id"
    assert engine.statements == []


def test_invalid_body(authed_client, engine):
    response = authed_client.post(
        "/api/todo/create",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"status": "failed", "error": "invalidBody"}
    assert engine.statements == []


def test_body_must_be_an_object(authed_client):
    response = authed_client.post("/api/todo/create", json=[1, 2, 3])

    assert response.status_code == 400
    assert response.json()["error"] == "invalidBody"


def test_invalid_params_are_listed(authed_client):
    response = authed_client.post(
        "/api/todo/create",
        json={"created_by": 42, "team_id": 7, "title": "", "description": "", "status": 1},
    )

    assert response.status_code == 400
    assert response.json() == {
        "status": "failed",
        "error": "invalidParams",
        "data": [["title", "[string_too_short]"]],
    }


def test_pagination_from_query_string(authed_client, engine):
    response = authed_client.get("/api/team/7/todos", params={"page": 2, "itemsPerPage": 10})

    assert response.status_code == 200
    call = engine.calls[0]
    assert (call.limit, call.offset) == (10, 20)


def test_invalid_pagination(authed_client, engine):
    response = authed_client.get("/api/team/7/todos", params={"itemsPerPage": "lots"})

    assert response.status_code == 400
    assert response.json()["data"][0][0] == "itemsPerPage"


def test_store_failure_is_500(authed_client, engine):
    def fail(call):
        raise StoreError("permission denied for procedure delete_team")

    engine.handlers["delete_team"] = fail

    response = authed_client.delete("/api/team/7")

    assert response.status_code == 500
    assert response.json() == {
        "status": "failed",
        "error": "dbCallFailed",
        "data": "permission denied for procedure delete_team",
    }


def test_store_failure_is_redacted_in_production(engine):
    settings = make_settings(ENV="production")
    app = create_app(settings, engine=engine)
    client = TestClient(app)
    client.cookies.set(settings.SESSION_COOKIE_NAME, app.state.taskgate.identity.issue(42, "a@b.co"))

    def fail(call):
        raise StoreError("permission denied for procedure delete_team")

    engine.handlers["delete_team"] = fail

    response = client.delete("/api/team/7")

    assert response.status_code == 500
    assert response.json()["data"] == "The database call failed"


def test_literal_paths_win_over_parameters(authed_client, engine):
    response = authed_client.get("/api/user/all")

    assert response.status_code == 200
    assert engine.calls[0].name == "get_all_users"


def test_string_path_id_is_coerced_before_validation(authed_client, engine):
    engine.handlers["get_user_by_id"] = lambda call: [{"id": 42, "name": "Ada"}]

    response = authed_client.get("/api/user/42")

    assert response.json() == {"status": "success", "data": [{"id": 42, "name": "Ada"}]}
    assert engine.calls[0].args == [42]
