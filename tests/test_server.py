import pytest
from starlette.testclient import TestClient

import auth
import server


@pytest.fixture
def client(test_db):
    with TestClient(server.create_app()) as c:
        yield c


def _sign_up(client, email="test@example.com", password="password123"):
    return client.post("/api/auth/sign-up", json={"email": email, "password": password})


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_sign_up_sets_session_cookie(client):
    resp = _sign_up(client)

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith("auth-token=")
    assert "HttpOnly" in set_cookie
    assert "SameSite=lax" in set_cookie
    assert "Secure" not in set_cookie


def test_session_endpoint_reflects_cookie(client):
    assert client.get("/api/auth/session").json() == {"session": None}

    _sign_up(client)
    session = client.get("/api/auth/session").json()["session"]

    assert session["email"] == "test@example.com"
    assert session["userId"]


def test_sign_in_failure_is_reported_without_cookie(client):
    _sign_up(client)
    client.cookies.clear()

    resp = client.post("/api/auth/sign-in", json={"email": "test@example.com", "password": "wrong-password"})

    assert resp.status_code == 200
    assert resp.json() == {"success": False, "error": "Invalid credentials"}
    assert "set-cookie" not in resp.headers


def test_sign_in_rejects_non_json_body(client):
    resp = client.post("/api/auth/sign-in", content=b"not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400


@pytest.mark.parametrize(
    "path, body",
    [
        ("/api/auth/sign-up", {"email": "a@example.com", "password": 12345678}),
        ("/api/auth/sign-in", {"email": 42, "password": "password123"}),
        ("/api/auth/sign-in", {"email": ["a@example.com"], "password": "password123"}),
    ],
)
def test_credentials_must_be_strings(client, path, body):
    resp = client.post(path, json=body)

    assert resp.status_code == 400
    assert "set-cookie" not in resp.headers


def test_missing_credentials_are_reported_as_auth_errors(client):
    resp = client.post("/api/auth/sign-in", json={"email": "a@example.com"})

    assert resp.status_code == 200
    assert resp.json() == {"success": False, "error": "Email and password are required"}


def test_protected_prefix_matches_whole_segments(client):
    assert client.get("/api/projectsX").status_code == 404
    assert client.get("/api/projects/some-id").status_code == 401


def test_projects_require_session(client):
    resp = client.get("/api/projects")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authentication required"}


def test_projects_reject_tampered_cookie(client):
    client.cookies.set("auth-token", "not.a.valid.token")
    assert client.get("/api/projects").status_code == 401


def test_create_and_list_projects(client):
    _sign_up(client)

    created = client.post("/api/projects", json={"name": "New Design #42", "messages": [], "data": {}})
    assert created.status_code == 201
    project_id = created.json()["id"]

    listed = client.get("/api/projects").json()["projects"]
    assert [p["id"] for p in listed] == [project_id]
    assert client.get(f"/api/projects/{project_id}").json()["name"] == "New Design #42"


def test_create_project_validates_body(client):
    _sign_up(client)
    assert client.post("/api/projects", json={"messages": []}).status_code == 400
    assert client.post("/api/projects", json={"name": "x", "messages": "nope"}).status_code == 400


def test_unknown_project_is_404(client):
    _sign_up(client)
    assert client.get("/api/projects/does-not-exist").status_code == 404


def test_sign_out_clears_session(client):
    _sign_up(client)

    resp = client.post("/api/auth/sign-out")

    assert resp.status_code == 200
    assert client.get("/api/auth/session").json() == {"session": None}
    assert client.get("/api/projects").status_code == 401


def test_projects_are_isolated_per_user(client):
    _sign_up(client, "a@example.com")
    client.post("/api/projects", json={"name": "A's project"})
    client.post("/api/auth/sign-out")

    _sign_up(client, "b@example.com")
    assert client.get("/api/projects").json() == {"projects": []}


def test_middleware_uses_session_store(client):
    _sign_up(client)
    token = client.cookies.get("auth-token")
    assert auth.get_codec().decode(token).email == "test@example.com"
