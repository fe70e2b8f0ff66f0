from typing import Callable

from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from personal_hub.config import settings
from personal_hub.core.clock import utcnow
from personal_hub.db.models import UserSession


def test_register_sets_cookie_and_me_returns_user(anon_client: TestClient) -> None:
    resp = anon_client.post(
        "/auth/register",
        json={"email": "Bob@Example.com", "password": "s3cret-pass", "firstName": "Bob"},
    )
    assert resp.status_code == 201
    assert settings.session_cookie_name in resp.cookies

    me = anon_client.get("/auth/me")
    assert me.status_code == 200
    user = me.json()["user"]
    assert user["email"] == "bob@example.com"
    assert user["firstName"] == "Bob"
    assert "passwordHash" not in user


def test_register_duplicate_email_rejected(make_client: Callable[..., TestClient], anon_client: TestClient) -> None:
    make_client("dup@example.com")
    resp = anon_client.post("/auth/register", json={"email": "dup@example.com", "password": "another-pass"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Email already registered"


def test_register_validation_has_field_details(anon_client: TestClient) -> None:
    resp = anon_client.post("/auth/register", json={"email": "not-an-email", "password": "short"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid input"
    assert "email" in body["details"]
    assert "password" in body["details"]


def test_login_logout_cycle(make_client: Callable[..., TestClient], app) -> None:
    make_client("carol@example.com", "carol-password")
    fresh = TestClient(app, raise_server_exceptions=False)

    bad = fresh.post("/auth/login", json={"email": "carol@example.com", "password": "wrong-password"})
    assert bad.status_code == 401
    assert bad.json() == {"error": "Invalid email or password"}

    ok = fresh.post("/auth/login", json={"email": "carol@example.com", "password": "carol-password"})
    assert ok.status_code == 200
    assert fresh.get("/auth/me").status_code == 200

    out = fresh.post("/auth/logout")
    assert out.status_code == 200
    fresh.cookies.clear()
    assert fresh.get("/auth/me").status_code == 401
    fresh.close()


def test_protected_routes_require_session(anon_client: TestClient) -> None:
    for path in ("/todos", "/goals", "/events", "/notes", "/moments", "/pomodoro/config", "/dashboard/stats"):
        resp = anon_client.get(path)
        assert resp.status_code == 401, path
        assert resp.json() == {"error": "Unauthorized"}


def test_expired_session_is_removed(client: TestClient, session_factory: sessionmaker) -> None:
    token = client.cookies.get(settings.session_cookie_name)
    with session_factory() as session:
        row = session.get(UserSession, token)
        row.expires_at = utcnow().replace(year=2000)
        session.commit()

    assert client.get("/auth/me").status_code == 401

    with session_factory() as session:
        assert session.scalar(select(UserSession).where(UserSession.id == token)) is None
