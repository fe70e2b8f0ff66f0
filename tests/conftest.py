import os
from pathlib import Path
from typing import Callable, Iterator

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("RUN_MIGRATIONS", "false")

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from personal_hub.config import settings  # noqa: E402
from personal_hub.db.models import Base  # noqa: E402
from personal_hub.db.session import enable_sqlite_foreign_keys, get_db  # noqa: E402


@pytest.fixture(autouse=True)
def _fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "password_hash_iterations", 1000)


@pytest.fixture()
def engine(tmp_path: Path) -> Iterator[Engine]:
    db_path = tmp_path / "hub.db"
    eng = create_engine(f"sqlite+pysqlite:///{db_path.as_posix()}", future=True)
    enable_sqlite_foreign_keys(eng)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


@pytest.fixture()
def db_session(session_factory: sessionmaker) -> Iterator[Session]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def app(session_factory: sessionmaker) -> Iterator[FastAPI]:
    from personal_hub.api.app import app as fastapi_app

    def _override_get_db() -> Iterator[Session]:
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def make_client(app: FastAPI) -> Iterator[Callable[..., TestClient]]:
    clients: list[TestClient] = []

    def _make(email: str = "alice@example.com", password: str = "correct-horse") -> TestClient:
        client = TestClient(app, raise_server_exceptions=False)
        resp = client.post("/auth/register", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.text
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture()
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()


@pytest.fixture()
def anon_client(app: FastAPI) -> Iterator[TestClient]:
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    client.close()
