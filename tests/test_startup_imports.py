import importlib
from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect

from personal_hub.config import settings
from personal_hub.db.models import Base


@pytest.mark.parametrize(
    "module",
    [
        "personal_hub.api.app",
        "personal_hub.main",
        "personal_hub.exports.entity_export",
        "personal_hub.core.dashboard",
    ],
)
def test_modules_import(module: str) -> None:
    assert importlib.import_module(module) is not None


def test_migrations_build_the_model_schema(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    db_path = tmp_path / "migrated.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+pysqlite:///{db_path.as_posix()}")

    main_mod = importlib.import_module("personal_hub.main")
    main_mod._run_migrations()

    engine = create_engine(settings.database_url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert set(Base.metadata.tables) <= tables
    assert "alembic_version" in tables


def test_build_database_url_creates_sqlite_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from personal_hub.db.session import build_database_url

    monkeypatch.setattr(settings, "database_url", None)
    monkeypatch.setattr(settings, "sqlite_path", str(tmp_path / "nested" / "hub.db"))
    url = build_database_url()
    assert url.startswith("sqlite+pysqlite:///")
    assert (tmp_path / "nested").is_dir()
