from pathlib import Path

import uvicorn
from dotenv import find_dotenv, load_dotenv
from loguru import logger

from personal_hub.logging_setup import setup_logging


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if not env_path:
        candidate = Path(__file__).resolve().parents[1] / ".env"
        if candidate.exists():
            env_path = str(candidate)
    if env_path:
        logger.info("Loaded .env from {}", env_path)
        load_dotenv(env_path, override=True)
    else:
        logger.warning("No .env found")


def _run_migrations() -> None:
    from alembic import command
    from alembic.config import Config

    config_path = Path(__file__).resolve().parents[1] / "alembic.ini"
    alembic_cfg = Config(str(config_path))
    command.upgrade(alembic_cfg, "head")


def main() -> None:
    _load_env()
    setup_logging()

    from personal_hub.config import settings

    if settings.run_migrations:
        _run_migrations()
        logger.info("Database migrated to head")

    uvicorn.run("personal_hub.api.app:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    main()
