from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    timezone: str = "UTC"
    sqlite_path: str = "data/app.db"
    database_url: str | None = None
    log_path: str = "logs/app.log"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    run_migrations: bool = True
    session_cookie_name: str = "auth_session"
    session_ttl_days: int = 30
    session_cookie_secure: bool = False
    password_hash_iterations: int = 260_000
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]


settings = Settings()
