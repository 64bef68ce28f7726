from __future__ import annotations

from pydantic import model_validator
from pydantic_settings import SettingsConfigDict

from config.base import CommonSettings, env_file_for
from config.database import get_database_url


class StageSettings(CommonSettings):
    """Staging: PostgreSQL assembled from DB_* variables, JSON logs."""
    APP_ENV: str = "stage"
    DEBUG: bool = False
    LOG_JSON: bool = True

    # Database components
    DB_DRIVER: str = "postgresql+asyncpg"
    DB_HOST: str | None = None
    DB_PORT: int = 5432
    DB_USER: str | None = None
    DB_PASSWORD: str | None = None
    DB_NAME: str | None = None

    model_config = SettingsConfigDict(
        env_file=env_file_for("staging"),
        env_file_encoding="utf-8",
    )

    @model_validator(mode="after")
    def _require_database(self) -> "StageSettings":
        missing = self.missing_required("DB_HOST", "DB_NAME", "SECRET_KEY")
        if missing:
            raise ValueError(f"Staging settings require: {', '.join(missing)}")
        return self

    @property
    def DATABASE_URL(self) -> str:
        """Construct database URL from components"""
        return get_database_url(
            driver=self.DB_DRIVER,
            host=self.DB_HOST,
            port=self.DB_PORT,
            user=self.DB_USER,
            password=self.DB_PASSWORD,
            name=self.DB_NAME,
        )
