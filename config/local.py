from __future__ import annotations

from pydantic_settings import SettingsConfigDict

from config.base import CommonSettings, env_file_for


class LocalSettings(CommonSettings):
    """Developer machine: file-backed SQLite, verbose logs, SQL echo."""
    DATABASE_URL: str = "sqlite+aiosqlite:///./asset_manager.db"
    APP_ENV: str = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"

    model_config = SettingsConfigDict(
        env_file=env_file_for("local"),
        env_file_encoding="utf-8",
    )
