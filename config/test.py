from __future__ import annotations

from pydantic_settings import SettingsConfigDict

from config.base import CommonSettings


class TestSettings(CommonSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./test_asset_manager.db"
    APP_ENV: str = "test"
    SECRET_KEY: str | None = "test-secret-key-for-token-signing-only"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"

    model_config = SettingsConfigDict(env_prefix="TEST_")
