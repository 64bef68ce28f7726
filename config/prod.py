from __future__ import annotations

from pydantic import model_validator
from pydantic_settings import SettingsConfigDict

from config.base import CommonSettings, env_file_for


class ProdSettings(CommonSettings):
    DATABASE_URL: str | None = None
    APP_ENV: str = "production"
    DEBUG: bool = False
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        env_file=env_file_for("production"),
        env_file_encoding="utf-8",
    )

    @model_validator(mode="after")
    def _require_deployment_values(self) -> "ProdSettings":
        # No development fallbacks in production
        missing = self.missing_required("DATABASE_URL", "SECRET_KEY")
        if missing:
            raise ValueError(f"Production settings require: {', '.join(missing)}")
        return self
