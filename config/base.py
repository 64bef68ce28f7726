from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

# Project root (one level up from this config package)
ROOT = Path(__file__).resolve().parents[1]


def env_file_for(name: str) -> str | None:
    """Path of ``env/.env.<name>`` if that file exists."""
    candidate = ROOT / "env" / f".env.{name}"
    if candidate.exists():
        return str(candidate)
    return None


class CommonSettings(BaseSettings):
    """Settings shared by every environment."""

    SECRET_KEY: str | None = None
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # First-run admin account. Rotate the password in any real deployment.
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_ADMIN_EMAIL: str = "admin@example.com"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    def missing_required(self, *names: str) -> list[str]:
        return [name for name in names if not getattr(self, name, None)]
