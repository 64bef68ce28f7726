import pytest
from pydantic import ValidationError

from config import get_settings_class
from config.database import get_database_url
from config.local import LocalSettings
from config.prod import ProdSettings
from config.stage import StageSettings
from db import engine_options


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SECRET_KEY", "DATABASE_URL", "DB_HOST", "DB_NAME", "DB_USER", "DB_PASSWORD"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize(
    "mode, expected",
    [
        ("local", LocalSettings),
        ("DEV", LocalSettings),
        ("staging", StageSettings),
        ("production", ProdSettings),
        ("something-else", LocalSettings),
    ],
)
def test_mode_selects_settings_class(mode, expected):
    assert get_settings_class(mode) is expected


def test_production_requires_secret_and_database():
    with pytest.raises(ValidationError) as excinfo:
        ProdSettings()
    assert "DATABASE_URL" in str(excinfo.value)
    assert "SECRET_KEY" in str(excinfo.value)


def test_production_reads_environment(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "prod-key")
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://app@db:5432/assets")
    settings = ProdSettings()
    assert settings.SECRET_KEY == "prod-key"
    assert settings.LOG_JSON is True


def test_stage_builds_database_url(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "stage-key")
    monkeypatch.setenv("DB_HOST", "db")
    monkeypatch.setenv("DB_NAME", "assets")
    monkeypatch.setenv("DB_USER", "assets")
    monkeypatch.setenv("DB_PASSWORD", "p@ss/word")
    settings = StageSettings()
    assert settings.DATABASE_URL == "postgresql+asyncpg://assets:p%40ss%2Fword@db:5432/assets"


def test_stage_requires_database_host():
    with pytest.raises(ValidationError):
        StageSettings(SECRET_KEY="k", DB_NAME="assets")


def test_get_database_url_without_password():
    assert get_database_url("postgresql+asyncpg", "db", 5432, "assets", None, "assets") == (
        "postgresql+asyncpg://assets@db:5432/assets"
    )


def test_engine_options_by_backend():
    assert "pool_pre_ping" not in engine_options("sqlite+aiosqlite:///./x.db")
    assert engine_options("postgresql+asyncpg://u@h/db")["pool_pre_ping"] is True
