"""
Logging configuration for the asset manager API.

Console output only; containers and process managers collect stdout.
"""
import logging
import logging.config
from typing import Any

from config import settings


def build_logging_config() -> dict[str, Any]:
    formatter = "json" if settings.LOG_JSON else "standard"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                "rename_fields": {"levelname": "level", "name": "logger"},
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
            },
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": settings.LOG_LEVEL,
            },
            "sqlalchemy.engine": {
                "level": "INFO" if settings.DEBUG else "WARNING",
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
        },
    }


def setup_logging() -> None:
    """Configure application logging."""
    logging.config.dictConfig(build_logging_config())
    logging.getLogger(__name__).debug(
        "Logging initialized with level %s (%s)", settings.LOG_LEVEL, settings.APP_ENV
    )
