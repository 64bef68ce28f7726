"""
Settings selection.

``MODE`` (or ``APP_ENV``) picks one of the per-environment classes; each
class reads its own optional ``env/.env.<name>`` file and then the process
environment. Unknown modes run with local settings.
"""
from __future__ import annotations

import os

from .local import LocalSettings
from .stage import StageSettings
from .prod import ProdSettings
from .test import TestSettings


_MAPPING = {
    "local": LocalSettings,
    "dev": LocalSettings,
    "stage": StageSettings,
    "staging": StageSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
    "test": TestSettings,
}


def get_mode() -> str:
    return (os.environ.get("MODE") or os.environ.get("APP_ENV") or "local").lower()


def get_settings_class(mode: str):
    return _MAPPING.get(mode.lower(), LocalSettings)


MODE = get_mode()
SettingsClass = get_settings_class(MODE)
settings = SettingsClass()

__all__ = ["settings", "SettingsClass", "MODE", "get_settings_class"]
