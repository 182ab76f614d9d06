"""Settings do processo e do ciclo de vida das sessões."""

from __future__ import annotations

from config.settings.base.core import (
    STRICT_ENVIRONMENTS,
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.session import SessionSettings, get_session_settings

__all__ = [
    "STRICT_ENVIRONMENTS",
    "BaseSettings",
    "Environment",
    "SessionSettings",
    "get_base_settings",
    "get_session_settings",
]
