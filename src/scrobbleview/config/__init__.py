"""Configuration module for scrobbleview."""

from .settings import (
    HttpSettings,
    LastfmSettings,
    LibrefmSettings,
    ListenBrainzSettings,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = [
    "HttpSettings",
    "LastfmSettings",
    "LibrefmSettings",
    "ListenBrainzSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
]
