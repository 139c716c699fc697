"""Configuration management for Asset Preview."""

from asset_preview.core.config.loader import ConfigLoader
from asset_preview.core.config.settings import (
    LoggingSettings,
    PreviewSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ConfigLoader",
    "LoggingSettings",
    "PreviewSettings",
    "Settings",
    "get_settings",
]
