"""Configuration management for xdev."""

from xdev.core.config.settings import (
    DEFAULT_LINT_IMAGE,
    LoggingSettings,
    Settings,
    get_settings,
)

__all__ = ["DEFAULT_LINT_IMAGE", "LoggingSettings", "Settings", "get_settings"]
