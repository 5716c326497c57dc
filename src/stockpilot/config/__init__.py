"""Configuration module."""

from stockpilot.config.logging import configure_logging, get_logger, log_context
from stockpilot.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "log_context",
]
