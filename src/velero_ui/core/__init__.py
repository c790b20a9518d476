"""
Velero-UI Core Module

Core configuration, settings, and logging.
"""

from .config import (
    Settings,
    CommandSettings,
    WizardSettings,
    LogSettings,
    default_config_path,
    get_settings,
)
from .logging import setup_logging, get_logger

__all__ = [
    # Settings
    "Settings",
    "CommandSettings",
    "WizardSettings",
    "LogSettings",
    "default_config_path",
    "get_settings",
    # Logging
    "setup_logging",
    "get_logger",
]
