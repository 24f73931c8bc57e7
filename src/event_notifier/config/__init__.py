"""
Module: config
Description: Configuration models, validation and environment settings.
"""

from .settings import (
    Environment,
    EventLoggerConfig,
    NotifierSettings,
    ProviderConfig,
    TelegramProviderConfig,
    load_settings,
    validate_config,
)

__all__ = [
    "Environment",
    "EventLoggerConfig",
    "NotifierSettings",
    "ProviderConfig",
    "TelegramProviderConfig",
    "load_settings",
    "validate_config",
]
