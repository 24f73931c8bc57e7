"""
Package: event_notifier
Description: Fan-out delivery of log notifications to messaging endpoints.

Usage:
    notifier = EventLogger({
        "environment": "server",
        "providers": [{"kind": "telegram", "bot_token": "123:abc", "chat_id": "-100123"}],
    })
    await notifier.error("Payment failed", {"order_id": 42})
"""

from .config.settings import (
    Environment,
    EventLoggerConfig,
    NotifierSettings,
    TelegramProviderConfig,
    load_settings,
    validate_config,
)
from .delivery.dispatcher import EventLogger
from .errors import ConfigurationError, DeliveryFailure, EventNotifierError
from .models.event import DeliveryOutcome, Event, Severity
from .providers import Provider, TelegramProvider
from .utils.logger import DiagnosticsSink, configure_logging

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DeliveryFailure",
    "DeliveryOutcome",
    "DiagnosticsSink",
    "Environment",
    "Event",
    "EventLogger",
    "EventLoggerConfig",
    "EventNotifierError",
    "NotifierSettings",
    "Provider",
    "Severity",
    "TelegramProvider",
    "TelegramProviderConfig",
    "configure_logging",
    "load_settings",
    "validate_config",
]
