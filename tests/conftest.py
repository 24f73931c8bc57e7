"""
Module: conftest.py
Description: Shared pytest fixtures for event notifier tests.

Provides configuration data, a fixed clock, a mock diagnostics sink
and a no-op backoff sleep so retry tests never wait on real timers.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from event_notifier.config.settings import TelegramProviderConfig

BOT_TOKEN = "123456:test-token"
CHAT_ID = "-100200300"
SEND_MESSAGE_URL = f"https://api.telegram.org/bot{BOT_TOKEN}/sendMessage"


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def telegram_config_data():
    """
    Provide a valid Telegram provider configuration mapping.

    Uses a fast timeout and the default retry budget.
    """
    return {
        "kind": "telegram",
        "bot_token": BOT_TOKEN,
        "chat_id": CHAT_ID,
        "timeout_ms": 1000,
        "max_attempts": 3
    }


@pytest.fixture
def event_logger_config_data(telegram_config_data):
    """Provide a valid EventLogger configuration mapping with one provider."""
    return {
        "environment": "server",
        "providers": [telegram_config_data]
    }


@pytest.fixture
def telegram_config(telegram_config_data):
    """Provide a validated TelegramProviderConfig."""
    return TelegramProviderConfig(**telegram_config_data)


@pytest.fixture
def diagnostics():
    """Provide a mock diagnostics sink recording every call."""
    return MagicMock()


@pytest.fixture
def no_sleep():
    """Provide a backoff sleep that returns immediately."""
    return AsyncMock()


@pytest.fixture
def fixed_clock():
    """Provide a clock frozen at 15.01.2025 10:30:05 local time."""
    return lambda: datetime(2025, 1, 15, 10, 30, 5)


@pytest.fixture
def send_message_url():
    """Provide the sendMessage URL for the default test bot token."""
    return SEND_MESSAGE_URL
