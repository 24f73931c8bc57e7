"""
Module: settings.py
Description: Notifier configuration models and environment settings.

Defines the validated, typed configuration an EventLogger is built
from, the validate_config() entry point that turns pydantic
validation errors into ConfigurationError, and NotifierSettings,
which loads a single-destination configuration from environment
variables (or a .env file) using pydantic-settings.
"""

from enum import Enum
from typing import Any, List, Literal, Mapping, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from event_notifier.errors import ConfigurationError

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_PARSE_MODE = "HTML"
TELEGRAM_API_BASE = "https://api.telegram.org"


class Environment(str, Enum):
    """Runtime environments the notifier supports."""

    SERVER = "server"


class TelegramProviderConfig(BaseModel):
    """Configuration for one Telegram chat destination."""

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="forbid"
    )

    kind: Literal["telegram"] = Field(
        default="telegram",
        description="Provider kind discriminant"
    )
    bot_token: str = Field(
        ...,
        min_length=1,
        description="Telegram bot token"
    )
    chat_id: str = Field(
        ...,
        min_length=1,
        description="Target chat identifier"
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        gt=0,
        description="Per-attempt request timeout in milliseconds"
    )
    max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        ge=0,
        description="Total delivery attempts (0 disables retries)"
    )
    parse_mode: str = Field(
        default=DEFAULT_PARSE_MODE,
        min_length=1,
        description="Telegram parse_mode format hint"
    )
    api_base: str = Field(
        default=TELEGRAM_API_BASE,
        description="Telegram Bot API base URL"
    )

    @field_validator('chat_id', mode='before')
    @classmethod
    def coerce_chat_id(cls, v: Any) -> Any:
        """Accept numeric chat ids and store them as text."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('api_base')
    @classmethod
    def validate_api_base(cls, v: str) -> str:
        """Validate the API base is an HTTP(S) URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("api_base must be a valid HTTP/HTTPS URL")
        return v.rstrip('/')


# Provider configs are discriminated on ``kind``. Additional kinds turn this
# into Annotated[Union[...], Field(discriminator="kind")].
ProviderConfig = TelegramProviderConfig


class EventLoggerConfig(BaseModel):
    """Validated configuration for an EventLogger."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    environment: Environment = Field(
        ...,
        description="Runtime environment"
    )
    providers: List[ProviderConfig] = Field(
        ...,
        min_length=1,
        description="Destinations, in delivery order"
    )


def _format_errors(exc: ValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        if location:
            messages.append(f"{location}: {error['msg']}")
        else:
            messages.append(error["msg"])
    return messages


def validate_config(
    config: Union[EventLoggerConfig, Mapping[str, Any], None]
) -> EventLoggerConfig:
    """
    Validate a notifier configuration.

    Args:
        config: Either an already built EventLoggerConfig or a plain mapping
            with ``environment`` and ``providers`` keys

    Returns:
        The validated EventLoggerConfig

    Raises:
        ConfigurationError: If the configuration is missing or invalid
    """
    if config is None:
        raise ConfigurationError("Configuration is required")
    if isinstance(config, EventLoggerConfig):
        return config
    if not isinstance(config, Mapping):
        raise ConfigurationError(
            f"Configuration must be a mapping, got {type(config).__name__}"
        )

    try:
        return EventLoggerConfig.model_validate(dict(config))
    except ValidationError as e:
        errors = _format_errors(e)
        raise ConfigurationError(
            "Invalid notifier configuration: " + "; ".join(errors),
            errors=errors
        ) from e


class NotifierSettings(BaseSettings):
    """Notifier settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EVENT_NOTIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: str = Field(default=Environment.SERVER.value, description="Runtime environment")
    log_level: str = Field(default="INFO", description="Logging level")

    telegram_bot_token: str = Field(
        ...,
        description="Telegram bot token"
    )
    telegram_chat_id: str = Field(
        ...,
        description="Telegram chat id to deliver to"
    )
    telegram_timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        description="Per-attempt request timeout in milliseconds"
    )
    telegram_max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        description="Total delivery attempts"
    )
    telegram_parse_mode: str = Field(default=DEFAULT_PARSE_MODE, description="Telegram parse_mode")
    telegram_api_base: str = Field(default=TELEGRAM_API_BASE, description="Telegram Bot API base URL")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    def to_config(self) -> EventLoggerConfig:
        """
        Build the validated EventLoggerConfig described by these settings.

        Raises:
            ConfigurationError: If the resulting configuration is invalid
        """
        return validate_config({
            "environment": self.environment,
            "providers": [
                {
                    "kind": "telegram",
                    "bot_token": self.telegram_bot_token,
                    "chat_id": self.telegram_chat_id,
                    "timeout_ms": self.telegram_timeout_ms,
                    "max_attempts": self.telegram_max_attempts,
                    "parse_mode": self.telegram_parse_mode,
                    "api_base": self.telegram_api_base,
                }
            ],
        })


def load_settings(**overrides: Any) -> NotifierSettings:
    """
    Load NotifierSettings from the environment.

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    try:
        return NotifierSettings(**overrides)
    except ValidationError as e:
        errors = _format_errors(e)
        raise ConfigurationError(
            "Invalid notifier settings: " + "; ".join(errors),
            errors=errors
        ) from e
