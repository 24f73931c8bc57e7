"""
Module: dispatcher.py
Description: Fan-out of notifications to every configured provider.

EventLogger is the entry point applications use. Each call renders
and delivers the notification to all providers concurrently and
returns once every provider has succeeded or exhausted its retries.
Failures are reported to the diagnostics sink only; nothing is
raised to the caller.
"""

import asyncio
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from event_notifier.config.settings import (
    EventLoggerConfig,
    NotifierSettings,
    ProviderConfig,
    load_settings,
    validate_config,
)
from event_notifier.models.event import DeliveryOutcome, MetadataValue, Severity
from event_notifier.providers import PROVIDER_FACTORIES, Provider
from event_notifier.utils.logger import DiagnosticsSink, configure_logging, get_logger

logger = get_logger(__name__)

ProviderFactory = Callable[..., Provider]
Metadata = Optional[Mapping[str, MetadataValue]]


class EventLogger:
    """
    Dispatcher delivering each notification to all providers.

    Attributes:
        config: Validated configuration the providers were built from
        providers: Providers in configuration order
    """

    def __init__(
        self,
        config: Union[EventLoggerConfig, Mapping[str, Any]],
        diagnostics: Optional[DiagnosticsSink] = None,
        provider_factories: Optional[Mapping[str, ProviderFactory]] = None,
        **provider_options: Any
    ):
        """
        Validate the configuration and build one provider per entry.

        Args:
            config: EventLoggerConfig or an equivalent mapping
            diagnostics: Sink for diagnostics, shared with the providers
            provider_factories: Provider kind to factory mapping; kinds
                without a factory are skipped
            **provider_options: Extra keyword arguments passed to every
                factory (e.g. transport, sleep, clock)

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = validate_config(config)
        self.diagnostics = diagnostics or logger

        factories = PROVIDER_FACTORIES if provider_factories is None else provider_factories
        self.providers: Tuple[Provider, ...] = tuple(
            provider
            for provider in (
                self._build_provider(provider_config, factories, provider_options)
                for provider_config in self.config.providers
            )
            if provider is not None
        )

        self.diagnostics.debug(
            "Event logger initialized",
            environment=self.config.environment.value,
            providers=[provider.name for provider in self.providers]
        )

    def _build_provider(
        self,
        provider_config: ProviderConfig,
        factories: Mapping[str, ProviderFactory],
        provider_options: Dict[str, Any]
    ) -> Optional[Provider]:
        factory = factories.get(provider_config.kind)
        if factory is None:
            self.diagnostics.debug(
                "Skipping unsupported provider kind",
                kind=provider_config.kind
            )
            return None
        return factory(provider_config, diagnostics=self.diagnostics, **provider_options)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[NotifierSettings] = None,
        **kwargs: Any
    ) -> "EventLogger":
        """
        Build an EventLogger from environment settings.

        Configures structlog with the settings' log level before
        constructing the logger.

        Raises:
            ConfigurationError: If settings are missing or invalid
        """
        if settings is None:
            settings = load_settings()
        configure_logging(settings.log_level)
        return cls(settings.to_config(), **kwargs)

    async def log(self, message: str, metadata: Metadata = None) -> None:
        await self.deliver(message, Severity.LOG, metadata)

    async def info(self, message: str, metadata: Metadata = None) -> None:
        await self.deliver(message, Severity.INFO, metadata)

    async def warn(self, message: str, metadata: Metadata = None) -> None:
        await self.deliver(message, Severity.WARN, metadata)

    async def error(self, message: str, metadata: Metadata = None) -> None:
        await self.deliver(message, Severity.ERROR, metadata)

    async def deliver(
        self,
        message: str,
        severity: Severity,
        metadata: Metadata = None
    ) -> None:
        """
        Deliver a notification to every provider and wait for all of them.

        An empty message is only delivered when metadata is present;
        otherwise the call is a no-op. Never raises.

        Args:
            message: Raw message text
            severity: Notification severity
            metadata: Optional ordered key/value metadata
        """
        if not isinstance(message, str) or (not message and not metadata):
            self.diagnostics.warning(
                "Message must be a non-empty string",
                message_type=type(message).__name__,
                has_metadata=bool(metadata)
            )
            return

        results = await asyncio.gather(
            *(self._send(provider, message, severity, metadata) for provider in self.providers),
            return_exceptions=True
        )

        outcomes = []
        for provider, result in zip(self.providers, results):
            if isinstance(result, BaseException):
                self.diagnostics.error(
                    "Provider raised during delivery",
                    destination=provider.name,
                    error=str(result),
                    error_type=type(result).__name__
                )
                result = DeliveryOutcome(destination=provider.name, succeeded=False)
            outcomes.append(result)

        failed = [outcome.destination for outcome in outcomes if not outcome.succeeded]
        if failed:
            self.diagnostics.warning(
                "Notification not delivered to all destinations",
                severity=getattr(severity, "value", severity),
                failed=failed,
                delivered=len(outcomes) - len(failed)
            )

    async def _send(
        self,
        provider: Provider,
        message: str,
        severity: Severity,
        metadata: Metadata
    ) -> DeliveryOutcome:
        succeeded = await provider.send(message, severity, metadata)
        return DeliveryOutcome(destination=provider.name, succeeded=bool(succeeded))
