"""
Module: telegram.py
Description: Telegram chat destination.

Renders a notification into Telegram message text and delivers it
through the retry loop and the Telegram transport.

Rendered layout:

    <glyph> [<SEVERITY>] <DD.MM.YYYY HH.MM.SS>

    *METADATA*
    <key>: <value>

    <message>

The metadata block is present only when metadata is non-empty.
"""

from datetime import datetime
from typing import Callable, Dict, Mapping, Optional

from event_notifier.config.settings import TelegramProviderConfig
from event_notifier.delivery.push import TelegramCredentials, TelegramTransport
from event_notifier.delivery.retry import Retrier, SleepFn
from event_notifier.errors import ConfigurationError
from event_notifier.models.event import Event, MetadataValue, Severity
from event_notifier.utils.logger import DiagnosticsSink, get_logger

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%d.%m.%Y %H.%M.%S"

LEVEL_GLYPHS: Dict[Severity, str] = {
    Severity.LOG: "📝",
    Severity.INFO: "ℹ️",
    Severity.WARN: "⚠️",
    Severity.ERROR: "❌",
}


class TelegramProvider:
    """Deliver notifications to a single Telegram chat."""

    kind = "telegram"

    def __init__(
        self,
        config: TelegramProviderConfig,
        diagnostics: Optional[DiagnosticsSink] = None,
        transport: Optional[TelegramTransport] = None,
        sleep: Optional[SleepFn] = None,
        clock: Callable[[], datetime] = datetime.now,
        glyphs: Mapping[Severity, str] = LEVEL_GLYPHS
    ):
        """
        Initialize the provider.

        Args:
            config: Validated Telegram destination configuration
            diagnostics: Sink for delivery diagnostics
            transport: Transport override; built from config when omitted
            sleep: Backoff sleep override for the retry loop
            clock: Source of event timestamps
            glyphs: Severity to glyph table

        Raises:
            ConfigurationError: If the glyph table does not cover every Severity
        """
        missing = [severity.value for severity in Severity if severity not in glyphs]
        if missing:
            raise ConfigurationError(
                f"No glyph configured for severities: {', '.join(missing)}"
            )

        self.config = config
        self.diagnostics = diagnostics or logger
        self._glyphs = dict(glyphs)
        self._clock = clock
        self._credentials = TelegramCredentials(
            bot_token=config.bot_token,
            chat_id=config.chat_id
        )

        if transport is None:
            transport = TelegramTransport(
                api_base=config.api_base,
                parse_mode=config.parse_mode,
                diagnostics=self.diagnostics
            )

        retrier_kwargs = {}
        if sleep is not None:
            retrier_kwargs['sleep'] = sleep
        self.retrier = Retrier(
            transport,
            timeout_ms=config.timeout_ms,
            max_attempts=config.max_attempts,
            diagnostics=self.diagnostics,
            **retrier_kwargs
        )

    @property
    def name(self) -> str:
        return self._credentials.destination

    @property
    def bot_token(self) -> str:
        return self.config.bot_token

    @property
    def chat_id(self) -> str:
        return self.config.chat_id

    async def send(
        self,
        message: str,
        severity: Severity,
        metadata: Optional[Mapping[str, MetadataValue]] = None
    ) -> bool:
        """
        Render and deliver one notification.

        Args:
            message: Raw message text
            severity: Notification severity
            metadata: Optional ordered key/value metadata

        Returns:
            True if the chat received the message, False on any failure
        """
        try:
            event = Event(
                message=message,
                severity=severity,
                metadata=dict(metadata) if metadata else {},
                occurred_at=self._clock()
            )
            text = self.format_message(event)
            return await self.retrier.run(self._credentials, text)

        except Exception as e:
            self.diagnostics.error(
                "Telegram provider send failed",
                destination=self.name,
                error=str(e),
                error_type=type(e).__name__
            )
            return False

    def format_message(self, event: Event) -> str:
        """Render an event into Telegram message text."""
        timestamp = event.occurred_at.strftime(TIMESTAMP_FORMAT)
        text = f"{self._glyphs[event.severity]} [{event.severity.value.upper()}] {timestamp}"

        if event.has_metadata:
            text += "\n\n*METADATA*"
            for key, value in event.metadata.items():
                text += f"\n{key}: {value}"
            text += "\n"

        text += f"\n{event.message}"
        return text
