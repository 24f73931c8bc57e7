"""
Module: push.py
Description: Push delivery of rendered notifications to the Telegram Bot API.

Implements a single bounded-timeout HTTP POST per attempt. The
transport never raises: timeouts, non-2xx responses and network
errors are reported to the diagnostics sink and returned as False.
"""

import asyncio
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict

from event_notifier.config.settings import DEFAULT_PARSE_MODE, TELEGRAM_API_BASE
from event_notifier.utils.logger import DiagnosticsSink, get_logger

logger = get_logger(__name__)


class TelegramCredentials(BaseModel):
    """Endpoint identity for one Telegram chat."""

    model_config = ConfigDict(frozen=True)

    bot_token: str
    chat_id: str

    @property
    def destination(self) -> str:
        """Label safe for diagnostics (never includes the token)."""
        return f"telegram:{self.chat_id}"


class TelegramTransport:
    """
    HTTP client for the Telegram sendMessage endpoint.

    Holds only static settings (API base, parse mode); each call to
    attempt() is one independent request.
    """

    def __init__(
        self,
        api_base: str = TELEGRAM_API_BASE,
        parse_mode: str = DEFAULT_PARSE_MODE,
        diagnostics: Optional[DiagnosticsSink] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the transport.

        Args:
            api_base: Telegram Bot API base URL
            parse_mode: Format hint sent with every message
            diagnostics: Sink for delivery diagnostics
            http_transport: Optional httpx transport (e.g. for proxies)
        """
        if not api_base.startswith(('http://', 'https://')):
            raise ValueError("api_base must be a valid HTTP/HTTPS URL")

        self.api_base = api_base.rstrip('/')
        self.parse_mode = parse_mode
        self.diagnostics = diagnostics or logger
        self._http_transport = http_transport

    def _url(self, credentials: TelegramCredentials) -> str:
        return f"{self.api_base}/bot{credentials.bot_token}/sendMessage"

    async def attempt(
        self,
        credentials: TelegramCredentials,
        text: str,
        timeout_ms: int
    ) -> bool:
        """
        Send one message via HTTP POST.

        Args:
            credentials: Bot token and chat id of the destination
            text: Rendered message text
            timeout_ms: Upper bound for the whole round-trip

        Returns:
            True if the endpoint answered with a 2xx status, False otherwise
        """
        timeout_seconds = timeout_ms / 1000
        payload = {
            'chat_id': credentials.chat_id,
            'text': text,
            'parse_mode': self.parse_mode
        }

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout_seconds),
                transport=self._http_transport
            ) as client:
                self.diagnostics.debug(
                    "Attempting Telegram delivery",
                    destination=credentials.destination
                )

                response = await asyncio.wait_for(
                    client.post(
                        self._url(credentials),
                        json=payload,
                        headers={'Content-Type': 'application/json'}
                    ),
                    timeout=timeout_seconds
                )

                if response.is_success:
                    self.diagnostics.debug(
                        "Telegram delivery accepted",
                        destination=credentials.destination,
                        status_code=response.status_code
                    )
                    return True

                self.diagnostics.warning(
                    "Telegram delivery HTTP error",
                    destination=credentials.destination,
                    status_code=response.status_code,
                    response=_decode_error_body(response)
                )
                return False

        except (httpx.TimeoutException, asyncio.TimeoutError):
            self.diagnostics.warning(
                "Telegram delivery timeout",
                destination=credentials.destination,
                timeout_ms=timeout_ms
            )
            return False

        except httpx.NetworkError as e:
            self.diagnostics.warning(
                "Telegram delivery network error",
                destination=credentials.destination,
                error=str(e)
            )
            return False

        except Exception as e:
            self.diagnostics.error(
                "Telegram delivery failed",
                destination=credentials.destination,
                error=str(e),
                error_type=type(e).__name__
            )
            return False


def _decode_error_body(response: httpx.Response) -> Any:
    """Best-effort decode of an error response for diagnostics."""
    try:
        return response.json()
    except ValueError:
        return response.text[:500]  # Truncate large responses
