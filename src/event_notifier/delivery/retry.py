"""
Module: delivery/retry.py
Description: Retry logic for notification delivery.

Wraps a single transport attempt in a bounded tenacity retry loop
with exponential backoff. A delivery moves Pending -> Attempting and
ends in Succeeded (True) or Exhausted (False); it never raises.

Backoff before retry n is 2**n seconds (2, 4, 8, ...), uncapped
unless max_backoff_seconds is given.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from event_notifier.delivery.push import TelegramCredentials, TelegramTransport
from event_notifier.errors import ConfigurationError, DeliveryFailure
from event_notifier.utils.logger import DiagnosticsSink, get_logger

logger = get_logger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class Retrier:
    """
    Bounded retry loop around TelegramTransport.attempt().

    Attributes:
        timeout_ms: Timeout passed to every transport attempt
        max_attempts: Total attempt budget; 0 means retries disabled
            (a single attempt)
        max_backoff_seconds: Optional cap on a single backoff delay
    """

    def __init__(
        self,
        transport: TelegramTransport,
        timeout_ms: int,
        max_attempts: int,
        max_backoff_seconds: Optional[float] = None,
        sleep: SleepFn = asyncio.sleep,
        diagnostics: Optional[DiagnosticsSink] = None
    ):
        if timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive")
        if max_attempts < 0:
            raise ConfigurationError("max_attempts must be non-negative")

        self.transport = transport
        self.timeout_ms = timeout_ms
        self.max_attempts = max_attempts
        self.max_backoff_seconds = max_backoff_seconds
        self.diagnostics = diagnostics or logger
        self._sleep = sleep

    @property
    def attempt_budget(self) -> int:
        """Number of transport invocations before the delivery is exhausted."""
        return max(1, self.max_attempts)

    def _retrying(self, destination: str) -> AsyncRetrying:
        if self.max_backoff_seconds is None:
            wait = wait_exponential(multiplier=2, exp_base=2)
        else:
            wait = wait_exponential(multiplier=2, exp_base=2, max=self.max_backoff_seconds)

        def before_sleep(retry_state: RetryCallState) -> None:
            self.diagnostics.info(
                "Retrying delivery",
                destination=destination,
                attempt=retry_state.attempt_number,
                max_attempts=self.attempt_budget,
                backoff_seconds=retry_state.next_action.sleep
            )

        def exhausted(retry_state: RetryCallState) -> bool:
            self.diagnostics.warning(
                "Delivery failed after all retries",
                destination=destination,
                attempts=retry_state.attempt_number
            )
            return False

        return AsyncRetrying(
            stop=stop_after_attempt(self.attempt_budget),
            wait=wait,
            retry=retry_if_exception_type(DeliveryFailure),
            before_sleep=before_sleep,
            retry_error_callback=exhausted,
            sleep=self._sleep,
        )

    async def run(self, credentials: TelegramCredentials, text: str) -> bool:
        """
        Deliver text, retrying failed attempts with exponential backoff.

        Args:
            credentials: Destination endpoint identity
            text: Rendered message text

        Returns:
            True once an attempt succeeds, False when the budget is exhausted
        """
        destination = credentials.destination
        attempt_number = 0

        async def attempt_delivery() -> bool:
            nonlocal attempt_number
            attempt_number += 1
            success = await self.transport.attempt(credentials, text, self.timeout_ms)
            if not success:
                # Raise to trigger retry
                raise DeliveryFailure(destination, attempt_number)
            return True

        return await self._retrying(destination)(attempt_delivery)
