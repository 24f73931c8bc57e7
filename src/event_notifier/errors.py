"""
Module: errors.py
Description: Exception types for the event notifier.

ConfigurationError is fatal and raised synchronously while building
an EventLogger. DeliveryFailure is a per-attempt signal used inside
the retry loop and is never raised to callers of a provider or the
dispatcher.
"""

from typing import List, Optional


class EventNotifierError(Exception):
    """Base class for all event notifier errors."""


class ConfigurationError(EventNotifierError, ValueError):
    """
    Raised when a notifier configuration is missing or invalid.

    Attributes:
        errors: Individual validation messages, in the order found
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class DeliveryFailure(EventNotifierError):
    """A single delivery attempt was rejected or could not reach the endpoint."""

    def __init__(self, destination: str, attempt: int):
        super().__init__(f"Delivery to {destination} failed on attempt {attempt}")
        self.destination = destination
        self.attempt = attempt
