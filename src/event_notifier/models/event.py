"""
Module: event.py
Description: Event data models for the event notifier.

Defines the severity levels, the immutable Event value rendered by
providers, and the per-destination DeliveryOutcome the dispatcher
aggregates after a fan-out.

Key Components:
- Severity: Closed enumeration of notification levels
- Event: Immutable notification value (message, severity, metadata, timestamp)
- DeliveryOutcome: Result of one destination's delivery

Dependencies: pydantic, datetime, typing
Author: Event Notifier Team
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

MetadataValue = Union[str, int, float]


def _normalize_value(value: Any) -> MetadataValue:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if type(value) in (str, int, float):
        return value
    return str(value)


class Severity(str, Enum):
    """Notification severity, ordered from least to most severe."""

    LOG = "log"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class Event(BaseModel):
    """
    A single notification as seen by a provider.

    Events are built fresh for every send and never mutated. The
    metadata mapping keeps the caller's insertion order, which is
    the order used when rendering.

    Attributes:
        message: Raw message text (may be empty when metadata is present)
        severity: Notification severity
        metadata: Optional key/value pairs (text or number values)
        occurred_at: Timestamp shown in the rendered payload
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field(
        default="",
        description="Raw message text"
    )
    severity: Severity = Field(
        ...,
        description="Notification severity"
    )
    metadata: Dict[str, MetadataValue] = Field(
        default_factory=dict,
        description="Ordered key/value metadata"
    )
    occurred_at: datetime = Field(
        ...,
        description="Event timestamp"
    )

    @field_validator('metadata', mode='before')
    @classmethod
    def validate_metadata(cls, v: Any) -> Any:
        """
        Normalize metadata values to text or numbers.

        Booleans and None render the way JSON spells them; any other
        value that is not text or a number is rendered with str().
        """
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            return v
        return {str(key): _normalize_value(value) for key, value in v.items()}

    @property
    def has_metadata(self) -> bool:
        """True when the event carries at least one metadata entry."""
        return bool(self.metadata)


class DeliveryOutcome(BaseModel):
    """Terminal result of one destination's delivery."""

    model_config = ConfigDict(frozen=True)

    destination: str = Field(..., description="Destination label")
    succeeded: bool = Field(..., description="True if the endpoint accepted the payload")
