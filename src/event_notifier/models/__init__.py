"""
Module: models
Description: Package initialization for notifier data models.

This package contains the value types passed between the dispatcher
and its providers:
- Severity: Notification level enumeration
- Event: Immutable notification value
- DeliveryOutcome: Per-destination delivery result
"""

from .event import DeliveryOutcome, Event, MetadataValue, Severity

__all__ = [
    "DeliveryOutcome",
    "Event",
    "MetadataValue",
    "Severity",
]
