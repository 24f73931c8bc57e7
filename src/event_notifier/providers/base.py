"""
Module: base.py
Description: Provider capability shared by all destination kinds.
"""

from typing import Mapping, Optional, Protocol, runtime_checkable

from event_notifier.models.event import MetadataValue, Severity


@runtime_checkable
class Provider(Protocol):
    """
    A destination the dispatcher can fan a notification out to.

    send() returns True only when the remote endpoint accepted the
    payload. Every failure, including errors while rendering, is
    reported through diagnostics and returned as False; send() must
    not raise.
    """

    @property
    def name(self) -> str: ...

    async def send(
        self,
        message: str,
        severity: Severity,
        metadata: Optional[Mapping[str, MetadataValue]] = None
    ) -> bool: ...
