"""
Package: providers
Description: Destination kinds the dispatcher can deliver to.

PROVIDER_FACTORIES maps a provider config ``kind`` to the class that
builds it.
"""

from .base import Provider
from .telegram import LEVEL_GLYPHS, TelegramProvider

PROVIDER_FACTORIES = {
    TelegramProvider.kind: TelegramProvider,
}

__all__ = [
    "LEVEL_GLYPHS",
    "PROVIDER_FACTORIES",
    "Provider",
    "TelegramProvider",
]
