"""
Module: utils
Description: Package initialization for utility functions.

Current utilities:
- logger: Structured logging configuration and the diagnostics sink protocol
"""

from .logger import DiagnosticsSink, configure_logging, get_logger

__all__ = [
    "DiagnosticsSink",
    "configure_logging",
    "get_logger",
]
