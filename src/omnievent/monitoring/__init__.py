"""Logging setup and context injection for OmniEvent."""

from .logging import (
    ContextAdapter,
    JsonFormatter,
    LoggingOptions,
    TextFormatter,
    setup_logging,
    with_context,
)

__all__ = [
    "ContextAdapter",
    "JsonFormatter",
    "LoggingOptions",
    "TextFormatter",
    "setup_logging",
    "with_context",
]
