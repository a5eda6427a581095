"""Structured logging with context injection.

Features:
- console handler
- JSON logs optional (easy ingestion)
- context injection (provider/operation) without needing a big framework
"""

from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import dataclass
from typing import Any

CONTEXT_FIELDS = ("provider", "operation")

# ---------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in CONTEXT_FIELDS:
            if hasattr(record, k):
                base[k] = getattr(record, k)

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Format log records as human-readable text."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [record.levelname, record.name]

        ctx = [
            f"{k}={getattr(record, k)}"
            for k in CONTEXT_FIELDS
            if getattr(record, k, None)
        ]
        if ctx:
            parts.append("[" + " ".join(ctx) + "]")

        parts.append(record.getMessage())
        s = " ".join(parts)

        if record.exc_info:
            s += "\n" + self.formatException(record.exc_info)

        return s


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingOptions:
    """Configure logging behavior."""

    level: str = "INFO"
    json_logs: bool = False
    enable_console: bool = True
    propagate: bool = True


def setup_logging(
    options: LoggingOptions | None = None,
    *,
    name: str = "omnievent",
) -> logging.Logger:
    """Configure the package logger; calling it again replaces the handlers."""
    options = options or LoggingOptions()
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, options.level.upper(), logging.INFO))
    logger.propagate = options.propagate

    # Prevent duplicate handlers in repeated calls
    for h in list(logger.handlers):
        if getattr(h, "_omnievent_handler", False):
            logger.removeHandler(h)

    if options.enable_console:
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(logger.level)
        ch.setFormatter(JsonFormatter() if options.json_logs else TextFormatter())
        ch._omnievent_handler = True
        logger.addHandler(ch)

    return logger


# ---------------------------------------------------------------------
# Context injection
# ---------------------------------------------------------------------


class ContextAdapter(logging.LoggerAdapter):
    """Inject context fields into log records."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        merged = dict(self.extra)
        merged.update(extra)
        kwargs["extra"] = merged
        return msg, kwargs


def with_context(
    logger: logging.Logger,
    *,
    provider: str | None = None,
    operation: str | None = None,
) -> ContextAdapter:
    """Create a context adapter with provider and operation info."""
    extra: dict[str, Any] = {}
    if provider:
        extra["provider"] = provider
    if operation:
        extra["operation"] = operation
    return ContextAdapter(logger, extra)
