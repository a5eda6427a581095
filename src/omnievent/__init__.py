"""
OmniEvent: one interface to many event providers.

Every provider's events come back as EventHash records, and every request
goes through a strategy chosen by a provider key.

Usage:
    import omnievent

    omnievent.Builder().provider("developer")
    events = omnievent.list_events("developer", match_name="meetup")
"""

import logging
from typing import List, Optional

from omnievent.builder import Builder
from omnievent.configs import Configuration, Settings, get_settings
from omnievent.context import Context, get_context, reset_context
from omnievent.dispatch import Dispatcher
from omnievent.errors import (
    MissingStrategy,
    OmniEventError,
    StrategyNotConfigured,
    StrategyNotIncluded,
    Unauthorized,
)
from omnievent.schemas import EventHash
from omnievent.store import KeyStore
from omnievent.strategy import Operation, Options, Strategy

__version__ = "0.1.0"


def list_events(provider: str, **options) -> Optional[List[EventHash]]:
    """List a provider's events (options such as from_time, to_time, match_name pass through)."""
    return Dispatcher().list_events(provider, **options)


def create_event(provider: str, event: Optional[EventHash] = None, **options) -> Optional[EventHash]:
    return Dispatcher().create_event(provider, event=event, **options)


def update_event(provider: str, event: Optional[EventHash] = None, **options) -> Optional[EventHash]:
    return Dispatcher().update_event(provider, event=event, **options)


def destroy_event(provider: str, event: Optional[EventHash] = None, **options) -> Optional[bool]:
    return Dispatcher().destroy_event(provider, event=event, **options)


def configure(**kwargs) -> Configuration:
    """Update the default context's configuration."""
    return get_context().config.configure(kwargs)


def config() -> Configuration:
    return get_context().config


def logger() -> logging.Logger:
    return get_context().config.logger


__all__ = [
    "__version__",
    "list_events",
    "create_event",
    "update_event",
    "destroy_event",
    "configure",
    "config",
    "logger",
    "Builder",
    "Configuration",
    "Context",
    "Dispatcher",
    "EventHash",
    "KeyStore",
    "Operation",
    "Options",
    "Settings",
    "Strategy",
    "get_context",
    "get_settings",
    "reset_context",
    "OmniEventError",
    "MissingStrategy",
    "StrategyNotConfigured",
    "StrategyNotIncluded",
    "Unauthorized",
]
