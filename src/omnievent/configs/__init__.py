"""
Configuration for OmniEvent.

- Settings: environment-backed settings (pydantic-settings)
- Configuration: runtime options carried by a Context
"""

from .configuration import Configuration, default_logger
from .settings import Settings, get_settings

__all__ = [
    "Configuration",
    "Settings",
    "default_logger",
    "get_settings",
]
