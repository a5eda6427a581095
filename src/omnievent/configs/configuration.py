"""
Runtime configuration carried by a Context.

Holds the logger strategies write to, the provider-key camelization
overrides, and the policy for unauthorized requests.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping

from omnievent.configs.settings import Settings
from omnievent.store import deep_merge


def default_logger() -> logging.Logger:
    """The default logger."""
    return logging.getLogger("omnievent")


@dataclass
class Configuration:
    """
    OmniEvent configuration.

    Attributes:
        logger: Logger used by strategies (messages prefixed with the provider name)
        camelizations: Provider key -> strategy class name overrides
        raise_on_unauthorized: Raise Unauthorized instead of returning None
            when a strategy fails to authorize
    """

    logger: logging.Logger = field(default_factory=default_logger)
    camelizations: Dict[str, str] = field(default_factory=dict)
    raise_on_unauthorized: bool = False

    @classmethod
    def option_names(cls) -> list:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_settings(cls, settings: Settings) -> "Configuration":
        """Build a configuration from environment-backed settings."""
        return cls(
            camelizations=dict(settings.CAMELIZATIONS),
            raise_on_unauthorized=settings.RAISE_ON_UNAUTHORIZED,
        )

    def configure(self, options: Mapping[str, Any]) -> "Configuration":
        """
        Update options in place.

        Mapping options (camelizations) are deep-merged; the rest replace.
        A logger may be given by name.

        Raises:
            ValueError: If an option name is unknown
        """
        unknown = set(options) - set(self.option_names())
        if unknown:
            raise ValueError(f"Unknown configuration option(s): {sorted(unknown)}")

        for name, value in options.items():
            if name == "logger" and isinstance(value, str):
                value = logging.getLogger(value)
            current = getattr(self, name)
            if isinstance(current, dict) and isinstance(value, Mapping):
                value = deep_merge(current, value)
            setattr(self, name, value)
        return self

    def set_defaults(self) -> None:
        """Restore every option to its default."""
        defaults = type(self)()
        for name in self.option_names():
            setattr(self, name, getattr(defaults, name))
