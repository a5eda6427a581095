"""
Builder for activating strategies.

Activation installs a factory in the context: every dispatch to the
provider gets a new strategy instance built with the options given here.

Usage:
    from omnievent.builder import Builder

    builder = Builder()
    builder.options = {"match_name": "python"}
    builder.provider("developer", token="secret")

    # or from YAML
    Builder.from_config("providers.yaml")

YAML layout:
    configuration:
      raise_on_unauthorized: true
      camelizations: {eventbrite_v3: EventbriteV3}
    logging:
      level: DEBUG
      json_logs: false
    options:
      match_name: python
    providers:
      developer:
        enabled: true
        args: []
        options: {token: secret}
"""

import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

import yaml

from omnievent.configs.configuration import Configuration
from omnievent.context import Context, get_context
from omnievent.errors import MissingStrategy, StrategyNotIncluded
from omnievent.monitoring.logging import LoggingOptions, setup_logging
from omnievent.store import deep_merge
from omnievent.strategy import Options, Strategy

logger = logging.getLogger(__name__)


class Builder:
    """Activates strategies in a context."""

    def __init__(
        self,
        context: Optional[Context] = None,
        setup: Optional[Callable[["Builder"], Any]] = None,
    ):
        """
        Initialize the builder.

        Args:
            context: Context to activate strategies in (default context if None)
            setup: Callable receiving the builder, for block-style configuration
        """
        self.context = context or get_context()
        self._options = Options()
        if setup is not None:
            setup(self)

    @property
    def options(self) -> Options:
        """Options shared by every provider activated afterwards."""
        return self._options

    @options.setter
    def options(self, value: Mapping[str, Any]) -> None:
        self._options = Options(value or {})

    def configure(self, **kwargs) -> Configuration:
        """Update the context configuration."""
        return self.context.config.configure(kwargs)

    def provider(
        self,
        name: str,
        *args,
        setup: Optional[Callable[[Options], Any]] = None,
        **options,
    ) -> type:
        """
        Activate the strategy for a provider key.

        Provider options are deep-merged over the builder's shared options.

        Args:
            name: Provider key, e.g. "developer"
            *args: Positional arguments bound to the strategy's arg_names
            setup: Callable receiving each new instance's options
            **options: Strategy options

        Returns:
            The activated strategy class

        Raises:
            MissingStrategy: If the key does not resolve to a registered class
            StrategyNotIncluded: If the resolved class is not a Strategy
        """
        strategy_class = self.context.provider_class(name)
        if strategy_class is None:
            raise MissingStrategy(f"No strategy found for provider '{name}'")
        if not (inspect.isclass(strategy_class) and issubclass(strategy_class, Strategy)):
            raise StrategyNotIncluded(
                f"{strategy_class.__name__} does not subclass Strategy"
            )

        merged = deep_merge(self._options, options)
        context = self.context

        def factory() -> Strategy:
            return strategy_class(*args, setup=setup, context=context, **merged)

        self.context.activate(strategy_class, factory)
        logger.info(f"Activated provider '{name}' ({strategy_class.__name__})")
        return strategy_class

    # ========================================================================
    # CONFIG FILES
    # ========================================================================

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], context: Optional[Context] = None) -> "Builder":
        """
        Apply a provider configuration mapping.

        Providers with ``enabled: false`` are skipped.
        """
        builder = cls(context)

        if data.get("configuration"):
            builder.configure(**data["configuration"])
        if data.get("logging"):
            setup_logging(LoggingOptions(**data["logging"]))
        if data.get("options"):
            builder.options = data["options"]

        providers: Dict[str, Any] = data.get("providers") or {}
        for name, provider_config in providers.items():
            provider_config = provider_config or {}
            if not provider_config.get("enabled", True):
                logger.info(f"Skipping disabled provider '{name}'")
                continue
            builder.provider(
                name,
                *(provider_config.get("args") or []),
                **(provider_config.get("options") or {}),
            )

        return builder

    @classmethod
    def from_config(cls, path: Union[str, Path], context: Optional[Context] = None) -> "Builder":
        """
        Apply a YAML provider configuration file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        logger.debug(f"Loaded provider configuration from {path}")
        return cls.from_dict(data, context=context)
