"""
Runtime context: strategy registry, active strategies and configuration.

A Context is built once at start-up and handed to the Builder and the
Dispatcher. The package-level API shares one default context, created on
first use from the environment settings.

Usage:
    from omnievent.context import Context
    from omnievent.builder import Builder
    from omnievent.dispatch import Dispatcher

    context = Context()
    Builder(context).provider("developer")
    events = Dispatcher(context).list_events("developer")
"""

import inspect
import logging
from typing import Callable, Dict, List, Optional

from omnievent import strategies
from omnievent.configs.configuration import Configuration
from omnievent.configs.settings import Settings, get_settings
from omnievent.errors import MissingStrategy, StrategyNotConfigured
from omnievent.monitoring.logging import LoggingOptions, setup_logging
from omnievent.strategy import Strategy
from omnievent.utils import camelize

logger = logging.getLogger(__name__)

StrategyFactory = Callable[[], Strategy]


class Context:
    """
    Holds everything a dispatch needs to resolve a provider key.

    Attributes:
        config: Configuration (logger, camelizations, unauthorized policy)
        strategy_classes: Class name -> class lookup table
        active_strategies: Class -> factory producing a fresh instance
    """

    def __init__(self, config: Optional[Configuration] = None):
        self.config = config or Configuration()
        self.strategy_classes: Dict[str, type] = {}
        self.active_strategies: Dict[type, StrategyFactory] = {}

        for class_name in strategies.__all__:
            self.register(getattr(strategies, class_name))

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Context":
        return cls(Configuration.from_settings(settings or get_settings()))

    # ========================================================================
    # REGISTRY
    # ========================================================================

    def register(self, strategy_class: type, name: Optional[str] = None) -> type:
        """
        Make a class resolvable by provider key.

        Usable as a decorator:
            @context.register
            class Meetup(Strategy): ...

        Args:
            strategy_class: Class to register
            name: Lookup name; defaults to the class name

        Returns:
            The class, unchanged
        """
        if not inspect.isclass(strategy_class):
            raise TypeError(f"Only classes can be registered, got {strategy_class!r}")
        self.strategy_classes[name or strategy_class.__name__] = strategy_class
        return strategy_class

    def strategies(self) -> List[type]:
        """Every known Strategy subclass."""
        return Strategy.descendants()

    def provider_class(self, key: str) -> Optional[type]:
        """
        Resolve a provider key to a registered class.

        The camelizations table is consulted before the default camel-casing,
        so "eventbrite_v3" can map to any class name.

        Returns:
            The registered class or None
        """
        class_name = camelize(key, self.config.camelizations)
        return self.strategy_classes.get(class_name)

    # ========================================================================
    # ACTIVATION
    # ========================================================================

    def activate(self, strategy_class: type, factory: StrategyFactory) -> None:
        self.active_strategies[strategy_class] = factory
        logger.debug(f"Activated {strategy_class.__name__}")

    def strategy_instance(self, key: str) -> Strategy:
        """
        Build a fresh strategy instance for a provider key.

        Raises:
            MissingStrategy: If the key does not resolve to a registered class
            StrategyNotConfigured: If the class has not been activated
        """
        strategy_class = self.provider_class(key)
        if strategy_class is None:
            raise MissingStrategy(f"No strategy found for provider '{key}'")

        factory = self.active_strategies.get(strategy_class)
        if factory is None:
            raise StrategyNotConfigured(
                f"Strategy {strategy_class.__name__} is not configured; "
                f"activate it with Builder().provider('{key}')"
            )
        return factory()


# Module-level default context
_context: Optional[Context] = None


def get_context() -> Context:
    """
    Get or create the default context.

    On creation the configuration comes from the environment settings, the
    package logger is set up from LOG_LEVEL / JSON_LOGS, and the providers
    file named by PROVIDERS_CONFIG_PATH (if any) is applied.
    """
    global _context
    if _context is None:
        settings = get_settings()
        _context = Context.from_settings(settings)
        setup_logging(LoggingOptions(level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS))
        if settings.PROVIDERS_CONFIG_PATH:
            from omnievent.builder import Builder

            Builder.from_config(settings.PROVIDERS_CONFIG_PATH, context=_context)
    return _context


def reset_context(context: Optional[Context] = None) -> Optional[Context]:
    """Replace the default context; None means rebuild on next use."""
    global _context
    _context = context
    return _context
