"""
Base Strategy.

The Strategy is the base unit of OmniEvent's ability to handle multiple
event providers. Subclassing Strategy is how an adapter declares itself:
every subclass is a known strategy, and the Builder only activates
Strategy subclasses.

Lifecycle of a request:
    construct (defaults + options) → merge call options → authorize → operation

Subclasses override any of:
    - list_events() -> List[EventHash]
    - create_event() -> EventHash
    - update_event() -> EventHash
    - destroy_event() -> bool
and read their inputs from ``self.options``. The set of overridden
operations is recorded in ``capabilities`` when the class is created.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, ClassVar, FrozenSet, List, Mapping, Optional, Tuple, Union

from omnievent.errors import Unauthorized
from omnievent.monitoring.logging import with_context
from omnievent.schemas.event import EventHash
from omnievent.store import KeyStore
from omnievent.utils import underscore


class Operation(str, Enum):
    """Operations a strategy may support."""

    LIST_EVENTS = "list_events"
    CREATE_EVENT = "create_event"
    UPDATE_EVENT = "update_event"
    DESTROY_EVENT = "destroy_event"


class Options(KeyStore):
    """Strategy options; nested mappings become Options too."""


TIME_OPTIONS = ("from_time", "to_time")


class Strategy:
    """
    Base class for provider strategies.

    Default options are declared with a ``default_config`` mapping in the
    class body, or afterwards with ``option()`` / ``configure()``. They are
    inherited: a subclass starts from a deep copy of its parent's defaults,
    taken the first time the subclass's defaults are read.

    Example:
        class Meetup(Strategy):
            arg_names = ("token",)
            default_config = {"name": "meetup", "client": {"timeout": 10}}

            def list_events(self):
                ...
    """

    arg_names: ClassVar[Tuple[str, ...]] = ()
    default_config: ClassVar[Mapping[str, Any]] = {}
    capabilities: ClassVar[FrozenSet[Operation]] = frozenset()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.capabilities = frozenset(
            operation
            for operation in Operation
            if getattr(cls, operation.value) is not getattr(Strategy, operation.value)
        )

    # ========================================================================
    # CLASS-LEVEL OPTIONS
    # ========================================================================

    @classmethod
    def default_options(cls) -> Options:
        """
        Default options for this class, computed once and memoized.

        Parent defaults are deep-merged first, then the class's own
        ``default_config``; later changes to the parent are not picked up.
        """
        if "_default_options" not in cls.__dict__:
            options = Options()
            parent = next(
                (base for base in cls.__mro__[1:] if issubclass(base, Strategy)),
                None,
            )
            if parent is not None:
                options.deep_update(parent.default_options())
            options.deep_update(cls.__dict__.get("default_config", {}))
            cls._default_options = options
        return cls._default_options

    @classmethod
    def configure(
        cls,
        options: Union[Mapping[str, Any], Callable[[Options], Any], None] = None,
        **kwargs,
    ) -> Options:
        """
        Set default options declaratively.

        Accepts a mapping (deep-merged into the defaults), keyword options,
        or a callable that receives the defaults to edit them.

        Example:
            Meetup.configure({"client": {"retries": 3}})
            Meetup.configure(lambda c: c.set_path("client.timeout", 30))
        """
        defaults = cls.default_options()
        if callable(options):
            options(defaults)
        elif options:
            defaults.deep_update(options)
        if kwargs:
            defaults.deep_update(kwargs)
        return defaults

    @classmethod
    def option(cls, name: str, value: Any = None) -> None:
        """Declare a single default option."""
        cls.default_options()[name] = value

    # ========================================================================
    # INSTANCE
    # ========================================================================

    def __init__(
        self,
        *args,
        setup: Optional[Callable[[Options], Any]] = None,
        context: Any = None,
        **options,
    ):
        """
        Initialize the strategy.

        Args:
            *args: Values for the options named in ``arg_names``, in order
            setup: Callable receiving the options for further configuration
            context: Context providing the configuration (default context if None)
            **options: Deep-merged over the class default options

        Raises:
            TypeError: If more positional arguments than ``arg_names`` are given
            ValueError: If from_time / to_time is not a datetime
        """
        self.context = context
        self.token: Any = None
        self.options: Options = self.default_options().deep_copy()
        self.options.deep_update(options)
        if not self.options.get("name"):
            self.options["name"] = underscore(type(self).__name__)

        if len(args) > len(self.arg_names):
            raise TypeError(
                f"{type(self).__name__} takes {len(self.arg_names)} positional "
                f"argument(s) {list(self.arg_names)}, got {len(args)}"
            )
        for arg_name, value in zip(self.arg_names, args):
            self.options[arg_name] = value

        if setup is not None:
            setup(self.options)

        self.validate_options()
        self.after_initialize()

    def after_initialize(self) -> None:
        """Hook run at the end of construction. Override in subclasses."""

    def validate_options(self) -> None:
        """
        Validate the current options.

        Raises:
            ValueError: If from_time / to_time is set to something other than a datetime
        """
        for key in TIME_OPTIONS:
            value = self.options.get(key)
            if value is not None and not isinstance(value, datetime):
                raise ValueError(f"{key} must be a datetime, got {type(value).__name__}")

    @property
    def name(self) -> Optional[str]:
        return self.options.get("name")

    @property
    def config(self):
        context = self.context
        if context is None:
            from omnievent.context import get_context

            context = get_context()
        return context.config

    def supports(self, operation: Union[Operation, str]) -> bool:
        return Operation(operation) in self.capabilities

    def request(
        self,
        operation: Union[Operation, str],
        options: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Run an operation with per-call options.

        Args:
            operation: Operation (or its string value) to run
            options: Deep-merged into this instance's options first

        Returns:
            The operation's result, or None when authorization fails

        Raises:
            NotImplementedError: If the strategy does not implement the operation
            Unauthorized: If authorization fails and the configuration asks to raise
        """
        operation = Operation(operation)
        if not self.supports(operation):
            raise NotImplementedError(
                f"{type(self).__name__} does not implement {operation.value}"
            )

        self.options.deep_update(options or {})
        self.validate_options()

        self.authorize()
        if not self.token:
            if self.config.raise_on_unauthorized:
                raise Unauthorized(f"({self.name}) not authorized to {operation.value}")
            self.log(logging.WARNING, f"Not authorized to {operation.value}; skipping")
            return None

        return getattr(self, operation.value)()

    def authorize(self) -> None:
        """Establish ``self.token`` from the options."""
        self.token = self.options.get("token")

    # ========================================================================
    # OPERATIONS - override in subclasses
    # ========================================================================

    def list_events(self) -> List[EventHash]:
        raise NotImplementedError(f"{type(self).__name__} does not implement list_events")

    def create_event(self) -> EventHash:
        raise NotImplementedError(f"{type(self).__name__} does not implement create_event")

    def update_event(self) -> EventHash:
        raise NotImplementedError(f"{type(self).__name__} does not implement update_event")

    def destroy_event(self) -> bool:
        raise NotImplementedError(f"{type(self).__name__} does not implement destroy_event")

    # ========================================================================
    # LOGGING
    # ========================================================================

    def log(self, level: Union[int, str], message: str) -> None:
        """
        Log through the configured logger, prefixed with this strategy's name.

        Example:
            self.log("warning", "This is a warning.")
        """
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        adapter = with_context(self.config.logger, provider=self.name)
        adapter.log(level, f"({self.name}) {message}")

    @classmethod
    def descendants(cls) -> List[type]:
        """Every subclass, recursively."""
        found: List[type] = []
        for subclass in cls.__subclasses__():
            found.append(subclass)
            found.extend(subclass.descendants())
        return found

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
