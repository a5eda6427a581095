"""
Request dispatch.

The Dispatcher resolves a provider key to an active strategy, checks the
request arguments, and runs one operation on a fresh strategy instance.
"""

import logging
from typing import Any, List, Optional, Union

from omnievent.context import Context, get_context
from omnievent.monitoring.logging import with_context
from omnievent.schemas.event import EventHash
from omnievent.strategy import Operation

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Routes operations to provider strategies.

    Example:
        >>> dispatcher = Dispatcher(context)
        >>> dispatcher.list_events("developer", match_name="meetup")
    """

    def __init__(self, context: Optional[Context] = None):
        self._context = context

    @property
    def context(self) -> Context:
        return self._context or get_context()

    def dispatch(
        self,
        provider: str,
        operation: Union[Operation, str],
        options: Optional[dict] = None,
    ) -> Any:
        """
        Run an operation for a provider.

        Args:
            provider: Provider key, e.g. "developer"
            operation: Operation or its name, e.g. "list_events"
            options: Per-call options merged into the strategy's options

        Returns:
            The operation's result; None when the strategy is not authorized

        Raises:
            ValueError: If the provider key is missing or the operation is unknown
            MissingStrategy: If the provider key resolves to no registered class
            StrategyNotConfigured: If the strategy has not been activated
            NotImplementedError: If the strategy does not support the operation
        """
        if not provider:
            raise ValueError("A provider key is required")
        try:
            operation = Operation(operation)
        except ValueError:
            raise ValueError(f"Unknown operation '{operation}'") from None

        strategy = self.context.strategy_instance(provider)
        if not strategy.supports(operation):
            raise NotImplementedError(
                f"{type(strategy).__name__} does not implement {operation.value}"
            )
        with_context(logger, provider=provider, operation=operation.value).debug(
            f"Dispatching {operation.value} to {type(strategy).__name__}"
        )
        return strategy.request(operation, options or {})

    # ========================================================================
    # OPERATIONS
    # ========================================================================

    def list_events(self, provider: str, **options) -> Optional[List[EventHash]]:
        return self.dispatch(provider, Operation.LIST_EVENTS, options)

    def create_event(
        self, provider: str, event: Optional[EventHash] = None, **options
    ) -> Optional[EventHash]:
        self._check_event(event, require_valid=True)
        return self.dispatch(provider, Operation.CREATE_EVENT, {**options, "event": event})

    def update_event(
        self, provider: str, event: Optional[EventHash] = None, **options
    ) -> Optional[EventHash]:
        self._check_event(event)
        return self.dispatch(provider, Operation.UPDATE_EVENT, {**options, "event": event})

    def destroy_event(
        self, provider: str, event: Optional[EventHash] = None, **options
    ) -> Optional[bool]:
        self._check_event(event)
        return self.dispatch(provider, Operation.DESTROY_EVENT, {**options, "event": event})

    @staticmethod
    def _check_event(event: Any, require_valid: bool = False) -> None:
        if event is None:
            raise ValueError("An event is required")
        if not isinstance(event, EventHash):
            raise TypeError(f"event must be an EventHash, got {type(event).__name__}")
        if require_valid and not event.valid():
            raise ValueError(f"Invalid event: {', '.join(event.invalid)}")
