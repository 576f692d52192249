"""
Abstract base class for enum-driven polymorphic dispatch services.

The pattern:
1. Define an enum of cases (e.g. reducer action types)
2. Register a handler method for every enum member
3. Determine the case from the input
4. Dispatch to the registered handler

Registration is exhaustive: every member of the enum must have a handler,
so adding an enum member without a handler fails at construction time
rather than at the first dispatch.

Example:
    class ActionType(Enum):
        SET = "set"
        CLEAR = "clear"

    class MyReducer(EnumDispatchService[ActionType]):
        def __init__(self):
            super().__init__()
            self._register_handlers(ActionType, {
                ActionType.SET: self._handle_set,
                ActionType.CLEAR: self._handle_clear,
            })

        def _determine_strategy(self, state, action) -> ActionType:
            return action.type

        def reduce(self, state, action):
            return self.dispatch(state, action)
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TypeVar, Generic, Dict, Callable, Any, Type
import logging

logger = logging.getLogger(__name__)

# Type variable for the strategy enum
StrategyEnum = TypeVar('StrategyEnum', bound=Enum)


class EnumDispatchService(ABC, Generic[StrategyEnum]):
    """
    Abstract base class for services using enum-driven polymorphic dispatch.

    Subclasses must:
    1. Define a strategy enum
    2. Implement _determine_strategy() to select the appropriate strategy
    3. Register a handler for every enum member in __init__() using _register_handlers()

    The dispatch() method forwards all of its arguments to the selected handler.
    """

    def __init__(self):
        """Initialize the service with an empty handler registry."""
        self._handlers: Dict[StrategyEnum, Callable] = {}

    def _register_handlers(self, strategy_enum: Type[StrategyEnum],
                           handlers: Dict[StrategyEnum, Callable]) -> None:
        """
        Register strategy handlers.

        Args:
            strategy_enum: The enum whose members must all be handled
            handlers: Dictionary mapping strategy enum values to handler methods

        Raises:
            ValueError: If any enum member lacks a handler, or a key is not a member
        """
        missing = [member for member in strategy_enum if member not in handlers]
        if missing:
            raise ValueError(
                f"{self.__class__.__name__}: No handler registered for "
                f"{', '.join(m.name for m in missing)}"
            )
        foreign = [key for key in handlers if not isinstance(key, strategy_enum)]
        if foreign:
            raise ValueError(f"{self.__class__.__name__}: Handlers for unknown strategies: {foreign}")

        self._handlers = dict(handlers)
        logger.debug(f"{self.__class__.__name__}: Registered {len(handlers)} handlers")

    @abstractmethod
    def _determine_strategy(self, *args, **kwargs) -> StrategyEnum:
        """
        Determine which strategy to use based on input.

        Returns:
            Strategy enum value indicating which handler to use
        """
        pass

    def dispatch(self, *args, **kwargs) -> Any:
        """
        Dispatch to the appropriate handler based on determined strategy.

        Raises:
            KeyError: If strategy is not registered in handlers
        """
        strategy = self._determine_strategy(*args, **kwargs)

        if strategy not in self._handlers:
            raise KeyError(
                f"{self.__class__.__name__}: No handler registered for strategy {strategy}. "
                f"Available strategies: {list(self._handlers.keys())}"
            )
        handler = self._handlers[strategy]
        logger.debug(f"{self.__class__.__name__}: Dispatching to {strategy.value} handler")
        return handler(*args, **kwargs)

    def get_registered_strategies(self) -> list[StrategyEnum]:
        """Get list of all registered strategies."""
        return list(self._handlers.keys())

    def has_strategy(self, strategy: StrategyEnum) -> bool:
        """Check if a strategy has a registered handler."""
        return strategy in self._handlers
