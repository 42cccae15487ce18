"""
Application Store

This module owns the single application state and serializes every change
through the reducer.
Key Features:
- Dispatch of typed actions through the pure reducer
- Observer pattern for state change notifications
- Monotonic notification ids, unique even within one clock tick
- Bounded dispatch history for debugging
"""

import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import Any

from .actions import Action, AddNotification
from .reducer import reduce
from .state import AppState

logger = logging.getLogger(__name__)

StateObserver = Callable[[AppState, AppState, Action], None]


class AppStore:
    """
    State container for one application session.

    Constructed explicitly by the composition root and passed to whatever
    needs it; there is no global instance.
    """

    # Maximum number of dispatches to keep in history
    MAX_HISTORY_SIZE = 100

    def __init__(
        self,
        initial_state: AppState | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self._state = initial_state or AppState()
        self._clock = clock
        self._observers: list[StateObserver] = []
        self._notification_ids = itertools.count(1)
        self._history: list[dict[str, Any]] = []
        logger.info("AppStore initialized with default application state")

    @property
    def state(self) -> AppState:
        return self._state

    def now(self) -> float:
        return self._clock()

    def next_notification_id(self) -> int:
        return next(self._notification_ids)

    def dispatch(self, action: Action) -> AppState:
        """
        Apply an action and notify observers if the state changed.

        Args:
            action: Action record to apply

        Returns:
            The state after the action
        """
        if isinstance(action, AddNotification) and action.id is None:
            action = replace(action, id=self.next_notification_id())

        old_state = self._state
        new_state = reduce(old_state, action, now=self._clock())
        changed = new_state is not old_state
        self._state = new_state

        self._history.append(
            {
                "timestamp": datetime.now(),
                "action": type(action).__name__,
                "changed": changed,
            }
        )
        if len(self._history) > self.MAX_HISTORY_SIZE:
            self._history.pop(0)

        logger.debug(f"Dispatched {type(action).__name__} (changed={changed})")

        if changed:
            self._notify_observers(new_state, old_state, action)
        return new_state

    def subscribe(self, callback: StateObserver) -> Callable[[], None]:
        """
        Subscribe to state changes.

        Args:
            callback: Function called with (new_state, old_state, action)

        Returns:
            A function that removes the subscription
        """
        self._observers.append(callback)
        logger.debug(f"Added state observer: {getattr(callback, '__name__', callback)}")
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: StateObserver) -> None:
        if callback in self._observers:
            self._observers.remove(callback)
            logger.debug(
                f"Removed state observer: {getattr(callback, '__name__', callback)}"
            )

    def _notify_observers(
        self, new_state: AppState, old_state: AppState, action: Action
    ) -> None:
        for observer in list(self._observers):
            try:
                observer(new_state, old_state, action)
            except Exception as e:
                logger.error(
                    f"Error notifying observer {getattr(observer, '__name__', observer)}: {e}"
                )

    def get_history(self, limit: int = 10) -> list[dict[str, Any]]:
        """Get recent dispatch history for debugging."""
        return self._history[-limit:] if limit > 0 else list(self._history)

    def get_state_summary(self) -> dict[str, Any]:
        """Get summary of current state for debugging."""
        return {
            "total_observers": len(self._observers),
            "history_size": len(self._history),
            "is_authenticated": self._state.is_authenticated,
            "language": self._state.language,
            "notification_count": len(self._state.notifications),
            "last_actions": self.get_history(5),
        }
