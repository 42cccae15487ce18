"""
Notification Queue

Transient user-facing messages with timed auto-removal. Every ``show`` is an
independent enqueue; removal timers run on the asyncio event loop and are
cancelled when the queue is closed.
"""

import asyncio
import logging

from .actions import AddNotification, ClearNotifications, RemoveNotification
from .state import NotificationType
from .store import AppStore

logger = logging.getLogger(__name__)

DEFAULT_REMOVAL_DELAY_SECONDS = 5.0


class NotificationQueue:
    """Enqueue, expire and dismiss notifications held in the store."""

    def __init__(
        self,
        store: AppStore,
        *,
        default_delay: float = DEFAULT_REMOVAL_DELAY_SECONDS,
    ):
        self.store = store
        self.default_delay = default_delay
        self._timers: dict[int, asyncio.TimerHandle] = {}
        self._closed = False

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def show(
        self,
        type: NotificationType | str,
        title: str,
        message: str | None = None,
        *,
        auto_remove: bool = True,
        delay: float | None = None,
    ) -> int:
        """
        Enqueue a notification.

        Args:
            type: Notification severity
            title: Short headline
            message: Optional body text
            auto_remove: Schedule removal after ``delay`` when true
            delay: Seconds before removal, defaults to ``default_delay``

        Returns:
            The id of the new notification
        """
        notification_id = self.store.next_notification_id()
        self.store.dispatch(
            AddNotification(
                type=NotificationType(type),
                title=title,
                message=message,
                id=notification_id,
            )
        )

        if auto_remove and not self._closed:
            self._schedule_removal(
                notification_id, self.default_delay if delay is None else delay
            )
        return notification_id

    def _schedule_removal(self, notification_id: int, delay: float) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(
                f"No running event loop; notification {notification_id} stays until removed"
            )
            return

        self._timers[notification_id] = loop.call_later(
            delay, self._expire, notification_id
        )

    def _expire(self, notification_id: int) -> None:
        self._timers.pop(notification_id, None)
        if not self._closed:
            self.store.dispatch(RemoveNotification(notification_id))

    def remove(self, notification_id: int) -> None:
        """Remove a notification; unknown ids are ignored."""
        timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()
        self.store.dispatch(RemoveNotification(notification_id))

    def clear(self) -> None:
        self._cancel_timers()
        self.store.dispatch(ClearNotifications())

    def _cancel_timers(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

    def close(self) -> None:
        """Cancel every pending removal; nothing is dispatched afterwards."""
        self._closed = True
        self._cancel_timers()
