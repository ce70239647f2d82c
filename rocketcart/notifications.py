"""
Notification Channel

Fire-and-forget delivery of user-facing cart errors (toasts).

- ToastQueue keeps pending toasts until the UI layer drains them
- LoggingNotifier only writes them to the log
"""
from collections import deque
from dataclasses import dataclass
from typing import Protocol

from rocketcart.errors import CartError
from rocketcart.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Notification:
    """One toast: its category and the already translated message."""
    category: CartError
    message: str

    def to_dict(self) -> dict:
        return {"category": self.category.name, "message": self.message}


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None:
        ...


class LoggingNotifier:
    """Writes toasts to the log instead of showing them."""

    def notify(self, notification: Notification) -> None:
        logger.info("Toast %s: %s", notification.category.name, notification.message)


class ToastQueue:
    """
    Pending toasts for a UI to poll.

    Bounded: when the UI stops draining, the oldest toasts are dropped.
    """

    def __init__(self, maxlen: int = 50):
        self._pending: deque[Notification] = deque(maxlen=maxlen)

    def notify(self, notification: Notification) -> None:
        if len(self._pending) == self._pending.maxlen:
            logger.debug("Toast queue full, dropping %s", self._pending[0].category.name)
        self._pending.append(notification)
        logger.debug("Queued toast %s", notification.category.name)

    def drain(self) -> list[Notification]:
        """Return and forget all pending toasts, oldest first."""
        drained = list(self._pending)
        self._pending.clear()
        return drained

    def __len__(self) -> int:
        return len(self._pending)


__all__ = ["Notification", "Notifier", "LoggingNotifier", "ToastQueue"]
