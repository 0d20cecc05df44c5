"""
Transient user-facing notifications ("toasts").

The session controller never talks to a UI directly. It posts 'Notification'
objects to a 'NotificationCenter', which forwards them to any registered
listeners and keeps them until the rendering layer drains them.
"""

from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel


class NotificationVariant(StrEnum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notification(BaseModel):
    """A short, non-blocking message for the user."""

    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT


NotificationListener = Callable[[Notification], None]


class NotificationCenter:
    def __init__(self) -> None:
        self.pending: list[Notification] = []
        self._listeners: list[NotificationListener] = []

    def subscribe(self, listener: NotificationListener) -> None:
        self._listeners.append(listener)

    def notify(self, notification: Notification) -> None:
        self.pending.append(notification)
        for listener in self._listeners:
            listener(notification)

    def drain(self) -> list[Notification]:
        """Return all pending notifications and forget them."""
        pending, self.pending = self.pending, []
        return pending
