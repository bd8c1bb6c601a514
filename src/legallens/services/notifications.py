"""Notification sinks for user-facing success/error messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Protocol

from legallens.metrics.observability import get_logger


class NotificationSink(Protocol):
    """Fire-and-forget notification surface."""

    def success(self, message: str) -> None:
        """Surface a success message."""

    def error(self, message: str) -> None:
        """Surface an error message."""


@dataclass(frozen=True)
class Notification:
    level: Literal["success", "error"]
    message: str


class LoggingNotificationSink:
    """Writes notifications to the structured log."""

    def __init__(self) -> None:
        self._logger = get_logger("notifications")

    def success(self, message: str) -> None:
        self._logger.info("notify.success", message=message)

    def error(self, message: str) -> None:
        self._logger.warning("notify.error", message=message)


class QueueNotificationSink(LoggingNotificationSink):
    """Logs notifications and buffers them until the view layer drains them."""

    def __init__(self) -> None:
        super().__init__()
        self._items: List[Notification] = []

    def success(self, message: str) -> None:
        super().success(message)
        self._items.append(Notification("success", message))

    def error(self, message: str) -> None:
        super().error(message)
        self._items.append(Notification("error", message))

    def drain(self) -> List[Notification]:
        items, self._items = self._items, []
        return items
