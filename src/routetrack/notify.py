"""User-visible notices.

Presentation (toasts, snackbars) is outside this package; a :class:`Notifier`
receives non-blocking notices and decides how to show them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class NoticeLevel(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    message: str
    level: NoticeLevel = NoticeLevel.INFO


class Notifier(Protocol):
    def notify(self, notice: Notice) -> None:
        ...


def route_finished_message(title: str) -> str:
    return f"{title} finished!"


def route_already_tracked_message(title: str) -> str:
    return f"{title} already added, wait for it to finish."


def route_not_found_message(route_id: str) -> str:
    return f"Route {route_id} is not available."


_LEVELS: dict[NoticeLevel, int] = {
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.WARNING: logging.WARNING,
    NoticeLevel.ERROR: logging.ERROR,
}


class LoggingNotifier:
    """Present notices through the ``routetrack.notices`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("routetrack.notices")

    def notify(self, notice: Notice) -> None:
        self._logger.log(_LEVELS.get(notice.level, logging.INFO), "[%s] %s", notice.level, notice.message)


class RecordingNotifier:
    """Keep notices in memory, newest last."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    def messages(self, level: NoticeLevel | None = None) -> list[str]:
        return [n.message for n in self.notices if level is None or n.level == level]
