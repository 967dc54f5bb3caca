# src/taskique/notify.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from .core.ports import NotificationKind

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleNotifier:
    """Prints toasts as timestamped console lines."""

    def __init__(self, emit: Callable[[str], None] = print) -> None:
        self._emit = emit

    def notify(self, message: str, kind: NotificationKind) -> None:
        marker = "OK" if kind == "success" else "ERROR"
        self._emit(f"[{_ts_local()}] [{marker}] {message}")


class LoggingNotifier:
    """Routes notifications into the log only (headless runs)."""

    def notify(self, message: str, kind: NotificationKind) -> None:
        if kind == "error":
            logger.warning("Notification: %s", message)
        else:
            logger.info("Notification: %s", message)
