"""User-facing notifications (toasts)."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Literal

from core.errors import AuthorizationError, user_message
from core.logger import get_logger

log = get_logger("ui/services/notifier")

Level = Literal["success", "info", "warning", "error"]


@dataclass(frozen=True)
class Notification:
    level: Level
    text: str


class Notifier:
    """Queue of notifications, drained and rendered once per script run."""

    def __init__(self) -> None:
        self._pending: List[Notification] = []

    def _push(self, level: Level, text: str) -> None:
        self._pending.append(Notification(level, text))

    def success(self, text: str) -> None:
        self._push("success", text)

    def info(self, text: str) -> None:
        self._push("info", text)

    def warning(self, text: str) -> None:
        self._push("warning", text)

    def error(self, text: str) -> None:
        self._push("error", text)

    def report(self, exc: BaseException, fallback: str) -> None:
        """
        Turn a failed call into an error toast.

        401s were already announced by the session expiry handler.
        """
        if isinstance(exc, AuthorizationError):
            return
        text = user_message(exc, fallback)
        log.warning(f"{fallback}: {exc}")
        self.error(text)

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        pending, self._pending = self._pending, []
        return pending
