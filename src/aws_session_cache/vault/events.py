"""Structured events emitted by the session store."""

from __future__ import annotations

import enum
import logging
import re
from typing import Any, Protocol

# Control character pattern for log injection prevention.
_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


class SessionEvent(enum.Enum):
    LOOKUP = "lookup"
    SESSION_EXPIRES = "session_expires"
    STALE_SESSION = "stale_session"
    CLEANUP_FAILED = "cleanup_failed"
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    PAYLOAD_EXPIRED = "payload_expired"
    STORED = "stored"
    DELETED = "deleted"
    REMOVED = "removed"


_EVENT_LEVELS = {
    SessionEvent.CLEANUP_FAILED: logging.WARNING,
    SessionEvent.PAYLOAD_EXPIRED: logging.INFO,
    SessionEvent.STORED: logging.INFO,
    SessionEvent.DELETED: logging.INFO,
    SessionEvent.REMOVED: logging.INFO,
}


class EventSink(Protocol):
    def emit(self, event: SessionEvent, **fields: Any) -> None: ...


def _sanitize_log_value(value: object) -> str:
    """Replace control characters (newlines, tabs, etc.) to prevent log injection."""
    return _CONTROL_CHAR_RE.sub("_", str(value))


class LoggingEventSink:
    """Writes each event as one ``event=<name> key=value ...`` log line."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("aws_session_cache.sessions")

    def emit(self, event: SessionEvent, **fields: Any) -> None:
        level = _EVENT_LEVELS.get(event, logging.DEBUG)
        if not self._logger.isEnabledFor(level):
            return
        parts = [f"event={event.value}"]
        parts.extend(f"{name}={_sanitize_log_value(value)!r}" for name, value in fields.items())
        self._logger.log(level, " ".join(parts))


class RecordingEventSink:
    """Keeps emitted events in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[SessionEvent, dict[str, Any]]] = []

    def emit(self, event: SessionEvent, **fields: Any) -> None:
        self.events.append((event, fields))

    def names(self) -> list[SessionEvent]:
        return [event for event, _ in self.events]
