"""In-memory registry of calculator sessions shared by API requests."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

from .session import CalculatorSession


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown or its session has expired."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class StoredSession:
    """A session plus the lock that serializes every command sent to it."""

    session: CalculatorSession
    session_id: str = ""
    created_at: datetime = field(default_factory=_now)
    last_accessed: datetime = field(default_factory=_now)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def touch(self) -> None:
        self.last_accessed = _now()


class SessionStore:
    """Thread-safe in-memory session registry with TTL purging."""

    def __init__(self, *, max_sessions: int = 256, ttl: timedelta = timedelta(minutes=30)) -> None:
        self._items: dict[str, StoredSession] = {}
        self._lock = threading.Lock()
        self.max_sessions = max_sessions
        self.ttl = ttl

    def configure(self, *, max_sessions: int, ttl: timedelta) -> None:
        with self._lock:
            self.max_sessions = max_sessions
            self.ttl = ttl
            self._purge_locked()

    def _purge_locked(self) -> None:
        now = _now()
        expired = [
            session_id
            for session_id, stored in self._items.items()
            if now - stored.last_accessed > self.ttl
        ]
        for session_id in expired:
            self._items.pop(session_id, None)
        # Oldest idle sessions go first once the cap is reached.
        overflow = len(self._items) - self.max_sessions
        if overflow > 0:
            by_age = sorted(self._items.values(), key=lambda stored: stored.last_accessed)
            for stored in by_age[:overflow]:
                self._items.pop(stored.session_id, None)

    def create(self, factory: Callable[[], CalculatorSession]) -> StoredSession:
        session_id = uuid.uuid4().hex
        stored = StoredSession(session=factory(), session_id=session_id)
        with self._lock:
            self._items[session_id] = stored
            self._purge_locked()
        return stored

    def get(self, session_id: str) -> StoredSession:
        with self._lock:
            self._purge_locked()
            try:
                stored = self._items[session_id]
            except KeyError as exc:
                raise SessionNotFoundError("Session expired or not found") from exc
            stored.touch()
            return stored

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._items.pop(session_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


__all__ = ["SessionNotFoundError", "SessionStore", "StoredSession"]
