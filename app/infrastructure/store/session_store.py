from __future__ import annotations

import threading
import uuid
from typing import Generic, TypeVar

T = TypeVar("T")


class MemorySessionStore(Generic[T]):
    """Search sessions held in process memory, keyed by a random id."""

    def __init__(self, max_sessions: int = 500) -> None:
        self._sessions: dict[str, T] = {}
        self._lock = threading.Lock()
        self._max_sessions = max_sessions

    def add(self, session: T) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            if len(self._sessions) >= self._max_sessions:
                # drop the oldest; dicts keep insertion order
                oldest = next(iter(self._sessions))
                del self._sessions[oldest]
            self._sessions[session_id] = session
        return session_id

    def get(self, session_id: str) -> T | None:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
