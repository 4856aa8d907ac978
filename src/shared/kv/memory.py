"""In-process key-value store for development and tests."""

import threading
import time
from collections.abc import Callable
from datetime import timedelta

from shared.kv.port import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store with lazy expiry.

    ``clock`` returns monotonic seconds; tests pass their own to move time.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._data[key]
                return None
            return value

    def put(self, key: str, value: str, ttl: timedelta) -> None:
        with self._lock:
            self._data[key] = (value, self._clock() + ttl.total_seconds())

    def evict(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            now = self._clock()
            return [k for k, (_, expires_at) in self._data.items() if now < expires_at]

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
