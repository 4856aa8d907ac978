"""Key-value store port.

Backs the cart store and the idempotency ledger. Values are strings
(JSON documents); every write carries a TTL.
"""

from abc import ABC, abstractmethod
from datetime import timedelta


class KeyValueStore(ABC):
    """Abstract key-value store with per-key expiry."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent or expired."""
        ...

    @abstractmethod
    def put(self, key: str, value: str, ttl: timedelta) -> None:
        """Store ``value`` under ``key``, replacing any previous value and expiry."""
        ...

    @abstractmethod
    def evict(self, key: str) -> None:
        """Remove ``key``. Evicting a missing key is not an error."""
        ...
