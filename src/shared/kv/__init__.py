"""Key-value store factory.

Provides get_store() / set_store() to swap implementations:
- InMemoryStore for development and testing
- RedisStore when KV_BACKEND=redis and REDIS_URL is set
"""

from shared.config import get_settings
from shared.kv.memory import InMemoryStore
from shared.kv.port import KeyValueStore

_current_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """Return the current key-value store, building it from settings on first use."""
    global _current_store
    if _current_store is None:
        settings = get_settings()
        if settings.kv_backend == "redis" and settings.redis_url:
            from shared.kv.redis_store import RedisStore

            _current_store = RedisStore.from_url(settings.redis_url)
        else:
            _current_store = InMemoryStore()
    return _current_store


def set_store(store: KeyValueStore) -> None:
    """Override the active store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    """Reset to the default store."""
    global _current_store
    _current_store = None
