"""Tests for the key-value store port, in-memory store and Redis store."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
import redis
from shared.errors import ErrorKind, TransientInfraError
from shared.kv import get_store, reset_store, set_store
from shared.kv.memory import InMemoryStore
from shared.kv.redis_store import RedisStore


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestInMemoryStore:
    def test_get_missing_key_returns_none(self):
        assert InMemoryStore().get("nope") is None

    def test_put_then_get(self):
        store = InMemoryStore()
        store.put("cart:u1", '{"a": 1}', timedelta(days=7))
        assert store.get("cart:u1") == '{"a": 1}'

    def test_entry_expires_after_ttl(self):
        clock = _Clock()
        store = InMemoryStore(clock=clock)
        store.put("k", "v", timedelta(seconds=10))

        clock.advance(9)
        assert store.get("k") == "v"

        clock.advance(1)
        assert store.get("k") is None
        assert store.keys() == []

    def test_put_refreshes_ttl(self):
        clock = _Clock()
        store = InMemoryStore(clock=clock)
        store.put("k", "v1", timedelta(seconds=10))
        clock.advance(8)
        store.put("k", "v2", timedelta(seconds=10))
        clock.advance(8)
        assert store.get("k") == "v2"

    def test_evict_removes_entry(self):
        store = InMemoryStore()
        store.put("k", "v", timedelta(minutes=1))
        store.evict("k")
        assert store.get("k") is None

    def test_evict_missing_key_is_noop(self):
        InMemoryStore().evict("missing")

    def test_clear(self):
        store = InMemoryStore()
        store.put("a", "1", timedelta(minutes=1))
        store.put("b", "2", timedelta(minutes=1))
        store.clear()
        assert store.keys() == []


class TestRedisStore:
    def test_put_uses_expiry_in_seconds(self):
        client = MagicMock()
        RedisStore(client).put("idempotency:k1", "{}", timedelta(hours=24))
        client.set.assert_called_once_with("idempotency:k1", "{}", ex=86400)

    def test_get_delegates_to_client(self):
        client = MagicMock()
        client.get.return_value = "value"
        assert RedisStore(client).get("k") == "value"

    def test_evict_deletes_key(self):
        client = MagicMock()
        RedisStore(client).evict("k")
        client.delete.assert_called_once_with("k")

    @pytest.mark.parametrize(
        "method, args",
        [("get", ("k",)), ("put", ("k", "v", timedelta(seconds=5))), ("evict", ("k",))],
    )
    def test_redis_errors_become_transient_infra_errors(self, method, args):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")
        client.set.side_effect = redis.ConnectionError("down")
        client.delete.side_effect = redis.ConnectionError("down")

        with pytest.raises(TransientInfraError) as exc:
            getattr(RedisStore(client), method)(*args)
        assert exc.value.kind is ErrorKind.TRANSIENT_INFRA
        assert exc.value.retryable is True


class TestStoreFactory:
    def test_defaults_to_in_memory(self):
        reset_store()
        assert isinstance(get_store(), InMemoryStore)

    def test_get_store_is_singleton(self):
        reset_store()
        assert get_store() is get_store()

    def test_set_store_overrides(self):
        custom = InMemoryStore()
        set_store(custom)
        assert get_store() is custom
