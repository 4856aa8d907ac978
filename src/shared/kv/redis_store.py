"""Redis-backed key-value store."""

from datetime import timedelta

import redis
import structlog

from shared.errors import TransientInfraError
from shared.kv.port import KeyValueStore

logger = structlog.get_logger(__name__)


class RedisStore(KeyValueStore):
    def __init__(self, client: redis.Redis) -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: str, socket_timeout: float = 2.0) -> "RedisStore":
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    def get(self, key: str) -> str | None:
        try:
            return self.client.get(key)
        except redis.RedisError as exc:
            logger.error("Cache read failed", key=key, error=str(exc))
            raise TransientInfraError("Cache unavailable") from exc

    def put(self, key: str, value: str, ttl: timedelta) -> None:
        try:
            self.client.set(key, value, ex=int(ttl.total_seconds()))
        except redis.RedisError as exc:
            logger.error("Cache write failed", key=key, error=str(exc))
            raise TransientInfraError("Cache unavailable") from exc

    def evict(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.RedisError as exc:
            logger.error("Cache evict failed", key=key, error=str(exc))
            raise TransientInfraError("Cache unavailable") from exc
