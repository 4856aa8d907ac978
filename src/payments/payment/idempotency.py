"""Idempotency ledger — remembers the response given for an idempotency key.

While a record exists, a repeated request with the same key gets the
stored response back and nothing is executed again. Records expire after
``IDEMPOTENCY_TTL_HOURS`` (24h by default).
"""

from datetime import timedelta

import structlog
from pydantic import ValidationError
from shared.config import get_settings
from shared.kv import get_store
from shared.kv.port import KeyValueStore

from payments.payment.responses import PaymentResponse

logger = structlog.get_logger(__name__)

IDEMPOTENCY_PREFIX = "idempotency:"


class IdempotencyLedger:
    def __init__(self, store: KeyValueStore | None = None, ttl: timedelta | None = None) -> None:
        self.store = store or get_store()
        self.ttl = ttl or timedelta(hours=get_settings().idempotency_ttl_hours)

    @staticmethod
    def key_for(idempotency_key: str) -> str:
        return f"{IDEMPOTENCY_PREFIX}{idempotency_key}"

    def lookup(self, idempotency_key: str) -> PaymentResponse | None:
        raw = self.store.get(self.key_for(idempotency_key))
        if raw is None:
            return None
        try:
            return PaymentResponse.model_validate_json(raw)
        except ValidationError as exc:
            # Unreadable record: behave as if there was none
            logger.error("Unreadable idempotency record", idempotency_key=idempotency_key, error=str(exc))
            return None

    def record(self, idempotency_key: str, response: PaymentResponse) -> None:
        self.store.put(self.key_for(idempotency_key), response.model_dump_json(), self.ttl)
        logger.debug("Idempotency record stored", idempotency_key=idempotency_key)

    def invalidate(self, idempotency_key: str) -> None:
        self.store.evict(self.key_for(idempotency_key))
        logger.info("Idempotency record invalidated", idempotency_key=idempotency_key)
