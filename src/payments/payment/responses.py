"""Payment response — the representation returned to callers and replayed
from the idempotency ledger."""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel

from payments.payment.payment import Payment, PaymentStatus


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _amount(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


class PaymentResponse(BaseModel):
    id: str
    order_id: str
    user_id: str
    amount: Decimal
    currency: str
    status: PaymentStatus
    payment_method: str | None = None
    gateway_order_ref: str | None = None
    gateway_payment_ref: str | None = None
    gateway_key_id: str | None = None
    refunded_amount: Decimal
    failure_reason: str | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None

    @classmethod
    def from_payment(cls, payment: Payment, gateway_key_id: str | None = None) -> "PaymentResponse":
        return cls(
            id=str(payment.id),
            order_id=str(payment.order_id),
            user_id=str(payment.user_id),
            amount=_amount(payment.amount),
            currency=payment.currency,
            status=PaymentStatus(payment.status),
            payment_method=payment.payment_method,
            gateway_order_ref=payment.gateway_order_ref,
            gateway_payment_ref=payment.gateway_payment_ref,
            gateway_key_id=gateway_key_id,
            refunded_amount=_amount(payment.refunded_amount),
            failure_reason=payment.failure_reason,
            created_at=_aware(payment.created_at),
            updated_at=_aware(payment.updated_at),
            completed_at=_aware(payment.completed_at),
        )
