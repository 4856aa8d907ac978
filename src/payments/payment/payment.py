"""Payment aggregate (CQRS) — the core of the payments domain.

One payment exists per order. It is created PENDING, moves to PROCESSING
once the gateway has created its side of the payment, and is settled by
signature verification. Refunds accumulate in ``refunded_amount``, which
never decreases and never exceeds ``amount``; the comparison is made in
minor units.

State Machine:
    PENDING → PROCESSING → COMPLETED → PARTIALLY_REFUNDED → REFUNDED
    PENDING/PROCESSING → FAILED
    COMPLETED → REFUNDED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String
from shared.errors import InvalidTransitionError, RefundError
from shared.money import from_minor_units, money, to_minor_units

from payments.domain import payments
from payments.payment.events import PaymentCompleted, PaymentFailed, PaymentRefunded


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
    REFUNDED = "REFUNDED"

    @property
    def is_refundable(self) -> bool:
        return self in (PaymentStatus.COMPLETED, PaymentStatus.PARTIALLY_REFUNDED)

    @property
    def is_final(self) -> bool:
        return self in (PaymentStatus.COMPLETED, PaymentStatus.FAILED, PaymentStatus.REFUNDED)


_VALID_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PROCESSING, PaymentStatus.FAILED},
    PaymentStatus.PROCESSING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.COMPLETED: {PaymentStatus.PARTIALLY_REFUNDED, PaymentStatus.REFUNDED},
    PaymentStatus.PARTIALLY_REFUNDED: {PaymentStatus.PARTIALLY_REFUNDED, PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: set(),  # Terminal
    PaymentStatus.REFUNDED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@payments.aggregate
class Payment:
    order_id = Identifier(required=True, unique=True)
    user_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(max_length=3, required=True)
    status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(max_length=50)

    gateway_order_ref = String(max_length=255)
    gateway_payment_ref = String(max_length=255)
    gateway_signature = String(max_length=255)

    idempotency_key = String(required=True, max_length=255, unique=True)
    failure_reason = String(max_length=500)
    refunded_amount = Float(default=0.0)

    created_at = DateTime()
    updated_at = DateTime()
    completed_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, order_id, user_id, amount, currency, idempotency_key, payment_method=None):
        if amount is None or to_minor_units(amount) <= 0:
            raise ValidationError({"amount": ["Amount must be greater than zero"]})
        if not idempotency_key:
            raise ValidationError({"idempotency_key": ["Idempotency key is required"]})

        now = datetime.now(UTC)
        return cls(
            order_id=order_id,
            user_id=user_id,
            amount=money(amount),
            currency=currency.upper(),
            status=PaymentStatus.PENDING.value,
            payment_method=payment_method,
            idempotency_key=idempotency_key,
            refunded_amount=0.0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------
    @property
    def payment_status(self) -> PaymentStatus:
        return PaymentStatus(self.status)

    @property
    def remaining_amount(self) -> float:
        return from_minor_units(to_minor_units(self.amount) - to_minor_units(self.refunded_amount or 0))

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: PaymentStatus) -> None:
        current = self.payment_status
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(f"Cannot transition from {current.value} to {target_status.value}")

    def _move_to(self, target_status: PaymentStatus) -> datetime:
        self._assert_can_transition(target_status)
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now
        return now

    # -------------------------------------------------------------------
    # Gateway lifecycle
    # -------------------------------------------------------------------
    def start_processing(self, gateway_order_ref: str) -> None:
        self._move_to(PaymentStatus.PROCESSING)
        self.gateway_order_ref = gateway_order_ref

    def fail(self, reason: str) -> None:
        now = self._move_to(PaymentStatus.FAILED)
        self.failure_reason = reason
        self.raise_(
            PaymentFailed(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                user_id=str(self.user_id),
                amount=self.amount,
                currency=self.currency,
                reason=reason,
                failed_at=now,
            )
        )

    def complete(self, gateway_payment_ref: str, signature: str) -> None:
        now = self._move_to(PaymentStatus.COMPLETED)
        self.gateway_payment_ref = gateway_payment_ref
        self.gateway_signature = signature
        self.completed_at = now
        self.raise_(
            PaymentCompleted(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                user_id=str(self.user_id),
                amount=self.amount,
                currency=self.currency,
                completed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Refunds
    # -------------------------------------------------------------------
    def check_refund(self, amount=None) -> float:
        """Return the amount a refund request would move, or raise RefundError.

        ``None`` means everything not yet refunded.
        """
        if not self.payment_status.is_refundable:
            raise RefundError(f"Payment cannot be refunded. Current status: {self.status}")

        requested = self.remaining_amount if amount is None else money(amount)
        if to_minor_units(requested) <= 0:
            raise RefundError("Refund amount must be greater than zero")
        if to_minor_units(self.refunded_amount or 0) + to_minor_units(requested) > to_minor_units(self.amount):
            raise RefundError("Refund amount exceeds payment amount")
        return requested

    def apply_refund(self, amount, refund_id: str) -> None:
        requested = self.check_refund(amount)
        refunded_units = to_minor_units(self.refunded_amount or 0) + to_minor_units(requested)
        fully = refunded_units == to_minor_units(self.amount)
        target = PaymentStatus.REFUNDED if fully else PaymentStatus.PARTIALLY_REFUNDED

        now = self._move_to(target)
        self.refunded_amount = from_minor_units(refunded_units)
        self.raise_(
            PaymentRefunded(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                user_id=str(self.user_id),
                refund_id=refund_id,
                amount=requested,
                currency=self.currency,
                refunded_amount=self.refunded_amount,
                fully_refunded=fully,
                refunded_at=now,
            )
        )
