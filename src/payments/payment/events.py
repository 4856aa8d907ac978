"""Domain events for the Payment aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from payments.domain import payments


@payments.event(part_of="Payment")
class PaymentCompleted:
    """The gateway confirmed the payment and its signature was verified."""

    __version__ = "v1"

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(max_length=3, required=True)
    completed_at = DateTime(required=True)


@payments.event(part_of="Payment")
class PaymentFailed:
    """Payment initiation or verification failed."""

    __version__ = "v1"

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    amount = Float()
    currency = String(max_length=3)
    reason = String(required=True, max_length=500)
    failed_at = DateTime(required=True)


@payments.event(part_of="Payment")
class PaymentRefunded:
    """Part or all of a completed payment was refunded at the gateway."""

    __version__ = "v1"

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    refund_id = String(required=True, max_length=255)
    amount = Float(required=True)
    currency = String(max_length=3)
    refunded_amount = Float(required=True)
    fully_refunded = Boolean(default=False)
    refunded_at = DateTime(required=True)
