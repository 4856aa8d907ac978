"""Payment refund — command, handler and entry point.

A refund is all-or-nothing against local state: the request is checked
against what remains refundable, and only a successful gateway refund
changes ``refunded_amount`` and the status. A refusal raises RefundError
before anything is stored.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain
from shared.errors import NotFoundError, RefundError

from payments.domain import payments
from payments.gateway import get_gateway
from payments.payment.payment import Payment
from payments.payment.responses import PaymentResponse

logger = structlog.get_logger(__name__)


@payments.command(part_of="Payment")
class RefundPayment:
    """Refund ``amount`` of a payment, or everything not yet refunded when omitted."""

    payment_id = Identifier(required=True)
    amount = Float()
    reason = String(max_length=500)


@payments.command_handler(part_of=Payment)
class RefundPaymentHandler:
    @handle(RefundPayment)
    def refund_payment(self, command):
        repo = current_domain.repository_for(Payment)
        try:
            payment = repo.get(str(command.payment_id))
        except ObjectNotFoundError:
            raise NotFoundError(f"Payment not found: {command.payment_id}") from None

        requested = payment.check_refund(command.amount)
        result = get_gateway().refund(
            payment.gateway_payment_ref,
            requested,
            notes={"reason": command.reason or "", "payment_id": str(payment.id)},
        )
        if not result.success:
            logger.warning(
                "Gateway refused refund",
                payment_id=str(payment.id),
                amount=requested,
                reason=result.failure_reason,
            )
            raise RefundError(f"Refund failed: {result.failure_reason}")

        payment.apply_refund(requested, refund_id=result.gateway_refund_id)
        repo.add(payment)

        logger.info(
            "Payment refunded",
            payment_id=str(payment.id),
            amount=requested,
            refunded_amount=payment.refunded_amount,
            status=payment.status,
            gateway_refund_id=result.gateway_refund_id,
        )
        return str(payment.id)


def refund_payment(payment_id: str, amount: float | None = None, reason: str | None = None) -> PaymentResponse:
    current_domain.process(RefundPayment(payment_id=payment_id, amount=amount, reason=reason), asynchronous=False)
    payment = current_domain.repository_for(Payment).get(payment_id)
    return PaymentResponse.from_payment(payment, get_gateway().key_id)
