"""Payment verification — command, handler and entry point.

After paying on the gateway's checkout, the customer's client hands back
the gateway order ref, payment ref and signature. A valid signature
completes the payment; anything else fails it and the caller is told.

The FAILED state has to be stored before the caller hears about it, so the
handler only reports whether the signature held and ``verify_payment()``
raises once the unit of work has committed.

Verifying a payment that has already completed returns it unchanged.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from shared.errors import InvalidTransitionError, NotFoundError, PaymentVerificationError

from payments.domain import payments
from payments.gateway import get_gateway
from payments.payment.payment import Payment, PaymentStatus
from payments.payment.responses import PaymentResponse

logger = structlog.get_logger(__name__)

VERIFICATION_FAILED = "Payment signature verification failed"

_SETTLED = {PaymentStatus.COMPLETED, PaymentStatus.PARTIALLY_REFUNDED, PaymentStatus.REFUNDED}


@payments.command(part_of="Payment")
class VerifyPayment:
    order_id = Identifier(required=True)
    gateway_order_ref = String(required=True, max_length=255)
    gateway_payment_ref = String(required=True, max_length=255)
    signature = String(required=True, max_length=255)


@payments.command_handler(part_of=Payment)
class VerifyPaymentHandler:
    @handle(VerifyPayment)
    def verify_payment(self, command):
        repo = current_domain.repository_for(Payment)
        found = repo._dao.query.filter(order_id=str(command.order_id)).all().items
        if not found:
            raise NotFoundError(f"Payment not found for order: {command.order_id}")
        payment = found[0]

        status = payment.payment_status
        if status in _SETTLED:
            logger.info("Payment already verified", payment_id=str(payment.id), order_id=str(payment.order_id))
            return {"payment_id": str(payment.id), "verified": True}
        if status != PaymentStatus.PROCESSING:
            raise InvalidTransitionError(f"Payment cannot be verified. Current status: {status.value}")

        verified = command.gateway_order_ref == payment.gateway_order_ref and get_gateway().verify_signature(
            command.gateway_order_ref,
            command.gateway_payment_ref,
            command.signature,
        )
        if verified:
            payment.complete(command.gateway_payment_ref, command.signature)
            logger.info(
                "Payment completed",
                payment_id=str(payment.id),
                order_id=str(payment.order_id),
                gateway_payment_ref=payment.gateway_payment_ref,
            )
        else:
            payment.fail(VERIFICATION_FAILED)
            logger.warning(
                "Payment verification failed",
                payment_id=str(payment.id),
                order_id=str(payment.order_id),
                gateway_payment_ref=command.gateway_payment_ref,
            )

        repo.add(payment)
        return {"payment_id": str(payment.id), "verified": verified}


def verify_payment(order_id: str, gateway_order_ref: str, gateway_payment_ref: str, signature: str) -> PaymentResponse:
    outcome = current_domain.process(
        VerifyPayment(
            order_id=order_id,
            gateway_order_ref=gateway_order_ref,
            gateway_payment_ref=gateway_payment_ref,
            signature=signature,
        ),
        asynchronous=False,
    )
    if not outcome["verified"]:
        raise PaymentVerificationError(VERIFICATION_FAILED)

    payment = current_domain.repository_for(Payment).get(outcome["payment_id"])
    return PaymentResponse.from_payment(payment, get_gateway().key_id)
