"""Payment initiation — command, handler and the idempotent entry point.

The order of checks is what makes a repeated initiate safe:

1. a response already recorded for the idempotency key is returned as is
   (``initiate_payment()``, before any command is processed);
2. an existing payment for the order is returned (or rejected if it has
   already completed) without calling the gateway;
3. otherwise a PENDING payment is created, the gateway creates its payment
   order, and the payment is stored PROCESSING or FAILED.

Whatever happens at the gateway, the payment leaves this handler settled
in PROCESSING or FAILED: a gateway that refuses, cannot be reached, answers
with something that is not JSON, or blows up in an unexpected way all
fail the payment and publish PaymentFailed.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain
from shared.errors import DuplicatePaymentError, GatewayError, TransientInfraError

from payments.domain import payments
from payments.gateway import get_gateway
from payments.gateway.port import IntentResult, PaymentGateway
from payments.payment.idempotency import IdempotencyLedger
from payments.payment.payment import Payment, PaymentStatus
from payments.payment.responses import PaymentResponse

logger = structlog.get_logger(__name__)


@payments.command(part_of="Payment")
class InitiatePayment:
    """Initiate a payment for an order."""

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(max_length=3, required=True)
    idempotency_key = String(required=True, max_length=255)
    payment_method = String(max_length=50)


def receipt_for(order_id: str) -> str:
    return f"order_{order_id[:8]}"


def find_existing(order_id: str, idempotency_key: str) -> Payment | None:
    """The payment already made for this order or under this key, if any."""
    dao = current_domain.repository_for(Payment)._dao
    for filters in ({"order_id": order_id}, {"idempotency_key": idempotency_key}):
        found = dao.query.filter(**filters).all().items
        if found:
            return found[0]
    return None


@payments.command_handler(part_of=Payment)
class InitiatePaymentHandler:
    @handle(InitiatePayment)
    def initiate_payment(self, command):
        existing = find_existing(str(command.order_id), command.idempotency_key)
        if existing is not None:
            return self._existing(existing, command)

        gateway = get_gateway()
        payment = Payment.create(
            order_id=command.order_id,
            user_id=command.user_id,
            amount=command.amount,
            currency=command.currency,
            idempotency_key=command.idempotency_key,
            payment_method=command.payment_method,
        )

        result = self._create_intent(gateway, payment, command.idempotency_key)
        if result.success:
            payment.start_processing(result.gateway_order_ref)
            logger.info(
                "Payment initiated",
                payment_id=str(payment.id),
                order_id=str(payment.order_id),
                gateway_order_ref=payment.gateway_order_ref,
            )
        else:
            payment.fail(result.failure_reason or "Payment gateway error")
            logger.warning(
                "Payment initiation failed at gateway",
                payment_id=str(payment.id),
                order_id=str(payment.order_id),
                reason=payment.failure_reason,
            )

        current_domain.repository_for(Payment).add(payment)
        return str(payment.id)

    def _existing(self, existing: Payment, command) -> str:
        if str(existing.order_id) != str(command.order_id):
            raise ValidationError({"idempotency_key": ["Idempotency key already used for another order"]})
        if existing.payment_status == PaymentStatus.COMPLETED:
            raise DuplicatePaymentError(f"Payment already completed for order: {command.order_id}")

        logger.info(
            "Payment already exists for order",
            payment_id=str(existing.id),
            order_id=str(existing.order_id),
            status=existing.status,
        )
        return str(existing.id)

    def _create_intent(self, gateway: PaymentGateway, payment: Payment, idempotency_key: str) -> IntentResult:
        try:
            return gateway.create_intent(
                amount=payment.amount,
                currency=payment.currency,
                receipt=receipt_for(str(payment.order_id)),
                notes={"idempotency_key": idempotency_key, "order_id": str(payment.order_id)},
            )
        except GatewayError as exc:
            return IntentResult(success=False, gateway_status="failed", failure_reason=exc.message)
        except ValueError as exc:
            logger.error("Unreadable gateway response", order_id=str(payment.order_id), error=str(exc))
            return IntentResult(
                success=False,
                gateway_status="failed",
                failure_reason="Gateway returned an unreadable response",
            )
        except Exception:
            logger.exception("Unexpected gateway error", order_id=str(payment.order_id))
            return IntentResult(success=False, gateway_status="failed", failure_reason="Unexpected gateway error")


def initiate_payment(
    order_id: str,
    user_id: str,
    amount: float,
    currency: str,
    idempotency_key: str,
    payment_method: str | None = None,
    ledger: IdempotencyLedger | None = None,
) -> PaymentResponse:
    """Initiate a payment, replaying the recorded response for a known key."""
    ledger = ledger or IdempotencyLedger()

    cached = ledger.lookup(idempotency_key)
    if cached is not None:
        logger.info("Returning recorded payment response", idempotency_key=idempotency_key, payment_id=cached.id)
        return cached

    payment_id = current_domain.process(
        InitiatePayment(
            order_id=order_id,
            user_id=user_id,
            amount=amount,
            currency=currency,
            idempotency_key=idempotency_key,
            payment_method=payment_method,
        ),
        asynchronous=False,
    )

    payment = current_domain.repository_for(Payment).get(payment_id)
    response = PaymentResponse.from_payment(payment, get_gateway().key_id)
    try:
        ledger.record(idempotency_key, response)
    except TransientInfraError:
        # The unique order_id still stops a second gateway call on retry
        logger.error("Idempotency record not stored", idempotency_key=idempotency_key)
    return response
