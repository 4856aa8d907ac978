"""Razorpay payment gateway adapter.

Built on the official ``razorpay`` SDK: orders are created through
``client.order``, refunds through ``client.payment`` and checkout
signatures are checked with ``client.utility``. Everything the SDK can
throw (API errors, transport errors, bodies that are not JSON) comes back
as an unsuccessful result; callers decide whether that is a business
failure.
"""

import razorpay
import structlog
from razorpay.errors import BadRequestError, GatewayError, ServerError, SignatureVerificationError
from shared.money import to_minor_units

from payments.gateway.port import IntentResult, PaymentGateway, RefundResult

logger = structlog.get_logger(__name__)

# requests' transport errors subclass OSError; non-JSON bodies raise ValueError
_SDK_ERRORS = (BadRequestError, GatewayError, ServerError, OSError, ValueError)


class RazorpayGateway(PaymentGateway):
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        timeout: float = 10.0,
        client: razorpay.Client | None = None,
    ) -> None:
        self.key_id = key_id
        self.timeout = timeout
        self.client = client or razorpay.Client(auth=(key_id, key_secret))
        self.client.set_app_details({"title": "shopstream-saga", "version": "0.1.0"})

    def create_intent(
        self,
        amount: float,
        currency: str,
        receipt: str,
        notes: dict[str, str],
    ) -> IntentResult:
        try:
            data = self.client.order.create(
                data={
                    "amount": to_minor_units(amount),
                    "currency": currency,
                    "receipt": receipt,
                    "notes": notes,
                },
                timeout=self.timeout,
            )
        except _SDK_ERRORS as exc:
            logger.error("Gateway order creation failed", receipt=receipt, error=str(exc), error_type=type(exc).__name__)
            return IntentResult(success=False, gateway_status="failed", failure_reason=_describe(exc))

        if not isinstance(data, dict) or "id" not in data:
            logger.error("Gateway order response without an id", receipt=receipt)
            return IntentResult(success=False, gateway_status="failed", failure_reason="Malformed gateway response")
        return IntentResult(success=True, gateway_order_ref=data["id"], gateway_status=data.get("status"))

    def verify_signature(self, order_ref: str, payment_ref: str, signature: str) -> bool:
        try:
            self.client.utility.verify_payment_signature(
                {
                    "razorpay_order_id": order_ref,
                    "razorpay_payment_id": payment_ref,
                    "razorpay_signature": signature or "",
                }
            )
        except SignatureVerificationError:
            return False
        return True

    def refund(self, payment_ref: str, amount: float, notes: dict[str, str]) -> RefundResult:
        try:
            data = self.client.payment.refund(
                payment_ref,
                {"amount": to_minor_units(amount), "notes": notes},
                timeout=self.timeout,
            )
        except _SDK_ERRORS as exc:
            logger.error("Gateway refund failed", payment_ref=payment_ref, error=str(exc), error_type=type(exc).__name__)
            return RefundResult(success=False, gateway_status="failed", failure_reason=_describe(exc))

        if not isinstance(data, dict) or "id" not in data:
            logger.error("Gateway refund response without an id", payment_ref=payment_ref)
            return RefundResult(success=False, gateway_status="failed", failure_reason="Malformed gateway response")
        return RefundResult(success=True, gateway_refund_id=data["id"], gateway_status=data.get("status"))


def _describe(exc: Exception) -> str:
    if isinstance(exc, OSError):
        return f"Gateway unreachable: {exc}"
    if isinstance(exc, ValueError):
        return "Gateway returned an unreadable response"
    return str(exc) or type(exc).__name__
