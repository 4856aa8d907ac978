"""Configurable fake payment gateway for development and testing.

This adapter simulates a real payment gateway without any external calls.
It can be configured at runtime to succeed or fail, making it useful for:
- Manual API testing via /payments/gateway/configure
- Automated tests with predictable outcomes
- Development without real gateway credentials

Signatures follow Razorpay's checkout scheme, HMAC-SHA256 of
``"<order_ref>|<payment_ref>"`` keyed by the secret; ``sign()`` plays the
part of the checkout page handing a signature to the customer.
"""

import hashlib
import hmac
from uuid import uuid4

from shared.money import to_minor_units

from payments.gateway.port import IntentResult, PaymentGateway, RefundResult


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, key_id: str = "rzp_test_key", key_secret: str = "rzp_test_secret") -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway declined the request"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway declined the request") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

    def sign(self, order_ref: str, payment_ref: str) -> str:
        message = f"{order_ref}|{payment_ref}".encode()
        return hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()

    def create_intent(
        self,
        amount: float,
        currency: str,
        receipt: str,
        notes: dict[str, str],
    ) -> IntentResult:
        self.calls.append(
            {
                "method": "create_intent",
                "amount": to_minor_units(amount),
                "currency": currency,
                "receipt": receipt,
                "notes": dict(notes),
            }
        )

        if self.should_succeed:
            return IntentResult(
                success=True,
                gateway_order_ref=f"order_{uuid4().hex[:14]}",
                gateway_status="created",
            )
        return IntentResult(
            success=False,
            gateway_status="failed",
            failure_reason=self.failure_reason,
        )

    def verify_signature(self, order_ref: str, payment_ref: str, signature: str) -> bool:
        self.calls.append({"method": "verify_signature", "order_ref": order_ref, "payment_ref": payment_ref})
        return hmac.compare_digest(self.sign(order_ref, payment_ref), signature or "")

    def refund(self, payment_ref: str, amount: float, notes: dict[str, str]) -> RefundResult:
        self.calls.append(
            {
                "method": "refund",
                "payment_ref": payment_ref,
                "amount": to_minor_units(amount),
                "notes": dict(notes),
            }
        )

        if self.should_succeed:
            return RefundResult(
                success=True,
                gateway_refund_id=f"rfnd_{uuid4().hex[:14]}",
                gateway_status="processed",
            )
        return RefundResult(
            success=False,
            gateway_status="failed",
            failure_reason=self.failure_reason,
        )
