"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and RazorpayGateway
(production) without changing any domain or application code.

Amounts cross this boundary in major units; adapters convert to the
gateway's integer minor units with ``shared.money.to_minor_units``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class IntentResult:
    """Result of creating a gateway-side payment order."""

    success: bool
    gateway_order_ref: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class RefundResult:
    """Result of a refund attempt."""

    success: bool
    gateway_refund_id: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    key_id: str

    @abstractmethod
    def create_intent(
        self,
        amount: float,
        currency: str,
        receipt: str,
        notes: dict[str, str],
    ) -> IntentResult:
        """Create a gateway-side payment order the customer will pay against."""
        ...

    @abstractmethod
    def verify_signature(self, order_ref: str, payment_ref: str, signature: str) -> bool:
        """Check the signature the gateway returned to the customer after payment."""
        ...

    @abstractmethod
    def refund(self, payment_ref: str, amount: float, notes: dict[str, str]) -> RefundResult:
        """Refund part or all of a captured payment."""
        ...
