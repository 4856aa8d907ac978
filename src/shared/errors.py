"""Error taxonomy shared by all contexts.

Every error carries an ``ErrorKind`` so callers (HTTP handlers, event
consumers) branch on the kind instead of the message. Only
``TRANSIENT_INFRA`` is retryable: a consumer that sees it must let the
message be redelivered.
"""

from enum import Enum


class ErrorKind(Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    INVALID_TRANSITION = "invalid_transition"
    CART_EMPTY = "cart_empty"
    DUPLICATE_PAYMENT = "duplicate_payment"
    PAYMENT_VERIFICATION = "payment_verification"
    REFUND = "refund"
    GATEWAY = "gateway"
    TRANSIENT_INFRA = "transient_infra"


class ShopStreamError(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def retryable(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT_INFRA


class NotFoundError(ShopStreamError):
    kind = ErrorKind.NOT_FOUND


class ValidationError(ShopStreamError):
    """Malformed input. ``errors`` maps field names to lists of messages."""

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: dict[str, list[str]], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.errors = errors


class InvalidTransitionError(ShopStreamError):
    kind = ErrorKind.INVALID_TRANSITION


class CartEmptyError(ShopStreamError):
    kind = ErrorKind.CART_EMPTY

    def __init__(self, message: str = "Cart is empty") -> None:
        super().__init__(message)


class DuplicatePaymentError(ShopStreamError):
    kind = ErrorKind.DUPLICATE_PAYMENT


class PaymentVerificationError(ShopStreamError):
    kind = ErrorKind.PAYMENT_VERIFICATION


class RefundError(ShopStreamError):
    kind = ErrorKind.REFUND


class GatewayError(ShopStreamError):
    """A downstream provider (payment gateway, catalogue) failed or refused."""

    kind = ErrorKind.GATEWAY


class TransientInfraError(ShopStreamError):
    """Persistence, cache or broker unavailable; the operation may be retried."""

    kind = ErrorKind.TRANSIENT_INFRA
