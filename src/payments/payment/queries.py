"""Read-only payment queries."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from shared.errors import NotFoundError

from payments.gateway import get_gateway
from payments.payment.payment import Payment
from payments.payment.responses import PaymentResponse


def get_payment(payment_id: str) -> PaymentResponse:
    try:
        payment = current_domain.repository_for(Payment).get(payment_id)
    except ObjectNotFoundError:
        raise NotFoundError(f"Payment not found: {payment_id}") from None
    return PaymentResponse.from_payment(payment, get_gateway().key_id)


def get_payment_by_order(order_id: str) -> PaymentResponse:
    found = current_domain.repository_for(Payment)._dao.query.filter(order_id=order_id).all().items
    if not found:
        raise NotFoundError(f"Payment not found for order: {order_id}")
    return PaymentResponse.from_payment(found[0], get_gateway().key_id)


def list_payments_for_user(user_id: str, page: int = 0, size: int = 10) -> tuple[list[PaymentResponse], int]:
    """Return one page of the user's payments, newest first, and the total count."""
    key_id = get_gateway().key_id
    result = (
        current_domain.repository_for(Payment)
        ._dao.query.filter(user_id=user_id)
        .order_by("-created_at")
        .offset(page * size)
        .limit(size)
        .all()
    )
    return [PaymentResponse.from_payment(payment, key_id) for payment in result.items], result.total
