"""FastAPI routes for the Payments domain.

Routes are plain ``def``: the gateway SDK and the database block, so
FastAPI runs them in its threadpool.
"""

from fastapi import APIRouter, Header, HTTPException, Query
from shared.config import get_settings

from payments.api.schemas import (
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    InitiatePaymentRequest,
    PaymentPageResponse,
    RefundRequest,
    VerifyPaymentRequest,
)
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.payment import queries
from payments.payment.initiation import initiate_payment as initiate
from payments.payment.ordering_events import idempotency_key_for
from payments.payment.refund import refund_payment as refund
from payments.payment.responses import PaymentResponse
from payments.payment.verification import verify_payment as verify

payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("", status_code=201, response_model=PaymentResponse)
def initiate_payment(
    body: InitiatePaymentRequest,
    x_user_id: str = Header(),
    idempotency_key: str | None = Header(default=None),
) -> PaymentResponse:
    """Initiate a payment for an order.

    The idempotency key comes from the body or the ``Idempotency-Key``
    header; without either it defaults to the key used for order events,
    so a client call and the event-driven initiation share one payment.
    """
    return initiate(
        order_id=body.order_id,
        user_id=x_user_id,
        amount=float(body.amount),
        currency=body.currency or get_settings().default_currency,
        idempotency_key=body.idempotency_key or idempotency_key or idempotency_key_for(body.order_id),
        payment_method=body.payment_method,
    )


@payment_router.post("/verify", response_model=PaymentResponse)
def verify_payment(body: VerifyPaymentRequest) -> PaymentResponse:
    """Verify the gateway signature returned after checkout."""
    return verify(
        order_id=body.order_id,
        gateway_order_ref=body.gateway_order_ref,
        gateway_payment_ref=body.gateway_payment_ref,
        signature=body.signature,
    )


@payment_router.get("", response_model=PaymentPageResponse)
def list_my_payments(
    x_user_id: str = Header(),
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
) -> PaymentPageResponse:
    items, total = queries.list_payments_for_user(x_user_id, page=page, size=size)
    return PaymentPageResponse(items=items, page=page, size=size, total=total)


@payment_router.get("/order/{order_id}", response_model=PaymentResponse)
def get_payment_by_order(order_id: str) -> PaymentResponse:
    return queries.get_payment_by_order(order_id)


@payment_router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: str) -> PaymentResponse:
    return queries.get_payment(payment_id)


@payment_router.post("/{payment_id}/refund", response_model=PaymentResponse)
def refund_payment(payment_id: str, body: RefundRequest | None = None) -> PaymentResponse:
    """Refund part of a payment, or all of what remains when no amount is given."""
    amount = float(body.amount) if body and body.amount is not None else None
    return refund(payment_id, amount=amount, reason=body.reason if body else None)


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only).

    It allows toggling success/failure behavior for manual API testing.
    """
    if get_settings().is_production:
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )
