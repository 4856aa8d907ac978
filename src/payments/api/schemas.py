"""Pydantic request/response schemas for the Payments API.

These are external contracts (anti-corruption layer) — separate from
internal commands. Responses reuse ``PaymentResponse`` so the HTTP body
is exactly what the idempotency ledger replays.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from payments.payment.responses import PaymentResponse


# ---------------------------------------------------------------------------
# Payment Request Schemas
# ---------------------------------------------------------------------------
class InitiatePaymentRequest(BaseModel):
    order_id: str
    amount: Decimal = Field(gt=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    idempotency_key: str | None = None
    payment_method: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_id": "6f1c2a4e-0d7b-4b65-9a55-3f0f0f6f2d11",
                    "amount": "100.00",
                    "currency": "INR",
                    "idempotency_key": "checkout-6f1c2a4e",
                }
            ]
        }
    }


class VerifyPaymentRequest(BaseModel):
    order_id: str
    gateway_order_ref: str
    gateway_payment_ref: str
    signature: str


class RefundRequest(BaseModel):
    amount: Decimal | None = Field(default=None, gt=0)
    reason: str | None = None


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Gateway declined the request"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PaymentPageResponse(BaseModel):
    items: list[PaymentResponse]
    page: int
    size: int
    total: int


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
