"""Tests for the HTTP error mapping of domain errors."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.exceptions import ObjectNotFoundError
from protean.exceptions import ValidationError as DomainValidationError
from pydantic import BaseModel, Field
from shared.api.errors import STATUS_BY_KIND, register_error_handlers
from shared.errors import (
    CartEmptyError,
    DuplicatePaymentError,
    ErrorKind,
    GatewayError,
    InvalidTransitionError,
    NotFoundError,
    PaymentVerificationError,
    RefundError,
    TransientInfraError,
    ValidationError,
)


class _Body(BaseModel):
    quantity: int = Field(gt=0)


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)

    errors = {
        "not-found": NotFoundError("Order not found: o-1"),
        "validation": ValidationError({"quantity": ["Quantity must be positive"]}),
        "transition": InvalidTransitionError("Order cannot be cancelled. Current status: SHIPPED"),
        "cart-empty": CartEmptyError(),
        "duplicate": DuplicatePaymentError("Payment already completed for order: o-1"),
        "verification": PaymentVerificationError("Payment signature verification failed"),
        "refund": RefundError("Refund amount exceeds payment amount"),
        "gateway": GatewayError("Catalogue unavailable"),
        "infra": TransientInfraError("Database unavailable"),
        "entity-validation": DomainValidationError({"items": ["Order must have at least one item"]}),
        "object-missing": ObjectNotFoundError("Order with id o-1 does not exist"),
    }

    @app.get("/raise/{name}")
    async def raise_error(name: str):
        raise errors[name]

    @app.post("/body")
    async def body(payload: _Body):
        return payload

    return TestClient(app)


class TestDomainErrors:
    @pytest.mark.parametrize(
        "name, status, kind",
        [
            ("not-found", 404, "not_found"),
            ("validation", 400, "validation"),
            ("transition", 409, "invalid_transition"),
            ("cart-empty", 400, "cart_empty"),
            ("duplicate", 409, "duplicate_payment"),
            ("verification", 400, "payment_verification"),
            ("refund", 422, "refund"),
            ("gateway", 502, "gateway"),
            ("infra", 503, "transient_infra"),
        ],
    )
    def test_status_and_kind(self, client, name, status, kind):
        response = client.get(f"/raise/{name}")
        assert response.status_code == status
        body = response.json()
        assert body["status"] == status
        assert body["error"] == kind
        assert body["message"]
        assert "timestamp" in body

    def test_validation_error_itemizes_fields(self, client):
        body = client.get("/raise/validation").json()
        assert body["errors"] == {"quantity": ["Quantity must be positive"]}

    def test_every_kind_has_a_status(self):
        assert set(STATUS_BY_KIND) == set(ErrorKind)


class TestRequestValidation:
    def test_schema_errors_are_400_with_field_messages(self, client):
        response = client.post("/body", json={"quantity": 0})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation"
        assert "quantity" in body["errors"]

    def test_missing_field(self, client):
        response = client.post("/body", json={})
        assert response.status_code == 400
        assert "quantity" in response.json()["errors"]


class TestAggregateErrors:
    def test_aggregate_validation_is_400_with_field_messages(self, client):
        response = client.get("/raise/entity-validation")
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation"
        assert body["errors"] == {"items": ["Order must have at least one item"]}

    def test_missing_aggregate_is_404(self, client):
        response = client.get("/raise/object-missing")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
