"""Integration tests for Payment API endpoints via TestClient."""

from decimal import Decimal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from payments.api.routes import payment_router
from shared.api.errors import register_error_handlers


@pytest.fixture()
def client(gateway):
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(payment_router)
    return TestClient(app)


def _initiate(client, order_id="order-001", key="K1", amount="100.00"):
    response = client.post(
        "/payments",
        json={"order_id": order_id, "amount": amount, "currency": "INR"},
        headers={"X-User-Id": "user-001", "Idempotency-Key": key},
    )
    assert response.status_code == 201
    return response.json()


def _verify(client, gateway, payment):
    ref = payment["gateway_order_ref"]
    return client.post(
        "/payments/verify",
        json={
            "order_id": payment["order_id"],
            "gateway_order_ref": ref,
            "gateway_payment_ref": "pay_1",
            "signature": gateway.sign(ref, "pay_1"),
        },
    )


class TestInitiateEndpoint:
    def test_initiate(self, client):
        data = _initiate(client)
        assert data["status"] == "PROCESSING"
        assert data["gateway_key_id"] == "rzp_test_key"
        assert data["gateway_order_ref"]

    def test_same_key_is_idempotent(self, client, gateway):
        first = _initiate(client)
        second = _initiate(client)
        assert second["id"] == first["id"]
        assert len(gateway.calls_to("create_intent")) == 1

    def test_body_key_wins_over_header(self, client, gateway):
        response = client.post(
            "/payments",
            json={"order_id": "order-001", "amount": "10.00", "idempotency_key": "BODY"},
            headers={"X-User-Id": "user-001", "Idempotency-Key": "HEADER"},
        )
        assert response.status_code == 201
        assert gateway.calls_to("create_intent")[0]["notes"]["idempotency_key"] == "BODY"

    def test_non_positive_amount_is_400(self, client):
        response = client.post(
            "/payments",
            json={"order_id": "order-001", "amount": "0"},
            headers={"X-User-Id": "user-001"},
        )
        assert response.status_code == 400


class TestVerifyEndpoint:
    def test_verify(self, client, gateway):
        payment = _initiate(client)
        response = _verify(client, gateway, payment)
        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"

    def test_bad_signature_is_400(self, client):
        payment = _initiate(client)
        response = client.post(
            "/payments/verify",
            json={
                "order_id": "order-001",
                "gateway_order_ref": payment["gateway_order_ref"],
                "gateway_payment_ref": "pay_1",
                "signature": "forged",
            },
        )
        assert response.status_code == 400
        assert response.json()["error"] == "payment_verification"

    def test_initiate_after_completion_is_409(self, client, gateway):
        payment = _initiate(client, key="K1")
        _verify(client, gateway, payment)
        response = client.post(
            "/payments",
            json={"order_id": "order-001", "amount": "100.00"},
            headers={"X-User-Id": "user-001", "Idempotency-Key": "K2"},
        )
        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_payment"


class TestRefundEndpoint:
    def test_partial_refunds_and_over_refund(self, client, gateway):
        payment = _initiate(client)
        _verify(client, gateway, payment)

        first = client.post(f"/payments/{payment['id']}/refund", json={"amount": "40.00"})
        assert first.json()["status"] == "PARTIALLY_REFUNDED"

        second = client.post(f"/payments/{payment['id']}/refund", json={"amount": "60.00"})
        assert second.json()["status"] == "REFUNDED"
        assert Decimal(second.json()["refunded_amount"]) == Decimal("100.00")

        third = client.post(f"/payments/{payment['id']}/refund", json={"amount": "1.00"})
        assert third.status_code == 422
        assert third.json()["error"] == "refund"

    def test_refund_without_body_refunds_all(self, client, gateway):
        payment = _initiate(client)
        _verify(client, gateway, payment)
        response = client.post(f"/payments/{payment['id']}/refund")
        assert response.json()["status"] == "REFUNDED"


class TestQueryEndpoints:
    def test_get_by_id_and_order(self, client):
        payment = _initiate(client)
        assert client.get(f"/payments/{payment['id']}").json()["order_id"] == "order-001"
        assert client.get("/payments/order/order-001").json()["id"] == payment["id"]

    def test_missing_payment_is_404(self, client):
        response = client.get("/payments/missing")
        assert response.status_code == 404
        assert response.json()["message"] == "Payment not found: missing"

    def test_list_my_payments(self, client):
        _initiate(client, order_id="order-001", key="K1")
        _initiate(client, order_id="order-002", key="K2")
        data = client.get("/payments", headers={"X-User-Id": "user-001"}).json()
        assert data["total"] == 2


class TestGatewayConfigureEndpoint:
    def test_configure_fake_gateway(self, client, gateway):
        response = client.post(
            "/payments/gateway/configure",
            json={"should_succeed": False, "failure_reason": "Declined"},
        )
        assert response.status_code == 200
        assert response.json()["gateway"] == "FakeGateway"
        assert gateway.should_succeed is False

        assert _initiate(client)["status"] == "FAILED"
