"""Tests for the Razorpay adapter with the SDK client mocked out."""

import hashlib
import hmac
import json
from unittest.mock import MagicMock

import pytest
from payments.gateway.razorpay_adapter import RazorpayGateway
from razorpay.errors import BadRequestError, ServerError


@pytest.fixture()
def client():
    return MagicMock()


@pytest.fixture()
def gateway(client):
    return RazorpayGateway(key_id="rzp_key", key_secret="rzp_secret", timeout=5.0, client=client)


class TestCreateIntent:
    def test_success(self, gateway, client):
        client.order.create.return_value = {"id": "order_abc", "status": "created"}

        result = gateway.create_intent(100.0, "INR", "order_12345678", {"k": "v"})

        assert result.success
        assert result.gateway_order_ref == "order_abc"
        assert result.gateway_status == "created"
        client.order.create.assert_called_once_with(
            data={"amount": 10000, "currency": "INR", "receipt": "order_12345678", "notes": {"k": "v"}},
            timeout=5.0,
        )

    def test_amount_sent_in_minor_units_without_float_noise(self, gateway, client):
        client.order.create.return_value = {"id": "order_abc"}
        gateway.create_intent(0.1 + 0.2, "INR", "r", {})
        assert client.order.create.call_args.kwargs["data"]["amount"] == 30

    def test_bad_request(self, gateway, client):
        client.order.create.side_effect = BadRequestError("Amount too small")

        result = gateway.create_intent(0.5, "INR", "r", {})
        assert not result.success
        assert result.failure_reason == "Amount too small"

    def test_server_error(self, gateway, client):
        client.order.create.side_effect = ServerError("The server encountered an error")

        result = gateway.create_intent(1.0, "INR", "r", {})
        assert not result.success
        assert result.failure_reason == "The server encountered an error"

    def test_transport_error(self, gateway, client):
        client.order.create.side_effect = ConnectionError("timed out")

        result = gateway.create_intent(1.0, "INR", "r", {})
        assert not result.success
        assert result.failure_reason == "Gateway unreachable: timed out"

    def test_html_error_page_is_a_failed_result(self, gateway, client):
        # A proxy answering 502 with an HTML page makes the SDK's JSON decode fail
        client.order.create.side_effect = json.JSONDecodeError("Expecting value", "<html>Bad Gateway</html>", 0)

        result = gateway.create_intent(1.0, "INR", "r", {})
        assert not result.success
        assert result.failure_reason == "Gateway returned an unreadable response"

    def test_response_without_id(self, gateway, client):
        client.order.create.return_value = {"status": "created"}

        result = gateway.create_intent(1.0, "INR", "r", {})
        assert not result.success
        assert result.failure_reason == "Malformed gateway response"


class TestRefund:
    def test_success(self, gateway, client):
        client.payment.refund.return_value = {"id": "rfnd_1", "status": "processed"}

        result = gateway.refund("pay_1", 40.0, {"reason": "Damaged"})

        assert result.success
        assert result.gateway_refund_id == "rfnd_1"
        client.payment.refund.assert_called_once_with(
            "pay_1",
            {"amount": 4000, "notes": {"reason": "Damaged"}},
            timeout=5.0,
        )

    def test_error(self, gateway, client):
        client.payment.refund.side_effect = BadRequestError("The refund amount exceeds the payment amount")

        result = gateway.refund("pay_1", 40.0, {})
        assert not result.success
        assert result.failure_reason == "The refund amount exceeds the payment amount"

    def test_unreadable_body(self, gateway, client):
        client.payment.refund.side_effect = ValueError("Expecting value")

        result = gateway.refund("pay_1", 40.0, {})
        assert not result.success
        assert result.failure_reason == "Gateway returned an unreadable response"


class TestVerify:
    def test_checks_signature_with_key_secret(self):
        gateway = RazorpayGateway(key_id="rzp_key", key_secret="rzp_secret")
        signature = hmac.new(b"rzp_secret", b"order_1|pay_1", hashlib.sha256).hexdigest()

        assert gateway.verify_signature("order_1", "pay_1", signature)
        assert not gateway.verify_signature("order_1", "pay_1", "bad")
        assert not gateway.verify_signature("order_1", "pay_2", signature)
