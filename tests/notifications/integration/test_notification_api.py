"""Integration tests for Notification API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from notifications.api.routes import notification_router
from shared.api.errors import register_error_handlers


@pytest.fixture()
def client(email):
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(notification_router)
    return TestClient(app)


def _send(client, **overrides):
    body = {
        "user_id": "user-001",
        "type": "WELCOME",
        "recipient": "asha@example.com",
        "template_data": {"customer_name": "Asha"},
    }
    body.update(overrides)
    return client.post("/notifications", json=body)


class TestSendEndpoint:
    def test_send_email(self, client, email):
        response = _send(client)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "SENT"
        assert data["subject"] == "Welcome to ShopStream!"
        assert data["sent_at"] is not None
        assert len(email.sent_emails) == 1

    def test_sms_stays_pending(self, client, email):
        data = _send(client, channel="SMS").json()
        assert data["status"] == "PENDING"
        assert email.sent_emails == []

    def test_failed_delivery_is_still_created(self, client, email):
        email.configure(should_succeed=False, failure_reason="Mailbox full")
        data = _send(client).json()
        assert data["status"] == "RETRYING"
        assert data["retry_count"] == 1
        assert data["error_message"] == "Mailbox full"

    def test_unknown_type_is_400(self, client):
        response = _send(client, type="BIRTHDAY")
        assert response.status_code == 400
        assert "type" in response.json()["errors"]

    def test_bad_template_data_is_400(self, client):
        response = _send(client, type="ORDER_CONFIRMATION", template_data={"item_count": "many"})
        assert response.status_code == 400
        assert "template_data.item_count" in response.json()["errors"]


class TestQueryEndpoints:
    def test_get(self, client):
        created = _send(client).json()
        response = client.get(f"/notifications/{created['id']}")
        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_get_missing(self, client):
        response = client.get("/notifications/missing")
        assert response.status_code == 404
        assert response.json()["message"] == "Notification not found: missing"

    def test_list_for_user_pages(self, client):
        for _ in range(3):
            _send(client)
        _send(client, user_id="user-002")

        data = client.get("/notifications/user/user-001", params={"size": 2}).json()
        assert data["total"] == 3
        assert len(data["items"]) == 2

    def test_filter_by_type(self, client):
        _send(client)
        _send(client, type="PROMOTIONAL", template_data={"message": "Sale!"})

        data = client.get("/notifications/user/user-001", params={"type": "PROMOTIONAL"}).json()
        assert data["total"] == 1
        assert data["items"][0]["type"] == "PROMOTIONAL"
