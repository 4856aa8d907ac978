"""Fixtures for cross-domain integration tests.

Each context runs with its own in-process broker, so the tests carry
events across context boundaries by hand: read what one domain stored,
hand it to the other domain's handler inside that domain's context. In
production the Engine does this through Redis Streams.
"""

import os

import pytest


@pytest.fixture(scope="session")
def domains(request):
    """Initialize all three domains once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from notifications.domain import notifications
    from ordering.domain import ordering
    from payments.domain import payments

    for domain in (ordering, payments, notifications):
        domain.init()
    return {"ordering": ordering, "payments": payments, "notifications": notifications}


@pytest.fixture(autouse=True)
def reset_domains(domains):
    yield

    from protean import current_domain

    for domain in domains.values():
        with domain.domain_context():
            for _, provider in current_domain.providers.items():
                provider._data_reset()

            for _, broker in current_domain.brokers.items():
                broker._data_reset()

            current_domain.event_store.store._data_reset()


@pytest.fixture()
def fakes():
    from notifications.channel import set_channel
    from notifications.channel.fake_email import FakeEmailAdapter
    from notifications.notification.notification import NotificationChannel
    from ordering.catalogue import set_catalogue
    from ordering.catalogue.fake_adapter import FakeCatalogue
    from payments.gateway import set_gateway
    from payments.gateway.fake_adapter import FakeGateway

    catalogue = FakeCatalogue()
    catalogue.add_product("prod-001", "Mechanical Keyboard", "50.00")
    catalogue.add_product("prod-002", "USB-C Cable", "12.50")
    gateway = FakeGateway()
    email = FakeEmailAdapter()
    set_catalogue(catalogue)
    set_gateway(gateway)
    set_channel(NotificationChannel.EMAIL, email)
    return {"catalogue": catalogue, "gateway": gateway, "email": email}


@pytest.fixture()
def client(domains, fakes):
    from app import app
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        yield client
