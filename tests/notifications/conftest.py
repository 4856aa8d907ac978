import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def notifications_bed():
    from notifications.domain import notifications

    bed = DomainFixture(notifications)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(notifications_bed):
    with notifications_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture()
def email():
    from notifications.channel import set_channel
    from notifications.channel.fake_email import FakeEmailAdapter
    from notifications.notification.notification import NotificationChannel

    fake = FakeEmailAdapter()
    set_channel(NotificationChannel.EMAIL, fake)
    return fake


@pytest.fixture()
def directory():
    from notifications.recipients import set_directory
    from notifications.recipients.fake_directory import FakeRecipientDirectory

    fake = FakeRecipientDirectory()
    set_directory(fake)
    return fake
