import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture()
def catalogue():
    from ordering.catalogue import set_catalogue
    from ordering.catalogue.fake_adapter import FakeCatalogue

    fake = FakeCatalogue()
    fake.add_product("prod-001", "Mechanical Keyboard", "50.00", images=("https://img.example/kb.png",))
    fake.add_product("prod-002", "USB-C Cable", "12.50")
    set_catalogue(fake)
    return fake
