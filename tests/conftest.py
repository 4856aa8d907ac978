import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Pins the environment so Protean picks the in-process overlay of each
    domain.toml (memory database, inline broker, synchronous handlers) and
    the shared settings build fakes and an in-memory key-value store.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["KV_BACKEND"] = "memory"
    for name in ("GATEWAY_ADAPTER", "CATALOGUE_ADAPTER", "EMAIL_ADAPTER", "USER_DIRECTORY_ADAPTER", "REDIS_URL"):
        os.environ.pop(name, None)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Give every test fresh stores, settings and collaborators."""
    from notifications.channel import reset_channels
    from notifications.recipients import reset_directory
    from ordering.catalogue import reset_catalogue
    from payments.gateway import reset_gateway
    from shared.config import reset_settings
    from shared.kv import reset_store
    from shared.logging import clear_context

    reset_settings()

    yield

    reset_store()
    reset_catalogue()
    reset_gateway()
    reset_channels()
    reset_directory()
    reset_settings()
    clear_context()
