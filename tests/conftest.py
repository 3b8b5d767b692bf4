import os
from pathlib import Path

import pytest
import pytest_asyncio

_LAYER_MARKERS = ("domain", "application", "integration")


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Initialize the ordering domain before collection.

    Its domain_context stays pushed for the whole run, so tests and application
    code alike can use `current_domain`. The fake identity provider is used
    unless the environment asks otherwise.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("IDENTITY_PROVIDER", "fake")

    from ordering.domain import ordering

    ordering.init()
    ordering.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Mark each test with the layer its directory belongs to."""
    for item in items:
        parts = Path(item.fspath).parts
        layer = next((name for name in _LAYER_MARKERS if name in parts), None)
        if layer is None:
            continue

        item.add_marker(getattr(pytest.mark, layer))
        if layer == "integration" and not any(m.name == "fast" for m in item.iter_markers()):
            item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from ordering.domain import ordering
    from ordering.utils.db import drop_db, setup_db

    setup_db(ordering)

    yield

    drop_db(ordering)


@pytest_asyncio.fixture(autouse=True)
async def run_around_tests():
    """Reset the order store, event store and live storefront sessions after every test."""
    yield

    from ordering.api.routes import sessions
    from protean import current_domain

    await sessions.clear()

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
