"""
Pytest fixtures for kegtrack backend tests.

Every test gets a fresh DomainStore driven by a controllable clock, and an
app/client wired to that same store.
"""

from datetime import datetime, timedelta

import pytest

from kegtrack import create_app
from kegtrack.services.store import DomainStore


class FakeClock:
    """Stands in for utcnow; tests move time forward explicitly."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture(scope='function')
def clock():
    return FakeClock(datetime(2024, 3, 4, 12, 0, 0))


@pytest.fixture(scope='function')
def store(clock):
    return DomainStore(clock=clock)


@pytest.fixture(scope='function')
def app(store):
    """Create application for testing."""
    app = create_app(
        config_overrides={
            'TESTING': True,
            'SEED_DEMO_DATA': False,
        },
        store=store,
    )
    yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def make_keg(store):
    """Create a keg directly in the store: make_keg("K-12345678", status="full", cider_type="Apple")."""
    def _make(keg_id="K-12345678", **fields):
        data = {"id": keg_id, "size": "half_bbl"}
        data.update(fields)
        return store.create_keg(data)
    return _make


@pytest.fixture(scope='function')
def customer(store):
    return store.create_customer({"id": "customer-1", "name": "The Tipsy Tavern"})
