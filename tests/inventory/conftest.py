from datetime import UTC, datetime, timedelta

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def inventory_bed():
    from inventory.domain import inventory

    bed = DomainFixture(inventory)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(inventory_bed):
    with inventory_bed.domain_context():
        yield


@pytest.fixture()
def store():
    from shared.event_store import InMemoryEventStore

    return InMemoryEventStore("owner_scope")


@pytest.fixture()
def ledger(store):
    from inventory.item.ledger import InventoryLedger

    return InventoryLedger(store)


class FrozenClock:
    """Time source that only moves when told to."""

    def __init__(self, start=None):
        self.current = start or datetime(2026, 3, 1, 9, 0, tzinfo=UTC)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture()
def frozen_clock():
    return FrozenClock()
