"""Application tests for event store outages."""

from datetime import timedelta

import pytest
from inventory.item.events import StockEntered
from inventory.item.ledger import InventoryLedger
from shared.clock import MonotonicClock
from shared.errors import StoreUnavailable
from shared.event_store import InMemoryEventStore

SCOPE = "company-001"
ADMIN = "admin@bodega.co"


class FlakyStore(InMemoryEventStore):
    """In-memory store whose appends or reads can be switched off."""

    def __init__(self):
        super().__init__("owner_scope")
        self.appends_fail = False
        self.reads_fail = False

    def append(self, event):
        if self.appends_fail:
            raise ConnectionError("event store unreachable")
        return super().append(event)

    def list_by_scope(self, scope, since_id=None):
        if self.reads_fail:
            raise ConnectionError("event store unreachable")
        return super().list_by_scope(scope, since_id)


@pytest.fixture()
def flaky():
    return FlakyStore()


@pytest.fixture()
def flaky_ledger(flaky):
    ledger = InventoryLedger(flaky)
    ledger.create_item(SCOPE, "unit-001", "Sofa", 5, ADMIN, item_id="item-001")
    return ledger


class TestAppendFailure:
    def test_raises_store_unavailable(self, flaky, flaky_ledger):
        flaky.appends_fail = True
        with pytest.raises(StoreUnavailable) as exc:
            flaky_ledger.record_entry(SCOPE, "item-001", 3, ADMIN)
        assert exc.value.operation == "append"
        assert exc.value.scope == SCOPE

    def test_table_is_unchanged(self, flaky, flaky_ledger):
        flaky.appends_fail = True
        with pytest.raises(StoreUnavailable):
            flaky_ledger.record_exit(SCOPE, "item-001", 3, ADMIN)
        assert flaky_ledger.get_item(SCOPE, "item-001").quantity == 5

    def test_nothing_is_logged(self, flaky, flaky_ledger):
        flaky.appends_fail = True
        with pytest.raises(StoreUnavailable):
            flaky_ledger.delete_item(SCOPE, "item-001", ADMIN)
        flaky.appends_fail = False
        assert len(flaky.list_by_scope(SCOPE)) == 1

    def test_recovers_when_store_returns(self, flaky, flaky_ledger):
        flaky.appends_fail = True
        with pytest.raises(StoreUnavailable):
            flaky_ledger.record_entry(SCOPE, "item-001", 3, ADMIN)
        flaky.appends_fail = False
        assert flaky_ledger.record_entry(SCOPE, "item-001", 3, ADMIN).quantity == 8


class TestReadFailure:
    def test_first_read_of_scope(self, flaky):
        flaky.reads_fail = True
        ledger = InventoryLedger(flaky)
        with pytest.raises(StoreUnavailable) as exc:
            ledger.current_items(SCOPE)
        assert exc.value.operation == "read"

    def test_history(self, flaky, flaky_ledger):
        flaky.reads_fail = True
        with pytest.raises(StoreUnavailable):
            flaky_ledger.history(SCOPE)

    def test_loaded_table_is_still_served(self, flaky, flaky_ledger):
        flaky.reads_fail = True
        assert flaky_ledger.get_item(SCOPE, "item-001").quantity == 5


class TestRefoldFailure:
    """A late event whose refold cannot read the log is still committed."""

    @pytest.fixture()
    def clocked(self, flaky, frozen_clock):
        ledger = InventoryLedger(flaky, clock=MonotonicClock(frozen_clock))
        ledger.create_item(SCOPE, "unit-001", "Cajas", 2, ADMIN, item_id="boxes")
        frozen_clock.advance(minutes=10)
        ledger.record_exit(SCOPE, "boxes", 5, ADMIN)
        return ledger

    @pytest.fixture()
    def late_entry(self, frozen_clock):
        return StockEntered(
            event_id="late-entry",
            item_id="boxes",
            owner_scope=SCOPE,
            storage_unit_id="unit-001",
            delta=10,
            performed_by=ADMIN,
            timestamp=frozen_clock.current - timedelta(minutes=5),
        )

    def test_returns_committed_row(self, flaky, clocked, late_entry):
        flaky.reads_fail = True
        assert clocked.apply(late_entry).quantity == 7

    def test_projection_is_marked_stale(self, flaky, clocked, late_entry):
        flaky.reads_fail = True
        clocked.apply(late_entry)
        assert not clocked._projections[SCOPE].loaded
        with pytest.raises(StoreUnavailable):
            clocked.get_item(SCOPE, "boxes")

    def test_next_read_refolds_once_store_returns(self, flaky, clocked, late_entry):
        flaky.reads_fail = True
        clocked.apply(late_entry)
        flaky.reads_fail = False
        assert [str(e.event_id) for e in flaky.list_by_scope(SCOPE)].count("late-entry") == 1
        assert clocked.get_item(SCOPE, "boxes").quantity == 7
