"""Shared BDD fixtures and step definitions for the Inventory domain."""

import pytest
from inventory.item.ledger import InventoryLedger
from protean.exceptions import ProteanException
from pytest_bdd import given, parsers, then
from shared.event_store import InMemoryEventStore

SCOPE = "company-001"
ADMIN = "admin@bodega.co"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def store():
    return InMemoryEventStore("owner_scope")


@pytest.fixture()
def ledger(store):
    return InventoryLedger(store)


@pytest.fixture()
def outcome():
    """Holds the error raised by the last When step, if any."""
    return {"error": None}


@pytest.fixture()
def attempt(outcome):
    """Run a ledger call, recording a domain error instead of raising it."""

    def run(fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except ProteanException as exc:
            outcome["error"] = exc
            return None

    return run


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('an item "{item_id}" with {quantity:d} units'))
def _(ledger, item_id, quantity):
    ledger.create_item(SCOPE, "unit-001", item_id.title(), quantity, ADMIN, item_id=item_id)


@given(parsers.parse('an item "{item_id}" in category "{category}"'))
def _(ledger, item_id, category):
    ledger.create_item(SCOPE, "unit-001", item_id.title(), 1, ADMIN, category=category, item_id=item_id)


@given(parsers.parse('an uncategorized item "{item_id}"'))
def _(ledger, item_id):
    ledger.create_item(SCOPE, "unit-001", item_id.title(), 1, ADMIN, item_id=item_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('item "{item_id}" has {quantity:d} units'))
def _(ledger, item_id, quantity):
    assert ledger.get_item(SCOPE, item_id).quantity == quantity


@then(parsers.parse('item "{item_id}" is not in the inventory'))
def _(ledger, item_id):
    assert item_id not in {str(item.id) for item in ledger.current_items(SCOPE)}


@then(parsers.parse('the movement is rejected with "{code}"'))
def _(outcome, code):
    assert outcome["error"] is not None
    assert outcome["error"].code == code


@then(parsers.parse("the ledger holds {count:d} events"))
def _(store, count):
    assert len(store.list_by_scope(SCOPE)) == count
