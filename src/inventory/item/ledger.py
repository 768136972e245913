"""The inventory ledger validates movements, appends them and serves the current table.

Write path (per item, serialized by a keyed lock):

    stamp -> validate against current row -> append to event store -> update projection

The event store append is the commit point. The in-memory table is updated
only after a successful append, so readers never see a quantity that does not
correspond to a logged event. Events built by the ledger are stamped while the
item's lock is held, so their replay order is the order they were validated
in. Movements on different items never wait on each other.
"""

from uuid import uuid4

from protean.exceptions import ObjectNotFoundError, ValidationError

from inventory.domain import logger
from inventory.item.events import (
    InventoryEvent,
    ItemCreated,
    ItemDeleted,
    ItemUpdated,
    StockEntered,
    StockExited,
)
from inventory.item.item import InventoryItem
from inventory.projections.current_inventory import InventoryProjection
from inventory.projections.movement_log import MovementLogEntry, build_movement_log
from shared.clock import MonotonicClock
from shared.errors import InvalidQuantity, ItemNotFound, StoreUnavailable
from shared.event_store import EventStore, chronological_key
from shared.locks import KeyedLocks


def _new_id():
    return str(uuid4())


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------
class InventoryLedger:
    def __init__(self, store: EventStore, clock: MonotonicClock | None = None):
        self.store = store
        self.clock = clock or MonotonicClock()
        self._locks = KeyedLocks()
        self._projections: dict[str, InventoryProjection] = {}

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def open(self, scope) -> InventoryProjection:
        """Return the scope's cached projection, folding the log on first use."""
        projection = self._projections.setdefault(scope, InventoryProjection(scope))
        projection.ensure_loaded(lambda: self._read(scope))
        return projection

    def close(self, scope) -> None:
        self._projections.pop(scope, None)

    def rebuild(self, scope) -> InventoryProjection:
        projection = self._projections.setdefault(scope, InventoryProjection(scope))
        projection.fold(self._read(scope))
        logger.info("Inventory projection rebuilt", scope=scope, items=len(projection.items))
        return projection

    def _view(self, scope) -> InventoryProjection:
        """Projection for reads. A scope with no events at all is not cached."""
        projection = self._projections.get(scope)
        if projection is not None:
            projection.ensure_loaded(lambda: self._read(scope))
            return projection

        events = self._read(scope)
        projection = InventoryProjection.replay(scope, events)
        if not events:
            return projection
        return self._cache(scope, projection)

    def _cache(self, scope, projection) -> InventoryProjection:
        cached = self._projections.setdefault(scope, projection)
        cached.ensure_loaded(lambda: self._read(scope))
        return cached

    def _forget_if_empty(self, scope, projection) -> None:
        if projection.empty and self._projections.get(scope) is projection:
            self._projections.pop(scope, None)

    # -------------------------------------------------------------------
    # Write path
    # -------------------------------------------------------------------
    def apply(self, event: InventoryEvent) -> InventoryItem | None:
        """Validate, append and project one event stamped by the caller.

        Returns the item's row as this event left it, or None when the item
        was deleted.
        """
        return self._record(event.owner_scope, event.item_id, lambda _at: event)

    def _record(self, scope, item_id, build) -> InventoryItem | None:
        """Build an event under the item's lock and commit it.

        ``build`` receives the timestamp to stamp on a ledger-built event.
        """
        projection = self.open(scope)

        with self._locks.hold((scope, str(item_id))):
            try:
                event = build(self.clock.now(scope))
                projection.check(event)
            except (ObjectNotFoundError, ValidationError):
                self._forget_if_empty(scope, projection)
                raise

            before = projection.row(event.item_id)
            if isinstance(event, ItemDeleted) and event.quantity_at_deletion is None:
                event = self._tombstone(event, before)

            self._append(event)
            projection.absorb(event, lambda: self._read(scope))
            row = projection.row(event.item_id)

        logger.info(
            "Inventory event applied",
            scope=scope,
            item_id=str(event.item_id),
            event_type=type(event).__name__,
            event_id=str(event.event_id),
        )
        return row

    def create_item(
        self,
        owner_scope,
        storage_unit_id,
        name,
        quantity,
        performed_by,
        category=None,
        description=None,
        notes=None,
        item_id=None,
    ) -> InventoryItem:
        item_id = item_id or _new_id()
        return self._record(
            owner_scope,
            item_id,
            lambda at: ItemCreated(
                event_id=_new_id(),
                item_id=item_id,
                owner_scope=owner_scope,
                storage_unit_id=storage_unit_id,
                name=name,
                category=category,
                description=description,
                quantity=quantity,
                performed_by=performed_by,
                notes=notes,
                timestamp=at,
            ),
        )

    def record_entry(self, owner_scope, item_id, delta, performed_by, notes=None, storage_unit_id=None):
        return self._record(
            owner_scope,
            item_id,
            lambda at: StockEntered(
                event_id=_new_id(),
                item_id=item_id,
                owner_scope=owner_scope,
                storage_unit_id=storage_unit_id or self._unit_of(owner_scope, item_id),
                delta=delta,
                performed_by=performed_by,
                notes=notes,
                timestamp=at,
            ),
        )

    def record_exit(self, owner_scope, item_id, delta, performed_by, notes=None, storage_unit_id=None):
        return self._record(
            owner_scope,
            item_id,
            lambda at: StockExited(
                event_id=_new_id(),
                item_id=item_id,
                owner_scope=owner_scope,
                storage_unit_id=storage_unit_id or self._unit_of(owner_scope, item_id),
                delta=delta,
                performed_by=performed_by,
                notes=notes,
                timestamp=at,
            ),
        )

    def record_movement(self, owner_scope, item_id, change, performed_by, notes=None):
        """Quick +/- adjustment: a positive change is an entry, a negative one an exit."""
        if change > 0:
            return self.record_entry(owner_scope, item_id, change, performed_by, notes=notes)
        if change < 0:
            return self.record_exit(owner_scope, item_id, -change, performed_by, notes=notes)
        raise InvalidQuantity("change", change, "Change must not be zero")

    def update_item(
        self,
        owner_scope,
        item_id,
        performed_by,
        name=None,
        category=None,
        description=None,
        notes=None,
    ) -> InventoryItem:
        return self._record(
            owner_scope,
            item_id,
            lambda at: ItemUpdated(
                event_id=_new_id(),
                item_id=item_id,
                owner_scope=owner_scope,
                storage_unit_id=self._unit_of(owner_scope, item_id),
                name=name,
                category=category,
                description=description,
                performed_by=performed_by,
                notes=notes,
                timestamp=at,
            ),
        )

    def delete_item(self, owner_scope, item_id, performed_by, notes=None) -> None:
        return self._record(
            owner_scope,
            item_id,
            lambda at: ItemDeleted(
                event_id=_new_id(),
                item_id=item_id,
                owner_scope=owner_scope,
                storage_unit_id=self._unit_of(owner_scope, item_id),
                performed_by=performed_by,
                notes=notes,
                timestamp=at,
            ),
        )

    # -------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------
    def current_items(self, scope, storage_unit_id=None, category=None) -> list[InventoryItem]:
        return self._view(scope).rows(storage_unit_id=storage_unit_id, category=category)

    def get_item(self, scope, item_id) -> InventoryItem:
        item = self._view(scope).row(item_id)
        if item is None:
            raise ItemNotFound(item_id, scope)
        return item

    def categories(self, scope, storage_unit_id=None) -> list[str]:
        seen = dict.fromkeys(item.display_category for item in self.current_items(scope, storage_unit_id))
        return list(seen)

    def history(self, scope, storage_unit_id=None) -> list[InventoryEvent]:
        """Every event of the scope, most recent first."""
        events = [
            event
            for event in self._read(scope)
            if storage_unit_id is None or event.storage_unit_id == storage_unit_id
        ]
        return sorted(events, key=chronological_key, reverse=True)

    def movement_log(self, scope, storage_unit_id=None) -> list[MovementLogEntry]:
        entries = build_movement_log(scope, self._read(scope))
        return [entry for entry in reversed(entries) if storage_unit_id is None or entry.storage_unit_id == storage_unit_id]

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _unit_of(self, scope, item_id):
        return self.get_item(scope, item_id).storage_unit_id

    def _tombstone(self, event, row):
        return ItemDeleted(
            event_id=event.event_id,
            item_id=event.item_id,
            owner_scope=event.owner_scope,
            storage_unit_id=event.storage_unit_id,
            quantity_at_deletion=row.quantity,
            performed_by=event.performed_by,
            notes=event.notes,
            timestamp=event.timestamp,
        )

    def _append(self, event):
        try:
            return self.store.append(event)
        except OSError as exc:
            logger.error("Event store append failed", scope=event.owner_scope, event_id=str(event.event_id), error=str(exc))
            raise StoreUnavailable("append", event.owner_scope, str(exc)) from exc

    def _read(self, scope):
        try:
            return self.store.list_by_scope(scope)
        except OSError as exc:
            logger.error("Event store read failed", scope=scope, error=str(exc))
            raise StoreUnavailable("read", scope, str(exc)) from exc
