"""Live inventory rows of one scope, derived from its events.

Rows are kept in order of each item's first ``create``; updates never re-sort
them. Every change goes through ``step`` so that the incrementally maintained
table and a fresh fold over the log are the same table.
"""

from typing import assert_never

from inventory.item.events import (
    InventoryEvent,
    ItemCreated,
    ItemDeleted,
    ItemUpdated,
    StockEntered,
    StockExited,
)
from inventory.item.item import InventoryItem
from shared.errors import DuplicateItem, InvalidQuantity, ItemNotFound
from shared.projection import ScopeProjection


class InventoryProjection(ScopeProjection):
    """Live rows of one scope, keyed by item id in order of first creation."""

    def reset(self):
        self.items: dict[str, InventoryItem] = {}

    @classmethod
    def replay(cls, scope, events):
        projection = cls(scope)
        projection.fold(events)
        return projection

    def check(self, event: InventoryEvent) -> None:
        with self._lock:
            match event:
                case ItemCreated():
                    if event.item_id in self.items:
                        raise DuplicateItem(event.item_id, event.owner_scope)
                    if event.quantity < 0:
                        raise InvalidQuantity("quantity", event.quantity, "Quantity cannot be negative")
                case StockEntered() | StockExited():
                    self._require(event)
                    if event.delta <= 0:
                        raise InvalidQuantity("delta", event.delta, "Delta must be positive")
                case ItemUpdated() | ItemDeleted():
                    self._require(event)
                case _:
                    assert_never(event)

    def step(self, event: InventoryEvent) -> None:
        self.check(event)
        match event:
            case ItemCreated():
                self.items[event.item_id] = InventoryItem.from_creation(event)
            case StockEntered():
                self.items[event.item_id].receive(event.delta, event.timestamp)
            case StockExited():
                self.items[event.item_id].withdraw(event.delta, event.timestamp)
            case ItemUpdated():
                self.items[event.item_id].revise(
                    event.timestamp,
                    name=event.name,
                    category=event.category,
                    description=event.description,
                )
            case ItemDeleted():
                del self.items[event.item_id]
            case _:
                assert_never(event)

    def row(self, item_id) -> InventoryItem | None:
        with self._lock:
            item = self.items.get(str(item_id))
            return item.snapshot() if item is not None else None

    def rows(self, storage_unit_id=None, category=None) -> list[InventoryItem]:
        with self._lock:
            return [
                item.snapshot()
                for item in self.items.values()
                if (storage_unit_id is None or item.storage_unit_id == storage_unit_id)
                and (category is None or item.display_category == category)
            ]

    def _require(self, event):
        if event.item_id not in self.items:
            raise ItemNotFound(event.item_id, event.owner_scope)

