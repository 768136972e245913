"""Domain events for the InventoryItem aggregate.

Events are immutable facts appended to the inventory ledger. They are never
corrected after the fact: an exit larger than the stock on hand is logged with
its requested delta, and only the derived table clamps the quantity.

The five event classes form a closed union (``InventoryEvent``); every consumer
matches on it exhaustively.
"""

from enum import Enum
from typing import assert_never

from protean.fields import DateTime, Identifier, Integer, String, Text

from inventory.domain import inventory


class MovementAction(Enum):
    CREATE = "create"
    UPDATE = "update"
    ENTRY = "entry"
    EXIT = "exit"
    DELETE = "delete"


@inventory.event(part_of="InventoryItem")
class ItemCreated:
    """A new article was placed in a storage unit."""

    __version__ = 1

    event_id = Identifier(required=True)
    item_id = Identifier(required=True)
    owner_scope = Identifier(required=True)
    storage_unit_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    category = String(max_length=100)
    description = Text()
    quantity = Integer(required=True)
    performed_by = String(required=True, max_length=255)
    notes = Text()
    timestamp = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class ItemUpdated:
    """Descriptive details of an article changed. Quantity is untouched."""

    __version__ = 1

    event_id = Identifier(required=True)
    item_id = Identifier(required=True)
    owner_scope = Identifier(required=True)
    storage_unit_id = Identifier(required=True)
    name = String(max_length=255)
    category = String(max_length=100)
    description = Text()
    performed_by = String(required=True, max_length=255)
    notes = Text()
    timestamp = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class StockEntered:
    """Units of an existing article were brought into the storage unit."""

    __version__ = 1

    event_id = Identifier(required=True)
    item_id = Identifier(required=True)
    owner_scope = Identifier(required=True)
    storage_unit_id = Identifier(required=True)
    delta = Integer(required=True)
    performed_by = String(required=True, max_length=255)
    notes = Text()
    timestamp = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class StockExited:
    """Units of an article were taken out of the storage unit."""

    __version__ = 1

    event_id = Identifier(required=True)
    item_id = Identifier(required=True)
    owner_scope = Identifier(required=True)
    storage_unit_id = Identifier(required=True)
    delta = Integer(required=True)
    performed_by = String(required=True, max_length=255)
    notes = Text()
    timestamp = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class ItemDeleted:
    """An article was removed from the inventory (tombstone)."""

    __version__ = 1

    event_id = Identifier(required=True)
    item_id = Identifier(required=True)
    owner_scope = Identifier(required=True)
    storage_unit_id = Identifier(required=True)
    quantity_at_deletion = Integer()  # Filled in by the ledger when recorded
    performed_by = String(required=True, max_length=255)
    notes = Text()
    timestamp = DateTime(required=True)


InventoryEvent = ItemCreated | ItemUpdated | StockEntered | StockExited | ItemDeleted


def action_of(event: InventoryEvent) -> MovementAction:
    match event:
        case ItemCreated():
            return MovementAction.CREATE
        case ItemUpdated():
            return MovementAction.UPDATE
        case StockEntered():
            return MovementAction.ENTRY
        case StockExited():
            return MovementAction.EXIT
        case ItemDeleted():
            return MovementAction.DELETE
        case _:
            assert_never(event)
