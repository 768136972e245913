"""Display rows for the inventory history view.

Each row shows what an event did to its item: the change requested and the
quantity before and after. Exits keep their requested change, so an exit of
5 from 2 units shows a change of -5 and a new quantity of 0.
"""

from typing import assert_never

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from inventory.domain import inventory
from inventory.item.events import (
    ItemCreated,
    ItemDeleted,
    ItemUpdated,
    MovementAction,
    StockEntered,
    StockExited,
    action_of,
)
from inventory.projections.current_inventory import InventoryProjection
from shared.event_store import chronological_key


@inventory.projection
class MovementLogEntry:
    event_id = Identifier(identifier=True, required=True)
    item_id = Identifier(required=True)
    item_name = String(max_length=255)
    storage_unit_id = Identifier(required=True)
    action = String(required=True, choices=MovementAction)
    quantity_change = Integer(default=0)
    previous_quantity = Integer(default=0)
    new_quantity = Integer(default=0)
    performed_by = String(max_length=255)
    notes = Text()
    timestamp = DateTime(required=True)


def _quantity_change(event, previous):
    match event:
        case ItemCreated():
            return event.quantity
        case StockEntered():
            return event.delta
        case StockExited():
            return -event.delta
        case ItemUpdated():
            return 0
        case ItemDeleted():
            return -previous
        case _:
            assert_never(event)


def build_movement_log(scope, events) -> list[MovementLogEntry]:
    """Replay the scope's events and describe each one, oldest first.

    Events that do not apply in replay order are left out, exactly as the
    current table leaves them out.
    """
    table = InventoryProjection(scope)
    table.loaded = True
    entries = []

    for event in sorted(events, key=chronological_key):
        before = table.items.get(event.item_id)
        previous = before.quantity if before is not None else 0
        name = before.name if before is not None else None

        try:
            table.step(event)
        except (ObjectNotFoundError, ValidationError):
            continue

        after = table.items.get(event.item_id)
        entries.append(
            MovementLogEntry(
                event_id=event.event_id,
                item_id=event.item_id,
                item_name=after.name if after is not None else name,
                storage_unit_id=event.storage_unit_id,
                action=action_of(event).value,
                quantity_change=_quantity_change(event, previous),
                previous_quantity=previous,
                new_quantity=after.quantity if after is not None else 0,
                performed_by=event.performed_by,
                notes=event.notes,
                timestamp=event.timestamp,
            )
        )

    return entries
