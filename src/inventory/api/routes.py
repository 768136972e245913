"""FastAPI routes for the Inventory domain."""

from fastapi import APIRouter, Depends, Request

from inventory.api.schemas import (
    CreateItemRequest,
    InventoryEventResponse,
    InventoryItemResponse,
    MovementLogEntryResponse,
    MovementRequest,
    StatusResponse,
    UpdateItemRequest,
)
from inventory.item.events import action_of
from inventory.item.ledger import InventoryLedger
from shared.api_errors import domain_errors

inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


def get_ledger(request: Request) -> InventoryLedger:
    return request.app.state.inventory_ledger


def _proper_case(value):
    """'sofa de CUERO' -> 'Sofa De Cuero', as the portal displays names."""
    if not value:
        return value
    return " ".join(word[:1].upper() + word[1:] for word in value.lower().split(" "))


def _item_response(item) -> InventoryItemResponse:
    return InventoryItemResponse(
        id=str(item.id),
        owner_scope=item.owner_scope,
        storage_unit_id=item.storage_unit_id,
        name=item.name,
        category=item.category,
        display_category=item.display_category,
        description=item.description,
        quantity=item.quantity,
        last_updated=item.last_updated,
    )


def _event_response(event) -> InventoryEventResponse:
    return InventoryEventResponse(
        event_id=str(event.event_id),
        action=action_of(event).value,
        item_id=str(event.item_id),
        owner_scope=event.owner_scope,
        storage_unit_id=event.storage_unit_id,
        performed_by=event.performed_by,
        notes=event.notes,
        timestamp=event.timestamp,
        name=getattr(event, "name", None),
        category=getattr(event, "category", None),
        description=getattr(event, "description", None),
        quantity=getattr(event, "quantity", None),
        delta=getattr(event, "delta", None),
        quantity_at_deletion=getattr(event, "quantity_at_deletion", None),
    )


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------
@inventory_router.post("/{scope}/items", status_code=201, response_model=InventoryItemResponse)
async def create_item(
    scope: str, body: CreateItemRequest, ledger: InventoryLedger = Depends(get_ledger)
) -> InventoryItemResponse:
    with domain_errors():
        item = ledger.create_item(
            owner_scope=scope,
            storage_unit_id=body.storage_unit_id,
            name=_proper_case(body.name),
            quantity=body.quantity,
            performed_by=body.performed_by,
            category=_proper_case(body.category),
            description=body.description,
            notes=body.notes or "Ingreso inicial",
            item_id=body.item_id,
        )
    return _item_response(item)


@inventory_router.get("/{scope}/items", response_model=list[InventoryItemResponse])
async def list_items(
    scope: str,
    storage_unit_id: str | None = None,
    category: str | None = None,
    ledger: InventoryLedger = Depends(get_ledger),
) -> list[InventoryItemResponse]:
    with domain_errors():
        items = ledger.current_items(scope, storage_unit_id=storage_unit_id, category=category)
    return [_item_response(item) for item in items]


@inventory_router.get("/{scope}/items/{item_id}", response_model=InventoryItemResponse)
async def get_item(scope: str, item_id: str, ledger: InventoryLedger = Depends(get_ledger)) -> InventoryItemResponse:
    with domain_errors():
        item = ledger.get_item(scope, item_id)
    return _item_response(item)


@inventory_router.put("/{scope}/items/{item_id}", response_model=InventoryItemResponse)
async def update_item(
    scope: str, item_id: str, body: UpdateItemRequest, ledger: InventoryLedger = Depends(get_ledger)
) -> InventoryItemResponse:
    with domain_errors():
        item = ledger.update_item(
            owner_scope=scope,
            item_id=item_id,
            performed_by=body.performed_by,
            name=_proper_case(body.name),
            category=_proper_case(body.category),
            description=body.description,
            notes=body.notes,
        )
    return _item_response(item)


@inventory_router.post("/{scope}/items/{item_id}/movements", response_model=InventoryItemResponse)
async def record_movement(
    scope: str, item_id: str, body: MovementRequest, ledger: InventoryLedger = Depends(get_ledger)
) -> InventoryItemResponse:
    with domain_errors():
        item = ledger.record_movement(
            owner_scope=scope,
            item_id=item_id,
            change=body.change,
            performed_by=body.performed_by,
            notes=body.notes or "Ajuste rápido",
        )
    return _item_response(item)


@inventory_router.delete("/{scope}/items/{item_id}", response_model=StatusResponse)
async def delete_item(
    scope: str,
    item_id: str,
    performed_by: str,
    notes: str | None = None,
    ledger: InventoryLedger = Depends(get_ledger),
) -> StatusResponse:
    with domain_errors():
        ledger.delete_item(
            owner_scope=scope,
            item_id=item_id,
            performed_by=performed_by,
            notes=notes or "Artículo eliminado del inventario",
        )
    return StatusResponse()


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
@inventory_router.get("/{scope}/categories", response_model=list[str])
async def list_categories(
    scope: str, storage_unit_id: str | None = None, ledger: InventoryLedger = Depends(get_ledger)
) -> list[str]:
    with domain_errors():
        return ledger.categories(scope, storage_unit_id=storage_unit_id)


@inventory_router.get("/{scope}/history", response_model=list[InventoryEventResponse])
async def history(
    scope: str, storage_unit_id: str | None = None, ledger: InventoryLedger = Depends(get_ledger)
) -> list[InventoryEventResponse]:
    with domain_errors():
        events = ledger.history(scope, storage_unit_id=storage_unit_id)
    return [_event_response(event) for event in events]


@inventory_router.get("/{scope}/movements", response_model=list[MovementLogEntryResponse])
async def movement_log(
    scope: str, storage_unit_id: str | None = None, ledger: InventoryLedger = Depends(get_ledger)
) -> list[MovementLogEntryResponse]:
    with domain_errors():
        entries = ledger.movement_log(scope, storage_unit_id=storage_unit_id)
    return [
        MovementLogEntryResponse(
            event_id=str(entry.event_id),
            item_id=str(entry.item_id),
            item_name=entry.item_name,
            storage_unit_id=entry.storage_unit_id,
            action=entry.action,
            quantity_change=entry.quantity_change,
            previous_quantity=entry.previous_quantity,
            new_quantity=entry.new_quantity,
            performed_by=entry.performed_by,
            notes=entry.notes,
            timestamp=entry.timestamp,
        )
        for entry in entries
    ]
