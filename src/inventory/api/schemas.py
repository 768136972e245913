"""Pydantic request/response schemas for the Inventory API.

These are external contracts (anti-corruption layer), separate from the
internal Protean events. Response field names are the stable display
contract consumed by the portal front end.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateItemRequest(BaseModel):
    storage_unit_id: str
    name: str = Field(min_length=1)
    quantity: int = Field(ge=0, default=1)
    category: str | None = None
    description: str | None = None
    performed_by: str
    notes: str | None = None
    item_id: str | None = None


class UpdateItemRequest(BaseModel):
    name: str | None = None
    category: str | None = None
    description: str | None = None
    performed_by: str
    notes: str | None = None


class MovementRequest(BaseModel):
    change: int  # Positive for an entry, negative for an exit
    performed_by: str
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class InventoryItemResponse(BaseModel):
    id: str
    owner_scope: str
    storage_unit_id: str
    name: str
    category: str | None = None
    display_category: str
    description: str | None = None
    quantity: int
    last_updated: datetime | None = None


class InventoryEventResponse(BaseModel):
    event_id: str
    action: str
    item_id: str
    owner_scope: str
    storage_unit_id: str
    performed_by: str
    notes: str | None = None
    timestamp: datetime
    name: str | None = None
    category: str | None = None
    description: str | None = None
    quantity: int | None = None
    delta: int | None = None
    quantity_at_deletion: int | None = None


class MovementLogEntryResponse(BaseModel):
    event_id: str
    item_id: str
    item_name: str | None = None
    storage_unit_id: str
    action: str
    quantity_change: int
    previous_quantity: int
    new_quantity: int
    performed_by: str | None = None
    notes: str | None = None
    timestamp: datetime


class StatusResponse(BaseModel):
    status: str = "ok"
