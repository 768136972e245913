"""Storehouse FastAPI application.

Serves the inventory ledger, the access log and price quotes. Each request
runs inside the Protean domain context that owns its URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from access.api import access_router
from access.domain import access
from access.presence.projector import PresenceProjector
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from inventory.api import inventory_router
from inventory.domain import inventory
from inventory.item.ledger import InventoryLedger
from pricing.api import pricing_router
from shared.event_store import EventStore, InMemoryEventStore
from shared.logging import bind_request_context, clear_request_context, configure_logging

_ROUTE_DOMAIN_MAP = {
    "/inventory": inventory,
    "/access": access,
}


def _resolve_domain(path: str):
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


def create_app(inventory_store: EventStore | None = None, access_store: EventStore | None = None) -> FastAPI:
    """Build the application around the given event stores.

    Stores default to in-memory ones, partitioned by owner scope for the
    inventory ledger and by company for the access log.
    """
    inventory.init()
    access.init()

    app = FastAPI(
        title="Storehouse API",
        description="Storage rental portal: inventory ledger, site access and pricing",
    )
    app.state.inventory_ledger = InventoryLedger(inventory_store or InMemoryEventStore("owner_scope"))
    app.state.presence_projector = PresenceProjector(access_store or InMemoryEventStore("company_id"))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the Protean domain context owning the request path."""
        clear_request_context()
        bind_request_context(method=request.method, path=request.url.path)
        domain = _resolve_domain(request.url.path)
        if domain is None:
            return await call_next(request)
        with domain.domain_context():
            return await call_next(request)

    app.include_router(inventory_router)
    app.include_router(access_router)
    app.include_router(pricing_router)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domains": {
                    "inventory": {"name": inventory.name},
                    "access": {"name": access.name},
                },
            }
        )

    return app


configure_logging()
app = create_app()
