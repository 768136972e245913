"""FastAPI route for price quotes."""

from fastapi import APIRouter, Query
from pydantic import BaseModel

from pricing.calculator import storage_price, transport_price

pricing_router = APIRouter(prefix="/pricing", tags=["pricing"])


class QuoteResponse(BaseModel):
    volume: float
    monthly_storage: int
    transport: int


@pricing_router.get("/quote", response_model=QuoteResponse)
async def quote(volume: float = Query(ge=0)) -> QuoteResponse:
    return QuoteResponse(
        volume=volume,
        monthly_storage=storage_price(volume),
        transport=transport_price(volume),
    )
