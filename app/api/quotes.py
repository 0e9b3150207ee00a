"""Quote calculation endpoints"""
import logging
from fastapi import APIRouter

from app.core.enums import ServiceType
from app.core.metrics import record_quote
from app.schemas.quote import QuoteRequest, QuoteResult
from app.services.pricing import compute_quote, base_price_for
from app.services.pricing_table import PricingTable, get_pricing_table

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("/calc", response_model=QuoteResult)
async def calc_quote(req: QuoteRequest):
    result = compute_quote(req)
    record_quote(req.service_type, result.monthly_price)

    if result.is_complete:
        logger.info(
            f"Quote computed for {req.service_type}: "
            f"{result.monthly_price} {result.currency}/month, {result.estimated_hours}h"
        )
    return result


@router.get("/pricing", response_model=PricingTable)
async def pricing_table():
    return get_pricing_table()


@router.get("/base-price/{service_type}")
async def base_price(service_type: ServiceType):
    table = get_pricing_table()
    return {
        "service_type": service_type.value,
        "base_price": base_price_for(service_type, table),
        "currency": table.currency,
    }
