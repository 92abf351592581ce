"""
Quote routes — thin HTTP wrapper around the quote engine.

Every request carries its own raw catalog; nothing is stored server-side.

POST /api/quotes/line-item         — price one work item
POST /api/quotes/travel            — travel and call-out charge
POST /api/quotes/service-offer     — items + travel → totals, SRV reference
POST /api/quotes/manual-offer      — qty × unit price rows → totals
POST /api/quotes/size-suggestions  — S/M/L system sizes for a consumption
POST /api/quotes/installation      — PV price, incentives and projection, FV reference
POST /api/quotes/maintenance       — flat-rate panel maintenance
POST /api/quotes/wallbox           — standalone wallbox configuration
"""
import logging

from fastapi import APIRouter, HTTPException

from fieldquote.models.quote_schema import (
    InstallationRequest,
    LineItemRequest,
    MaintenanceRequest,
    ManualOfferRequest,
    ServiceOfferRequest,
    SizeSuggestionRequest,
    TravelRequest,
    WallboxRequest,
    WorkRequest,
)
from fieldquote.services import questionnaire
from fieldquote.services.catalog_registry import CatalogRegistry, parse_number, parse_sizes
from fieldquote.services.installation_economics import (
    InstallationEconomicsModel,
    annual_kwh_from_inputs,
)
from fieldquote.services.line_item_pricer import LineItem, LineItemPricer
from fieldquote.services.offer_aggregator import OfferAggregator, compute_offer_totals
from fieldquote.services.offer_reference import offer_numbers, service_reference
from fieldquote.services.travel_policy import TravelAndCalloutPolicy

router = APIRouter(prefix="/api/quotes", tags=["Quotes"])
logger = logging.getLogger("fieldquote.api")


def _price_or_422(pricer: LineItemPricer, work: WorkRequest) -> LineItem:
    item = pricer.price(work.category, work.answers, work.quantity)
    if item is None:
        if questionnaire.get_category(work.category) is None:
            detail = f"Unknown category '{work.category}'"
            missing = []
        else:
            detail = f"Incomplete answers for '{work.category}'"
            missing = questionnaire.missing_steps(work.category, work.answers)
        logger.warning("line item rejected: %s %s", detail, missing)
        raise HTTPException(status_code=422, detail={"message": detail, "missing": missing})
    return item


def _annual_kwh(body: SizeSuggestionRequest, catalog: CatalogRegistry) -> float:
    return annual_kwh_from_inputs(body.annual_kwh, body.annual_cost, catalog.energy_prices.buy_per_kwh)


@router.post("/line-item")
async def price_line_item(body: LineItemRequest):
    catalog = CatalogRegistry.resolve(body.catalog)
    item = _price_or_422(LineItemPricer(catalog), body)
    return {"item": item.to_dict()}


@router.post("/travel")
async def price_travel(body: TravelRequest):
    catalog = CatalogRegistry.resolve(body.catalog)
    charge = TravelAndCalloutPolicy(catalog).price(body.travel_minutes, body.billing_mode, body.apply_callout)
    return charge.to_dict()


@router.post("/service-offer")
async def service_offer(body: ServiceOfferRequest):
    """Price every item, add travel/call-out and fold into totals."""
    catalog = CatalogRegistry.resolve(body.catalog)
    pricer = LineItemPricer(catalog)
    items = [_price_or_422(pricer, work) for work in body.items]
    charge = TravelAndCalloutPolicy(catalog).price(body.travel_minutes, body.billing_mode, body.apply_callout)
    totals = OfferAggregator().aggregate(items, travel=charge, discount_pct=body.discount_pct, catalog=catalog)

    reference = service_reference()
    logger.info("service offer computed", extra={"quote_ref": reference})
    return {
        "reference": reference,
        "items": [i.to_dict() for i in items],
        "travel": charge.to_dict(),
        "totals": totals.to_dict(),
        "display": totals.to_display(),
    }


@router.post("/manual-offer")
async def manual_offer(body: ManualOfferRequest):
    rows = [{"qty": r.qty, "unit_price": r.unit_price} for r in body.rows]
    totals = compute_offer_totals(rows, body.tax_percent, body.discount_pct)
    return {"totals": totals.to_dict(), "display": totals.to_display()}


@router.post("/size-suggestions")
async def size_suggestions(body: SizeSuggestionRequest):
    catalog = CatalogRegistry.resolve(body.catalog)
    sizes = parse_sizes(body.sizes_kw, catalog.pv_sizes_kw)
    suggestion = InstallationEconomicsModel(catalog).suggest_sizes(_annual_kwh(body, catalog), sizes)
    return {
        "target_kw": suggestion.target_kw,
        "options": list(suggestion.options),
        "mid": suggestion.mid,
    }


@router.post("/installation")
async def installation_offer(body: InstallationRequest):
    """PV installation quote; kw defaults to the suggested mid size."""
    catalog = CatalogRegistry.resolve(body.catalog)
    model = InstallationEconomicsModel(catalog)

    kw = parse_number(body.kw, 0.0)
    suggestion = None
    if kw <= 0:
        sizes = parse_sizes(body.sizes_kw, catalog.pv_sizes_kw)
        suggestion = model.suggest_sizes(_annual_kwh(body, catalog), sizes)
        kw = suggestion.mid or 0.0

    quote = model.quote(kw, body.discount_pct, body.heat_pump)
    totals = OfferAggregator().aggregate_installation(quote.economics)

    reference = offer_numbers.next()
    logger.info("installation offer computed", extra={"quote_ref": reference})
    return {
        "reference": reference,
        "sizes": list(suggestion.options) if suggestion else None,
        "quote": quote.to_dict(),
        "totals": totals.to_dict(),
        "display": totals.to_display(),
    }


@router.post("/maintenance")
async def maintenance_offer(body: MaintenanceRequest):
    catalog = CatalogRegistry.resolve(body.catalog)
    return OfferAggregator().maintenance_offer(body.panels, catalog).to_dict()


@router.post("/wallbox")
async def wallbox_config(body: WallboxRequest):
    catalog = CatalogRegistry.resolve(body.catalog)
    item = LineItemPricer(catalog).price_wallbox_config(
        body.power_kw, body.connection_type, body.distance_band, body.quantity
    )
    return {"item": item.to_dict()}
