"""
Request schemas for the quote API.

Numeric fields accept numbers or locale strings ("12,5"); the engine does
the parsing, so the schemas only constrain shape.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

Number = Optional[Union[float, str]]


class CatalogRequest(BaseModel):
    catalog: Dict[str, Any] = Field(
        default_factory=dict,
        description="Raw tariff configuration (camelCase, may be partial)",
    )


class WorkRequest(BaseModel):
    category: str = Field(..., description="e.g. lighting, wallbox, other")
    answers: Dict[str, Any] = Field(default_factory=dict, description="Flat step-key → answer map")
    quantity: Number = Field(None, description="Overrides answers['quantity'] when set")


class LineItemRequest(CatalogRequest, WorkRequest):
    pass


class TravelFields(BaseModel):
    travel_minutes: Number = Field(None, description="Round-trip minutes; empty uses 2 × one-way default")
    billing_mode: Optional[str] = Field(None, description="metered | fixed")
    apply_callout: Optional[bool] = Field(None, description="Unset means catalog default")


class TravelRequest(CatalogRequest, TravelFields):
    pass


class ServiceOfferRequest(CatalogRequest, TravelFields):
    items: List[WorkRequest] = Field(default_factory=list)
    discount_pct: Number = Field(0.0, description="Discount on the subtotal in percent")


class ManualRow(BaseModel):
    description: str = ""
    qty: Number = 0.0
    unit_price: Number = 0.0


class ManualOfferRequest(BaseModel):
    rows: List[ManualRow] = Field(default_factory=list)
    tax_percent: Number = 0.0
    discount_pct: Number = 0.0


class SizeSuggestionRequest(CatalogRequest):
    annual_kwh: Number = None
    annual_cost: Number = Field(None, description="Used with the buy price when annual_kwh is empty")
    sizes_kw: Optional[Union[List[Union[float, str]], str]] = Field(
        None, description="Overrides catalog pvSizesKW"
    )


class InstallationRequest(SizeSuggestionRequest):
    kw: Number = Field(None, description="System size; empty picks the suggested mid size")
    discount_pct: Number = 0.0
    heat_pump: bool = False


class MaintenanceRequest(CatalogRequest):
    panels: Number = 0


class WallboxRequest(CatalogRequest):
    power_kw: Union[float, str] = Field(..., description="11 or 22")
    connection_type: str = Field(..., description="socket | standard | smart")
    distance_band: str = Field(..., description="0-5 | 5-10 | 10-25 | 25-50")
    quantity: Number = None
