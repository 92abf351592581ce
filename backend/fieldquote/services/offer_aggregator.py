"""
offer_aggregator.py — Folds priced line items into offer totals.

  items_subtotal        = Σ line subtotal
  subtotal              = items_subtotal + travel + call-out
  discount              = subtotal × discount% / 100
  vat                   = (subtotal − discount) × VAT% / 100
  net_before_incentives = subtotal − discount + vat
  total                 = max(0, net_before_incentives − incentives)

Incentives only apply to installation offers and are subtracted after VAT.
Values keep full float precision; ``OfferTotals.to_display`` rounds to CHF
cents for presentation.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from fieldquote.services.catalog_registry import CatalogRegistry, parse_number
from fieldquote.services.installation_economics import EconomicsBreakdown
from fieldquote.services.line_item_pricer import LineItem
from fieldquote.services.money import round_chf
from fieldquote.services.perf_monitor import timed
from fieldquote.services.travel_policy import NO_TRAVEL, TravelCharge

logger = logging.getLogger("fieldquote.engine")

OfferRow = Union[LineItem, Mapping[str, Any]]


@dataclass(frozen=True)
class OfferTotals:
    items_subtotal: float
    travel: float
    callout: float
    subtotal: float
    discount_pct: float
    discount: float
    vat_percent: float
    vat: float
    net_before_incentives: float
    incentives: float
    total: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_display(self) -> Dict[str, float]:
        """CHF amounts rounded half-up to cents; percentages unchanged."""
        shown = {k: round_chf(v) for k, v in asdict(self).items()}
        shown["discount_pct"] = self.discount_pct
        shown["vat_percent"] = self.vat_percent
        return shown


@dataclass(frozen=True)
class MaintenanceOffer:
    panels: float
    price_per_panel: float
    net: float
    vat_percent: float
    vat: float
    gross: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _pct(value: Any) -> float:
    return min(100.0, max(0.0, parse_number(value, 0.0)))


def item_total(qty: Any, unit_price: Any) -> float:
    """Plain qty × unit price for manual offer rows.  Negative qty is a credit."""
    return parse_number(qty, 0.0) * parse_number(unit_price, 0.0)


def _row_subtotal(row: OfferRow) -> float:
    if isinstance(row, LineItem):
        return row.subtotal
    unit_price = row.get("unitPrice", row.get("unit_price"))
    return item_total(row.get("qty"), unit_price)


class OfferAggregator:
    """Stateless fold of line items, travel and incentives into ``OfferTotals``."""

    @timed
    def aggregate(
        self,
        items: Iterable[OfferRow],
        vat_percent: Any = None,
        travel: Optional[TravelCharge] = None,
        discount_pct: Any = 0.0,
        incentives: Any = 0.0,
        catalog: Optional[CatalogRegistry] = None,
    ) -> OfferTotals:
        """
        Compute offer totals.

        Args:
            items:        LineItems or mappings with ``qty`` and ``unitPrice``.
            vat_percent:  VAT rate, clamped to [0, 100]; None takes the catalog's rate.
            travel:       Travel/call-out charge; None means no travel.
            discount_pct: Commercial discount on the subtotal, [0, 100].
            incentives:   CHF subtracted after VAT (installation offers only).
            catalog:      Source of the default VAT rate; none means 0%.

        Returns:
            OfferTotals (full precision).
        """
        travel = travel or NO_TRAVEL
        items_subtotal = sum(_row_subtotal(row) for row in items)
        subtotal = items_subtotal + travel.travel_chf + travel.callout_chf

        discount_pct = _pct(discount_pct)
        if vat_percent is None:
            vat_percent = catalog.vat_percent if catalog is not None else 0.0
        vat_percent = _pct(vat_percent)
        discount = subtotal * discount_pct / 100.0
        taxable = subtotal - discount
        vat = taxable * vat_percent / 100.0
        net_before = taxable + vat

        incentives = max(0.0, parse_number(incentives, 0.0))
        return OfferTotals(
            items_subtotal=items_subtotal,
            travel=travel.travel_chf,
            callout=travel.callout_chf,
            subtotal=subtotal,
            discount_pct=discount_pct,
            discount=discount,
            vat_percent=vat_percent,
            vat=vat,
            net_before_incentives=net_before,
            incentives=incentives,
            total=max(0.0, net_before - incentives) if incentives else net_before,
        )

    def aggregate_installation(self, breakdown: EconomicsBreakdown) -> OfferTotals:
        """Installation offer: one system line, incentives after VAT."""
        return OfferTotals(
            items_subtotal=breakdown.subtotal,
            travel=0.0,
            callout=0.0,
            subtotal=breakdown.subtotal,
            discount_pct=breakdown.discount_pct,
            discount=breakdown.discount,
            vat_percent=breakdown.vat_percent,
            vat=breakdown.vat,
            net_before_incentives=breakdown.total_before_incentives,
            incentives=breakdown.incentives_total,
            total=breakdown.total_net,
        )

    def maintenance_offer(self, panels: Any, catalog: CatalogRegistry) -> MaintenanceOffer:
        """Flat-rate maintenance: panels × price per panel, plus VAT.  No incentives."""
        count = max(0.0, parse_number(panels, 0.0))
        net = count * catalog.maintenance_price_per_panel
        vat = net * catalog.vat_percent / 100.0
        return MaintenanceOffer(
            panels=count,
            price_per_panel=catalog.maintenance_price_per_panel,
            net=net,
            vat_percent=catalog.vat_percent,
            vat=vat,
            gross=net + vat,
        )


def compute_offer_totals(items: Iterable[OfferRow], tax_percent: Any = 0.0, discount_pct: Any = 0.0) -> OfferTotals:
    """Totals for a manually edited offer (rows of qty × unit price, no travel)."""
    return OfferAggregator().aggregate(items, tax_percent, discount_pct=discount_pct)
