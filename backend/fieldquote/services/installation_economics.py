"""
installation_economics.py — PV system sizing, curve pricing and yearly projection.

Pricing:
  unit price   = linear interpolation on the per-kW curve (clamped), or the
                 flat system price when the curve is disabled
  subtotal     = kW × unit price
  discount     = subtotal × discount% / 100
  VAT          = (subtotal − discount) × VAT% / 100
  before inc.  = subtotal − discount + VAT
  incentives   = kW × (federal + cantonal + municipal) CHF/kW
  total net    = max(0, before inc. − incentives)

Energy (1 kWp ≈ 1000 kWh/yr):
  produced     = kW × 1000
  self-used    = produced × self-consumption% / 100  (heat pump / no heat pump)
  exported     = max(0, produced − self-used)
  benefit      = self-used × buy price + exported × export price
  payback      = total net / benefit, or None when benefit is 0
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fieldquote.services.catalog_registry import (
    CatalogRegistry,
    Curve,
    EnergyPrices,
    Environment,
    Incentives,
    SelfConsumption,
    parse_number,
)
from fieldquote.services.perf_monitor import timed

logger = logging.getLogger("fieldquote.engine")

KWH_PER_KWP: float = 1000.0
PRICE_SOURCE_CURVE = "curve"
PRICE_SOURCE_FLAT = "flat"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SizeSuggestion:
    """S/M/L options (ascending) around the consumption-derived target."""
    target_kw: float
    options: Tuple[float, ...]
    mid: Optional[float]


@dataclass(frozen=True)
class EconomicsBreakdown:
    kw: float
    unit_price: float
    subtotal: float
    discount_pct: float
    discount: float
    vat_percent: float
    vat: float
    total_before_incentives: float
    incentive_federal: float
    incentive_cantonal: float
    incentive_municipal: float
    incentives_total: float
    total_net: float
    produced_kwh: float
    self_consumption_pct: float
    self_consumed_kwh: float
    grid_kwh: float
    value_self_consumed: float
    value_export: float
    annual_benefit: float
    payback_years: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EnvironmentalImpact:
    co2_saved_kg: float
    trees_equivalent: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InstallationQuote:
    price_source: str
    economics: EconomicsBreakdown
    environment: EnvironmentalImpact

    def to_dict(self) -> Dict[str, Any]:
        return {
            "price_source": self.price_source,
            "economics": self.economics.to_dict(),
            "environment": self.environment.to_dict(),
        }


# ---------------------------------------------------------------------------
# 1. Consumption & sizing
# ---------------------------------------------------------------------------

def annual_kwh_from_inputs(annual_kwh: Any = None, annual_cost: Any = None, energy_price: Any = None) -> float:
    """
    Yearly consumption: the stated kWh when given, else cost / price.

    A missing or zero energy price yields 0 rather than dividing by zero.
    """
    kwh = max(0.0, parse_number(annual_kwh, 0.0))
    if kwh > 0:
        return kwh
    cost = max(0.0, parse_number(annual_cost, 0.0))
    price = max(0.0, parse_number(energy_price, 0.0))
    if price <= 0:
        return 0.0
    return cost / price


def suggest_sizes(annual_kwh: Any, available_sizes_kw: Iterable[Any]) -> SizeSuggestion:
    """
    Pick small/medium/large system sizes around ``annual_kwh / 1000``.

    M is the closest available size; on an exact tie the larger size wins.
    S is the next smaller size (else the next larger one), L the next larger
    size (else the next smaller one).  Duplicates are dropped and the result
    is backfilled from the ascending size list until three sizes are present
    or the list runs out.
    """
    target = max(0.0, parse_number(annual_kwh, 0.0)) / KWH_PER_KWP
    sizes = sorted({s for s in (parse_number(v, 0.0) for v in available_sizes_kw) if s > 0})
    if not sizes:
        return SizeSuggestion(target_kw=target, options=(), mid=None)

    idx = min(range(len(sizes)), key=lambda i: (abs(sizes[i] - target), -sizes[i]))
    mid = sizes[idx]

    if idx > 0:
        small = sizes[idx - 1]
    elif idx + 1 < len(sizes):
        small = sizes[idx + 1]
    else:
        small = mid

    if idx + 1 < len(sizes):
        large = sizes[idx + 1]
    elif idx > 0:
        large = sizes[idx - 1]
    else:
        large = mid

    picked: List[float] = []
    for s in (small, mid, large):
        if s not in picked:
            picked.append(s)
    for s in sizes:
        if len(picked) >= 3:
            break
        if s not in picked:
            picked.append(s)

    return SizeSuggestion(target_kw=target, options=tuple(sorted(picked)), mid=mid)


# ---------------------------------------------------------------------------
# 2. Unit price
# ---------------------------------------------------------------------------

def unit_price_per_kw(kw: Any, curve: Curve) -> float:
    """Clamped linear interpolation between the curve anchors."""
    k = min(max(parse_number(kw, curve.min_kw), curve.min_kw), curve.max_kw)
    span = curve.max_kw - curve.min_kw
    if span <= 0:
        logger.debug("degenerate price curve at %s kW", curve.min_kw)
        return curve.price_at_min
    if k >= curve.max_kw:
        return curve.price_at_max
    t = (k - curve.min_kw) / span
    return curve.price_at_min + (curve.price_at_max - curve.price_at_min) * t


def selected_unit_price(kw: Any, catalog: CatalogRegistry) -> Tuple[float, str]:
    """Curve price when enabled, else the flat per-kW system price."""
    if catalog.curve.enabled:
        return unit_price_per_kw(kw, catalog.curve), PRICE_SOURCE_CURVE
    return catalog.curve.system_price_per_kw, PRICE_SOURCE_FLAT


# ---------------------------------------------------------------------------
# 3. Economics
# ---------------------------------------------------------------------------

@timed
def economics(
    kw: Any,
    selected_unit_price: Any,
    discount_pct: Any,
    vat_percent: Any,
    incentives: Incentives,
    heat_pump: bool,
    energy_prices: EnergyPrices,
    self_consumption: SelfConsumption,
) -> EconomicsBreakdown:
    """
    Price and yearly projection for a system of ``kw`` kWp.

    Args:
        kw:                  System size in kWp (>= 0).
        selected_unit_price: CHF per kWp.
        discount_pct:        Commercial discount, clamped to [0, 100].
        vat_percent:         VAT rate, clamped to [0, 100].
        incentives:          Per-kW rebate tiers.
        heat_pump:           Selects the self-consumption share.
        energy_prices:       Buy and export prices per kWh.
        self_consumption:    Self-consumption shares (%).

    Returns:
        EconomicsBreakdown with full-precision values.
    """
    kw = max(0.0, parse_number(kw, 0.0))
    unit_price = max(0.0, parse_number(selected_unit_price, 0.0))
    discount_pct = min(100.0, max(0.0, parse_number(discount_pct, 0.0)))
    vat_percent = min(100.0, max(0.0, parse_number(vat_percent, 0.0)))

    subtotal = kw * unit_price
    discount = subtotal * discount_pct / 100.0
    vat = (subtotal - discount) * vat_percent / 100.0
    total_before = subtotal - discount + vat

    federal = kw * incentives.federal_per_kw
    cantonal = kw * incentives.cantonal_per_kw
    municipal = kw * incentives.municipal_per_kw
    incentives_total = federal + cantonal + municipal
    total_net = max(0.0, total_before - incentives_total)

    produced = kw * KWH_PER_KWP
    pct = self_consumption.with_heat_pump_pct if heat_pump else self_consumption.without_heat_pump_pct
    self_kwh = produced * pct / 100.0
    grid_kwh = max(0.0, produced - self_kwh)
    value_self = self_kwh * energy_prices.buy_per_kwh
    value_export = grid_kwh * energy_prices.export_per_kwh
    benefit = value_self + value_export

    return EconomicsBreakdown(
        kw=kw,
        unit_price=unit_price,
        subtotal=subtotal,
        discount_pct=discount_pct,
        discount=discount,
        vat_percent=vat_percent,
        vat=vat,
        total_before_incentives=total_before,
        incentive_federal=federal,
        incentive_cantonal=cantonal,
        incentive_municipal=municipal,
        incentives_total=incentives_total,
        total_net=total_net,
        produced_kwh=produced,
        self_consumption_pct=pct,
        self_consumed_kwh=self_kwh,
        grid_kwh=grid_kwh,
        value_self_consumed=value_self,
        value_export=value_export,
        annual_benefit=benefit,
        payback_years=total_net / benefit if benefit > 0 else None,
    )


# ---------------------------------------------------------------------------
# 4. Environment
# ---------------------------------------------------------------------------

def environmental_impact(produced_kwh: Any, environment: Environment) -> EnvironmentalImpact:
    """CO2 avoided against the grid mix and the equivalent number of trees."""
    produced = max(0.0, parse_number(produced_kwh, 0.0))
    co2 = produced * environment.co2_grid_kg_per_kwh
    per_tree = environment.co2_per_tree_kg_per_year
    return EnvironmentalImpact(co2_saved_kg=co2, trees_equivalent=co2 / per_tree if per_tree > 0 else 0.0)


# ---------------------------------------------------------------------------
# 5. Load-based self-consumption helpers
# ---------------------------------------------------------------------------

def self_consumed_kwh(
    load_kwh: Any,
    pv_kwh: Any,
    heat_pump: bool,
    factors: Optional[SelfConsumption] = None,
) -> float:
    """
    kWh of PV used on site, estimated from the customer's load.

    coverage × load, capped by both production and load.
    """
    factors = factors or SelfConsumption(with_heat_pump_pct=75.0, without_heat_pump_pct=65.0)
    load = max(0.0, parse_number(load_kwh, 0.0))
    pv = max(0.0, parse_number(pv_kwh, 0.0))
    coverage = (factors.with_heat_pump_pct if heat_pump else factors.without_heat_pump_pct) / 100.0
    return max(0.0, min(load * coverage, pv, load))


def self_consumption_pct(load_kwh: Any, pv_kwh: Any, used_kwh: Any = None) -> float:
    """Self-consumed share of the load in percent; 0 for zero load."""
    load = max(0.0, parse_number(load_kwh, 0.0))
    pv = max(0.0, parse_number(pv_kwh, 0.0))
    if used_kwh is None:
        used = min(load, pv)
    else:
        used = max(0.0, min(parse_number(used_kwh, 0.0), load))
    return used / load * 100.0 if load > 0 else 0.0


# ---------------------------------------------------------------------------
# InstallationEconomicsModel
# ---------------------------------------------------------------------------

class InstallationEconomicsModel:
    """
    Installation quote helpers bound to one catalog snapshot.

    Usage::

        model = InstallationEconomicsModel(catalog)
        sizes = model.suggest_sizes(12_000)
        quote = model.quote(sizes.mid, discount_pct=5, heat_pump=True)
    """

    def __init__(self, catalog: CatalogRegistry):
        self.catalog = catalog

    def suggest_sizes(self, annual_kwh: Any, available_sizes_kw: Optional[Iterable[Any]] = None) -> SizeSuggestion:
        sizes = self.catalog.pv_sizes_kw if available_sizes_kw is None else available_sizes_kw
        return suggest_sizes(annual_kwh, sizes)

    def unit_price_per_kw(self, kw: Any) -> float:
        return unit_price_per_kw(kw, self.catalog.curve)

    def quote(self, kw: Any, discount_pct: Any = 0.0, heat_pump: bool = False) -> InstallationQuote:
        """Unit price, economics and environmental impact from the catalog."""
        unit_price, source = selected_unit_price(kw, self.catalog)
        breakdown = economics(
            kw,
            unit_price,
            discount_pct,
            self.catalog.vat_percent,
            self.catalog.incentives,
            heat_pump,
            self.catalog.energy_prices,
            self.catalog.self_consumption,
        )
        logger.debug(
            "installation quote %.2f kW at %.2f CHF/kW (%s)", breakdown.kw, unit_price, source
        )
        return InstallationQuote(
            price_source=source,
            economics=breakdown,
            environment=environmental_impact(breakdown.produced_kwh, self.catalog.environment),
        )


def quote_installation(
    kw: Any, catalog: CatalogRegistry, discount_pct: Any = 0.0, heat_pump: bool = False
) -> InstallationQuote:
    return InstallationEconomicsModel(catalog).quote(kw, discount_pct, heat_pump)
