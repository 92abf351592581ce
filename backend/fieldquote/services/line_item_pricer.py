"""
line_item_pricer.py — Prices one discrete service work item.

Per-unit composition:
  minutes_per_unit  = option minutes (+ context add-on minutes)
  material_per_unit = tier material (+ context add-on CHF | + distance band CHF)
  labor_per_unit    = minutes_per_unit / 60 × hourly rate
  net_per_unit      = labor_per_unit + material_per_unit
  subtotal          = net_per_unit × qty          (qty floored to 1)

A request with an unknown category or an unanswered choice step is not
priced (``None``).  An answered option that the catalog does not list is
priced at zero so that an incomplete catalog never blocks a quote.
"""

import copy
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from fieldquote.services.catalog_registry import (
    CatalogOption,
    CatalogRegistry,
    ContextAddon,
    MaterialTier,
    parse_number,
)
from fieldquote.services.perf_monitor import timed
from fieldquote.services.questionnaire import (
    choice_label,
    get_category,
    normalize_choice,
    required_dimensions,
)

logger = logging.getLogger("fieldquote.engine")

DESCRIPTION_SEPARATOR = " · "
CREW_WORKER = "worker"
CREW_TEAM = "team"

_BASE_TIER = "base"
_CUSTOM_OPTION = "custom"
_ZERO_TIER = MaterialTier(label="", unit_chf=0.0)
_ZERO_ADDON = ContextAddon(label="", extra_minutes=0.0, extra_chf=0.0)


@dataclass(frozen=True)
class LineItem:
    """Priced snapshot of one work item.  Never mutated after construction."""
    description: str
    qty: float
    minutes_per_unit: float
    material_per_unit: float
    labor_per_unit: float
    net_per_unit: float
    subtotal: float
    category: str = ""
    answers: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        description: str,
        qty: float,
        minutes_per_unit: float,
        material_per_unit: float,
        hourly_rate: float,
        category: str = "",
        answers: Optional[Mapping[str, Any]] = None,
    ) -> "LineItem":
        labor = minutes_per_unit / 60.0 * hourly_rate
        net = labor + material_per_unit
        return cls(
            description=description,
            qty=qty,
            minutes_per_unit=minutes_per_unit,
            material_per_unit=material_per_unit,
            labor_per_unit=labor,
            net_per_unit=net,
            subtotal=net * qty,
            category=category,
            answers=MappingProxyType(copy.deepcopy(dict(answers or {}))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "description": self.description,
            "qty": self.qty,
            "minutes_per_unit": self.minutes_per_unit,
            "material_per_unit": self.material_per_unit,
            "labor_per_unit": self.labor_per_unit,
            "net_per_unit": self.net_per_unit,
            "subtotal": self.subtotal,
            "answers": copy.deepcopy(dict(self.answers)),
        }


def resolve_quantity(qty: Any = None, answers: Optional[Mapping[str, Any]] = None) -> float:
    """Explicit qty, else ``answers["quantity"]``; blank/invalid → 1; floor 1."""
    source = qty if qty is not None else (answers or {}).get("quantity")
    return max(1.0, parse_number(source, 1.0))


def _choice(answers: Mapping[str, Any], key: str) -> str:
    return normalize_choice(answers.get(key))


def _snapshot(category: str, answers: Mapping[str, Any]) -> Dict[str, Any]:
    """Answers with choice steps stored as option keys."""
    snapshot = dict(answers)
    for dim in required_dimensions(category):
        snapshot[dim] = _choice(answers, dim)
    return snapshot


class LineItemPricer:
    """
    Service line-item pricer bound to one catalog snapshot.

    Usage::

        pricer = LineItemPricer(CatalogRegistry.resolve(raw))
        item = pricer.price("lighting", {"light_type": "wall", ...})
    """

    def __init__(self, catalog: CatalogRegistry):
        self.catalog = catalog

    # ------------------------------------------------------------------
    # Rates
    # ------------------------------------------------------------------

    def hourly_rate(self, answers: Mapping[str, Any]) -> float:
        """Lead worker rate, plus the apprentice rate when the crew is a team."""
        rate = self.catalog.rates.hourly_worker
        if _choice(answers, "crew").lower() == CREW_TEAM:
            rate += self.catalog.rates.hourly_apprentice
        return rate

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    @timed
    def price(self, category: str, answers: Mapping[str, Any], qty: Any = None) -> Optional[LineItem]:
        """
        Price one work request.

        Args:
            category: Category key (e.g. "lighting", "wallbox").
            answers:  Flat answer map for the category's steps.
            qty:      Quantity; ``None`` reads ``answers["quantity"]``.

        Returns:
            LineItem, or None for an unknown category or a missing choice.
        """
        answers = answers or {}
        entry = self.catalog.category(category)
        if entry is None or get_category(category) is None:
            logger.debug("unknown category %r", category)
            return None

        missing = [dim for dim in required_dimensions(category) if not _choice(answers, dim)]
        if missing:
            logger.debug("category %s missing dimensions %s", category, missing)
            return None

        if category == "lighting":
            parts, minutes, material = self._lighting(answers)
        elif category == "wallbox":
            parts, minutes, material = self._wallbox(answers)
        elif category == "other":
            parts, minutes, material = self._other(answers)
        else:
            parts, minutes, material = self._simple(category, answers)

        return LineItem.build(
            description=DESCRIPTION_SEPARATOR.join([entry.label] + parts),
            qty=resolve_quantity(qty, answers),
            minutes_per_unit=minutes,
            material_per_unit=material,
            hourly_rate=self.hourly_rate(answers),
            category=category,
            answers=_snapshot(category, answers),
        )

    # ------------------------------------------------------------------
    # Category composition
    # ------------------------------------------------------------------

    def _option(self, category: str, key: str) -> CatalogOption:
        option = self.catalog.option(category, key)
        if option is None:
            logger.debug("option %r not in %s catalog, pricing at zero", key, category)
            return CatalogOption(label=key, minutes_per_unit=0.0)
        return option

    def _lighting(self, answers: Mapping[str, Any]):
        light_type = _choice(answers, "light_type")
        context = _choice(answers, "environment")
        style = _choice(answers, "style")

        option = self._option("lighting", light_type)
        tier = option.materials.get(style, _ZERO_TIER)
        addon = self.catalog.category("lighting").context_addons.get(context, _ZERO_ADDON)

        parts = [
            option.label,
            addon.label or choice_label("lighting", "environment", context),
            tier.label or choice_label("lighting", "style", style),
        ]
        minutes = option.minutes_per_unit + addon.extra_minutes
        material = tier.unit_chf + addon.extra_chf
        return parts, minutes, material

    def _wallbox(self, answers: Mapping[str, Any]):
        power = _choice(answers, "power")
        connection = _choice(answers, "connection_type")
        band = _choice(answers, "distance")

        option = self._option("wallbox", power)
        tier = option.materials.get(connection, _ZERO_TIER)
        # Connection tier and distance surcharge are independent additive axes
        material = tier.unit_chf + option.distance_band_chf.get(band, 0.0)

        parts = [
            option.label,
            tier.label or choice_label("wallbox", "connection_type", connection),
            choice_label("wallbox", "distance", band),
        ]
        return parts, option.minutes_per_unit, material

    def _other(self, answers: Mapping[str, Any]):
        option = self._option("other", _CUSTOM_OPTION)
        text = answers.get("description")
        text = text.strip() if isinstance(text, str) else ""
        material = option.materials.get(_BASE_TIER, _ZERO_TIER).unit_chf
        return [text or option.label], option.minutes_per_unit, material

    def _simple(self, category: str, answers: Mapping[str, Any]):
        key = _choice(answers, required_dimensions(category)[0])
        option = self._option(category, key)
        material = option.materials.get(_BASE_TIER, _ZERO_TIER).unit_chf
        return [option.label], option.minutes_per_unit, material

    # ------------------------------------------------------------------
    # Wallbox configurator
    # ------------------------------------------------------------------

    @timed
    def price_wallbox_config(
        self,
        power_kw: Any,
        connection_type: str,
        distance_band: str,
        qty: Any = None,
    ) -> LineItem:
        """
        Standalone wallbox configurator price from ``wallbox_pricing``.

        material = base_by_type[type] + power_addon_by_kw[power]
                   + install_surcharge_by_band[band]

        Unknown keys contribute zero.
        """
        pricing = self.catalog.wallbox_pricing
        power = normalize_choice(power_kw)
        connection = str(connection_type or "").strip()
        band = str(distance_band or "").strip()

        material = (
            pricing.base_by_type.get(connection, 0.0)
            + pricing.power_addon_by_kw.get(power, 0.0)
            + pricing.install_surcharge_by_band.get(band, 0.0)
        )
        parts: List[str] = [
            "Wallbox",
            choice_label("wallbox", "power", power),
            choice_label("wallbox", "connection_type", connection),
            choice_label("wallbox", "distance", band),
        ]
        return LineItem.build(
            description=DESCRIPTION_SEPARATOR.join(parts),
            qty=resolve_quantity(qty),
            minutes_per_unit=pricing.minutes_per_unit,
            material_per_unit=material,
            hourly_rate=self.catalog.rates.hourly_worker,
            category="wallbox",
            answers={"power": power, "connection_type": connection, "distance": band},
        )


def price(category: str, answers: Mapping[str, Any], qty: Any, catalog: CatalogRegistry) -> Optional[LineItem]:
    """Functional form of ``LineItemPricer(catalog).price``."""
    return LineItemPricer(catalog).price(category, answers, qty)
