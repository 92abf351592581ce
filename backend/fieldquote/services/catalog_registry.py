"""
catalog_registry.py — Typed, fully-defaulted view over the tariff configuration.

The raw configuration is a JSON-shaped mapping edited by office staff, so any
field may be missing, blank or typed as a locale string such as "1800,50".
``CatalogRegistry.resolve`` turns it into frozen
dataclasses in which every number is a float and every table is complete.

Normalization rules:
  - numbers:      parse_number() — comma→dot, leading-number fallback, default
  - money/time:   clamped to >= 0
  - percentages:  clamped to [0, 100]
  - curve:        inverted anchors are swapped
  - categories:   deep-merged against _DEFAULT_CATEGORY_CATALOG; unknown
                  option keys are kept with zero defaults
"""

import logging
import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

logger = logging.getLogger("fieldquote.engine")


# ---------------------------------------------------------------------------
# Built-in defaults (CHF, minutes, kW)
# ---------------------------------------------------------------------------

_DEFAULT_HOURLY_WORKER: float = 95.0
_DEFAULT_HOURLY_APPRENTICE: float = 45.0
_DEFAULT_TRAVEL_RATE_PER_MINUTE: float = 1.5
_DEFAULT_CALLOUT_FEE: float = 60.0

_DEFAULT_ONE_WAY_MINUTES: float = 20.0
_DEFAULT_AUTO_APPLY_CALLOUT: bool = True
_DEFAULT_BILLING_MODE: str = "metered"
BILLING_MODES: Tuple[str, ...] = ("metered", "fixed")

_DEFAULT_VAT_PERCENT: float = 8.1
_DEFAULT_MAINTENANCE_PER_PANEL: float = 35.0
_DEFAULT_SYSTEM_PRICE_PER_KW: float = 1800.0

_DEFAULT_CURVE: Dict[str, float] = {
    "minKW": 8.0,
    "priceAtMin": 2000.0,
    "maxKW": 200.0,
    "priceAtMax": 1000.0,
}

_DEFAULT_INCENTIVES: Dict[str, float] = {
    "federalCHFPerKW": 360.0,
    "cantonalCHFPerKW": 180.0,
    "municipalCHFPerKW": 10.0,
}

_DEFAULT_SELF_CONSUMPTION: Dict[str, float] = {
    "withHeatPumpPct": 75.0,
    "withoutHeatPumpPct": 65.0,
}

_DEFAULT_ENERGY_PRICES: Dict[str, float] = {
    "buyCHFPerKWh": 0.28,
    "exportCHFPerKWh": 0.05,
}

_DEFAULT_ENVIRONMENT: Dict[str, float] = {
    "co2GridKgPerKWh": 0.12,
    "co2PerTreeKgPerYear": 21.0,
}

_DEFAULT_PV_SIZES_KW: Tuple[float, ...] = (8.0, 10.0, 12.0, 16.0, 25.0, 33.0)

_DEFAULT_WALLBOX_PRICING: Dict[str, Any] = {
    "minutesPerUnit": 240.0,
    "baseByType": {"socket": 450.0, "standard": 900.0, "smart": 1400.0},
    "powerAddonByKW": {"11": 0.0, "22": 250.0},
    "installSurchargeByBand": {"0-5": 0.0, "5-10": 120.0, "10-25": 320.0, "25-50": 680.0},
}

# Distance bands (metres from the distribution board) shared by wallbox options
_WALLBOX_BANDS: Dict[str, float] = {"0-5": 0.0, "5-10": 120.0, "10-25": 320.0, "25-50": 680.0}


def _base(label: str, minutes: float, unit_chf: float) -> Dict[str, Any]:
    return {
        "label": label,
        "minutesPerUnit": minutes,
        "materials": {"base": {"label": "Standard", "unitCHF": unit_chf}},
    }


def _styled(label: str, minutes: float, simple: float, modern: float, design: float) -> Dict[str, Any]:
    return {
        "label": label,
        "minutesPerUnit": minutes,
        "materials": {
            "simple": {"label": "Simple", "unitCHF": simple},
            "modern": {"label": "Modern", "unitCHF": modern},
            "design": {"label": "Design", "unitCHF": design},
        },
    }


def _wallbox(label: str, minutes: float, socket: float, standard: float, smart: float) -> Dict[str, Any]:
    return {
        "label": label,
        "minutesPerUnit": minutes,
        "materials": {
            "socket": {"label": "Industrial socket", "unitCHF": socket},
            "standard": {"label": "Standard wallbox", "unitCHF": standard},
            "smart": {"label": "Smart wallbox", "unitCHF": smart},
        },
        "distanceBandCHF": dict(_WALLBOX_BANDS),
    }


_DEFAULT_CATEGORY_CATALOG: Dict[str, Dict[str, Any]] = {
    "lighting": {
        "label": "Lighting",
        "options": {
            "wall":      _styled("Wall light",      45, 60, 120, 260),
            "ceiling":   _styled("Ceiling light",   50, 70, 140, 300),
            "floor":     _styled("Floor light",     40, 80, 150, 320),
            "led_strip": _styled("LED strip",       60, 45, 90, 180),
            "track":     _styled("Track system",    75, 120, 220, 420),
            "bollard":   _styled("Garden bollard",  90, 140, 240, 450),
        },
        "contextAddons": {
            "indoor":  {"label": "Indoor",  "extraMinutes": 0,  "extraCHF": 0},
            "outdoor": {"label": "Outdoor", "extraMinutes": 20, "extraCHF": 35},
        },
    },
    "sockets_switches": {
        "label": "Sockets/Switches",
        "options": {
            "schuko_socket": _base("Socket outlet", 30, 25),
            "switch":        _base("Switch",        25, 20),
            "dimmer":        _base("Dimmer",        35, 65),
        },
    },
    "wallbox": {
        "label": "Wallbox",
        "options": {
            "11": _wallbox("11 kW", 240, 450, 900, 1400),
            "22": _wallbox("22 kW", 300, 550, 1150, 1650),
        },
    },
    "telephony": {
        "label": "Telephony/Internet",
        "options": {
            "rj45_outlet":  _base("RJ45 outlet",  45, 40),
            "access_point": _base("Access point", 60, 180),
        },
    },
    "surveillance": {
        "label": "Video surveillance",
        "options": {
            "camera":         _base("Camera",         90, 320),
            "video_intercom": _base("Video intercom", 120, 450),
        },
    },
    "home_automation": {
        "label": "Home automation",
        "options": {
            "relay_module":   _base("Relay module",   40, 85),
            "automation_hub": _base("Automation hub", 90, 260),
        },
    },
    "repairs": {
        "label": "Repairs",
        "options": {
            "short_circuit": _base("Short-circuit fault", 90, 30),
            "line_restore":  _base("Line restoration",    60, 20),
        },
    },
    "other": {
        "label": "Other",
        "options": {
            "custom": _base("Custom work", 60, 0),
        },
    },
}


# ---------------------------------------------------------------------------
# Number parsing
# ---------------------------------------------------------------------------

_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_TRUE_STRINGS = {"true", "1", "yes", "y", "on"}
_FALSE_STRINGS = {"false", "0", "no", "n", "off"}


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Parse a number that may arrive as a locale-formatted string.

    "12,5" → 12.5, "  7.7 % " → 7.7, "" → default, None → default.
    Booleans, NaN, infinities and integers too large for a float are
    treated as unparsable.
    """
    if value is None or isinstance(value, bool):
        return float(default)
    if isinstance(value, (int, float)):
        try:
            result = float(value)
        except OverflowError:
            return float(default)
    else:
        text = str(value).strip().replace(",", ".")
        try:
            result = float(text)
        except ValueError:
            match = _LEADING_NUMBER.match(text)
            if not match:
                return float(default)
            result = float(match.group(0))
    if math.isnan(result) or math.isinf(result):
        return float(default)
    return result


def _money(value: Any, default: float) -> float:
    """Non-negative amount (CHF, minutes, kW)."""
    return max(0.0, parse_number(value, default))


def _pct(value: Any, default: float) -> float:
    return min(100.0, max(0.0, parse_number(value, default)))


def _flag(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return default


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, Mapping) else {}


def _frozen(mapping: Dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(mapping)


def parse_sizes(value: Any, default: Iterable[float] = _DEFAULT_PV_SIZES_KW) -> Tuple[float, ...]:
    """
    Parse the list of installable PV sizes.

    Accepts a list of numbers/strings or a single string separated by commas,
    semicolons or whitespace ("8; 10; 12,5" is ambiguous, so decimal commas are
    not supported inside a string list).  Result is sorted and deduplicated.
    """
    if isinstance(value, str):
        parts: Iterable[Any] = [p for p in re.split(r"[,;\s]+", value) if p]
    elif isinstance(value, (list, tuple)):
        parts = value
    else:
        parts = []

    sizes = set()
    for part in parts:
        kw = parse_number(part, 0.0)
        if kw > 0:
            sizes.add(kw)
    if not sizes:
        return tuple(default)
    return tuple(sorted(sizes))


# ---------------------------------------------------------------------------
# Typed catalog sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rates:
    hourly_worker: float
    hourly_apprentice: float
    travel_rate_per_minute: float
    callout_fee: float


@dataclass(frozen=True)
class TravelSettings:
    one_way_default_minutes: float
    auto_apply_callout: bool
    billing_mode: str


@dataclass(frozen=True)
class Curve:
    """Per-kW price curve; ``enabled=False`` means flat ``system_price_per_kw``."""
    min_kw: float
    price_at_min: float
    max_kw: float
    price_at_max: float
    enabled: bool = True
    system_price_per_kw: float = _DEFAULT_SYSTEM_PRICE_PER_KW


@dataclass(frozen=True)
class Incentives:
    federal_per_kw: float
    cantonal_per_kw: float
    municipal_per_kw: float

    @property
    def total_per_kw(self) -> float:
        return self.federal_per_kw + self.cantonal_per_kw + self.municipal_per_kw


@dataclass(frozen=True)
class SelfConsumption:
    with_heat_pump_pct: float
    without_heat_pump_pct: float


@dataclass(frozen=True)
class EnergyPrices:
    buy_per_kwh: float
    export_per_kwh: float


@dataclass(frozen=True)
class Environment:
    co2_grid_kg_per_kwh: float
    co2_per_tree_kg_per_year: float


@dataclass(frozen=True)
class WallboxPricing:
    minutes_per_unit: float
    base_by_type: Mapping[str, float]
    power_addon_by_kw: Mapping[str, float]
    install_surcharge_by_band: Mapping[str, float]


@dataclass(frozen=True)
class MaterialTier:
    label: str
    unit_chf: float


@dataclass(frozen=True)
class ContextAddon:
    label: str
    extra_minutes: float
    extra_chf: float


@dataclass(frozen=True)
class CatalogOption:
    label: str
    minutes_per_unit: float
    materials: Mapping[str, MaterialTier] = field(default_factory=lambda: _frozen({}))
    distance_band_chf: Mapping[str, float] = field(default_factory=lambda: _frozen({}))


@dataclass(frozen=True)
class CategoryEntry:
    key: str
    label: str
    options: Mapping[str, CatalogOption]
    context_addons: Mapping[str, ContextAddon] = field(default_factory=lambda: _frozen({}))


# ---------------------------------------------------------------------------
# Category table merge
# ---------------------------------------------------------------------------

def _merge_tier(key: str, default: Mapping[str, Any], raw: Any) -> MaterialTier:
    # A bare number is shorthand for {"unitCHF": number}
    if not isinstance(raw, Mapping):
        raw = {"unitCHF": raw} if raw is not None else {}
    label = raw.get("label") or default.get("label") or key
    return MaterialTier(label=str(label), unit_chf=_money(raw.get("unitCHF"), parse_number(default.get("unitCHF"), 0.0)))


def _merge_option(key: str, default: Mapping[str, Any], raw: Any) -> CatalogOption:
    raw = raw if isinstance(raw, Mapping) else {}
    default_materials = _section(default, "materials")
    raw_materials = _section(raw, "materials")
    materials = {
        tier: _merge_tier(tier, _section(default_materials, tier), raw_materials.get(tier))
        for tier in list(default_materials) + [t for t in raw_materials if t not in default_materials]
    }

    default_bands = _section(default, "distanceBandCHF")
    raw_bands = _section(raw, "distanceBandCHF")
    bands = {
        band: _money(raw_bands.get(band), parse_number(default_bands.get(band), 0.0))
        for band in list(default_bands) + [b for b in raw_bands if b not in default_bands]
    }

    label = raw.get("label") or default.get("label") or key
    return CatalogOption(
        label=str(label),
        minutes_per_unit=_money(raw.get("minutesPerUnit"), parse_number(default.get("minutesPerUnit"), 0.0)),
        materials=_frozen(materials),
        distance_band_chf=_frozen(bands),
    )


def _merge_category(key: str, default: Mapping[str, Any], raw: Any) -> CategoryEntry:
    raw = raw if isinstance(raw, Mapping) else {}
    default_options = _section(default, "options")
    raw_options = _section(raw, "options")
    options = {
        opt: _merge_option(opt, _section(default_options, opt), raw_options.get(opt))
        for opt in list(default_options) + [o for o in raw_options if o not in default_options]
    }

    default_addons = _section(default, "contextAddons")
    raw_addons = _section(raw, "contextAddons")
    addons = {}
    for ctx in list(default_addons) + [c for c in raw_addons if c not in default_addons]:
        d = _section(default_addons, ctx)
        r = _section(raw_addons, ctx)
        addons[ctx] = ContextAddon(
            label=str(r.get("label") or d.get("label") or ctx),
            extra_minutes=_money(r.get("extraMinutes"), parse_number(d.get("extraMinutes"), 0.0)),
            extra_chf=_money(r.get("extraCHF"), parse_number(d.get("extraCHF"), 0.0)),
        )

    return CategoryEntry(
        key=key,
        label=str(raw.get("label") or default.get("label") or key),
        options=_frozen(options),
        context_addons=_frozen(addons),
    )


def _merge_amounts(default: Mapping[str, float], raw: Mapping[str, Any]) -> Mapping[str, float]:
    merged = {k: _money(raw.get(k), v) for k, v in default.items()}
    for k, v in raw.items():
        if k not in merged:
            merged[str(k)] = _money(v, 0.0)
    return _frozen(merged)


# ---------------------------------------------------------------------------
# CatalogRegistry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CatalogRegistry:
    """
    Immutable tariff snapshot for one quote session.

    Build it with ``CatalogRegistry.resolve(raw_config)``; never mutate it.
    If tariffs change, resolve a new registry.
    """
    rates: Rates
    travel: TravelSettings
    curve: Curve
    incentives: Incentives
    self_consumption: SelfConsumption
    energy_prices: EnergyPrices
    environment: Environment
    wallbox_pricing: WallboxPricing
    category_catalog: Mapping[str, CategoryEntry]
    vat_percent: float = _DEFAULT_VAT_PERCENT
    maintenance_price_per_panel: float = _DEFAULT_MAINTENANCE_PER_PANEL
    pv_sizes_kw: Tuple[float, ...] = _DEFAULT_PV_SIZES_KW

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def resolve(cls, raw_config: Optional[Mapping[str, Any]] = None) -> "CatalogRegistry":
        """
        Resolve a raw, possibly partial configuration into a complete registry.

        Args:
            raw_config: JSON-shaped mapping (camelCase keys).  ``None`` or a
                        non-mapping yields the built-in defaults.

        Returns:
            CatalogRegistry with every field populated.  Never raises.
        """
        raw: Mapping[str, Any] = raw_config if isinstance(raw_config, Mapping) else {}

        r = _section(raw, "rates")
        rates = Rates(
            hourly_worker=_money(r.get("hourlyWorker"), _DEFAULT_HOURLY_WORKER),
            hourly_apprentice=_money(r.get("hourlyApprentice"), _DEFAULT_HOURLY_APPRENTICE),
            travel_rate_per_minute=_money(r.get("travelRatePerMinute"), _DEFAULT_TRAVEL_RATE_PER_MINUTE),
            callout_fee=_money(r.get("calloutFee"), _DEFAULT_CALLOUT_FEE),
        )

        t = _section(raw, "travel")
        mode = str(t.get("billingMode") or _DEFAULT_BILLING_MODE).strip().lower()
        if mode not in BILLING_MODES:
            logger.debug("unknown billing mode %r, using %s", mode, _DEFAULT_BILLING_MODE)
            mode = _DEFAULT_BILLING_MODE
        travel = TravelSettings(
            one_way_default_minutes=_money(t.get("oneWayDefaultMinutes"), _DEFAULT_ONE_WAY_MINUTES),
            auto_apply_callout=_flag(t.get("autoApplyCallout"), _DEFAULT_AUTO_APPLY_CALLOUT),
            billing_mode=mode,
        )

        c = _section(raw, "curve")
        min_kw = _money(c.get("minKW"), _DEFAULT_CURVE["minKW"])
        max_kw = _money(c.get("maxKW"), _DEFAULT_CURVE["maxKW"])
        price_min = _money(c.get("priceAtMin"), _DEFAULT_CURVE["priceAtMin"])
        price_max = _money(c.get("priceAtMax"), _DEFAULT_CURVE["priceAtMax"])
        if min_kw > max_kw:
            logger.debug("curve anchors inverted (%s > %s), swapping", min_kw, max_kw)
            min_kw, max_kw = max_kw, min_kw
            price_min, price_max = price_max, price_min
        curve = Curve(
            min_kw=min_kw,
            price_at_min=price_min,
            max_kw=max_kw,
            price_at_max=price_max,
            enabled=_flag(c.get("enabled"), True),
            system_price_per_kw=_money(raw.get("systemPricePerKWCHF"), _DEFAULT_SYSTEM_PRICE_PER_KW),
        )

        i = _section(raw, "incentives")
        incentives = Incentives(
            federal_per_kw=_money(i.get("federalCHFPerKW"), _DEFAULT_INCENTIVES["federalCHFPerKW"]),
            cantonal_per_kw=_money(i.get("cantonalCHFPerKW"), _DEFAULT_INCENTIVES["cantonalCHFPerKW"]),
            municipal_per_kw=_money(i.get("municipalCHFPerKW"), _DEFAULT_INCENTIVES["municipalCHFPerKW"]),
        )

        s = _section(raw, "selfConsumption")
        self_consumption = SelfConsumption(
            with_heat_pump_pct=_pct(s.get("withHeatPumpPct"), _DEFAULT_SELF_CONSUMPTION["withHeatPumpPct"]),
            without_heat_pump_pct=_pct(s.get("withoutHeatPumpPct"), _DEFAULT_SELF_CONSUMPTION["withoutHeatPumpPct"]),
        )

        e = _section(raw, "energyPrices")
        energy_prices = EnergyPrices(
            buy_per_kwh=_money(e.get("buyCHFPerKWh"), _DEFAULT_ENERGY_PRICES["buyCHFPerKWh"]),
            export_per_kwh=_money(e.get("exportCHFPerKWh"), _DEFAULT_ENERGY_PRICES["exportCHFPerKWh"]),
        )

        env = _section(raw, "environment")
        environment = Environment(
            co2_grid_kg_per_kwh=_money(env.get("co2GridKgPerKWh"), _DEFAULT_ENVIRONMENT["co2GridKgPerKWh"]),
            co2_per_tree_kg_per_year=_money(env.get("co2PerTreeKgPerYear"), _DEFAULT_ENVIRONMENT["co2PerTreeKgPerYear"]),
        )

        w = _section(raw, "wallboxPricing")
        wallbox_pricing = WallboxPricing(
            minutes_per_unit=_money(w.get("minutesPerUnit"), _DEFAULT_WALLBOX_PRICING["minutesPerUnit"]),
            base_by_type=_merge_amounts(_DEFAULT_WALLBOX_PRICING["baseByType"], _section(w, "baseByType")),
            power_addon_by_kw=_merge_amounts(_DEFAULT_WALLBOX_PRICING["powerAddonByKW"], _section(w, "powerAddonByKW")),
            install_surcharge_by_band=_merge_amounts(
                _DEFAULT_WALLBOX_PRICING["installSurchargeByBand"], _section(w, "installSurchargeByBand")
            ),
        )

        raw_categories = _section(raw, "categoryCatalog")
        for unknown in [k for k in raw_categories if k not in _DEFAULT_CATEGORY_CATALOG]:
            logger.debug("ignoring unknown category %r in catalog", unknown)
        categories = {
            key: _merge_category(key, default, raw_categories.get(key))
            for key, default in _DEFAULT_CATEGORY_CATALOG.items()
        }

        return cls(
            rates=rates,
            travel=travel,
            curve=curve,
            incentives=incentives,
            self_consumption=self_consumption,
            energy_prices=energy_prices,
            environment=environment,
            wallbox_pricing=wallbox_pricing,
            category_catalog=_frozen(categories),
            vat_percent=_pct(raw.get("vatPercent"), _DEFAULT_VAT_PERCENT),
            maintenance_price_per_panel=_money(
                raw.get("maintenancePricePerPanelCHF"), _DEFAULT_MAINTENANCE_PER_PANEL
            ),
            pv_sizes_kw=parse_sizes(raw.get("pvSizesKW")),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def category(self, key: str) -> Optional[CategoryEntry]:
        return self.category_catalog.get(key)

    def option(self, category: str, option_key: str) -> Optional[CatalogOption]:
        entry = self.category_catalog.get(category)
        if entry is None:
            return None
        return entry.options.get(option_key)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot in the same camelCase shape ``resolve`` accepts."""
        categories: Dict[str, Any] = {}
        for key, entry in self.category_catalog.items():
            options = {}
            for opt_key, opt in entry.options.items():
                options[opt_key] = {
                    "label": opt.label,
                    "minutesPerUnit": opt.minutes_per_unit,
                    "materials": {
                        tier: {"label": m.label, "unitCHF": m.unit_chf} for tier, m in opt.materials.items()
                    },
                    "distanceBandCHF": dict(opt.distance_band_chf),
                }
            categories[key] = {
                "label": entry.label,
                "options": options,
                "contextAddons": {
                    ctx: {"label": a.label, "extraMinutes": a.extra_minutes, "extraCHF": a.extra_chf}
                    for ctx, a in entry.context_addons.items()
                },
            }

        return {
            "rates": {
                "hourlyWorker": self.rates.hourly_worker,
                "hourlyApprentice": self.rates.hourly_apprentice,
                "travelRatePerMinute": self.rates.travel_rate_per_minute,
                "calloutFee": self.rates.callout_fee,
            },
            "travel": {
                "oneWayDefaultMinutes": self.travel.one_way_default_minutes,
                "autoApplyCallout": self.travel.auto_apply_callout,
                "billingMode": self.travel.billing_mode,
            },
            "curve": {
                "enabled": self.curve.enabled,
                "minKW": self.curve.min_kw,
                "priceAtMin": self.curve.price_at_min,
                "maxKW": self.curve.max_kw,
                "priceAtMax": self.curve.price_at_max,
            },
            "systemPricePerKWCHF": self.curve.system_price_per_kw,
            "incentives": {
                "federalCHFPerKW": self.incentives.federal_per_kw,
                "cantonalCHFPerKW": self.incentives.cantonal_per_kw,
                "municipalCHFPerKW": self.incentives.municipal_per_kw,
            },
            "selfConsumption": {
                "withHeatPumpPct": self.self_consumption.with_heat_pump_pct,
                "withoutHeatPumpPct": self.self_consumption.without_heat_pump_pct,
            },
            "energyPrices": {
                "buyCHFPerKWh": self.energy_prices.buy_per_kwh,
                "exportCHFPerKWh": self.energy_prices.export_per_kwh,
            },
            "environment": {
                "co2GridKgPerKWh": self.environment.co2_grid_kg_per_kwh,
                "co2PerTreeKgPerYear": self.environment.co2_per_tree_kg_per_year,
            },
            "wallboxPricing": {
                "minutesPerUnit": self.wallbox_pricing.minutes_per_unit,
                "baseByType": dict(self.wallbox_pricing.base_by_type),
                "powerAddonByKW": dict(self.wallbox_pricing.power_addon_by_kw),
                "installSurchargeByBand": dict(self.wallbox_pricing.install_surcharge_by_band),
            },
            "categoryCatalog": categories,
            "vatPercent": self.vat_percent,
            "maintenancePricePerPanelCHF": self.maintenance_price_per_panel,
            "pvSizesKW": list(self.pv_sizes_kw),
        }
