"""
travel_policy.py — Travel and call-out charges for a service job.

Billing modes:
  metered — travel = round-trip minutes × travel rate per minute;
            call-out fee added when the call-out applies
  fixed   — travel time is not invoiced; the call-out fee is charged once

Call-out is a tri-state answer.  ``apply_callout=None`` means the customer
never touched the checkbox, and the catalog's ``auto_apply_callout`` decides.
An explicit ``False`` always wins over the catalog default.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fieldquote.services.catalog_registry import BILLING_MODES, CatalogRegistry, parse_number

logger = logging.getLogger("fieldquote.engine")

BILLING_METERED = "metered"
BILLING_FIXED = "fixed"


@dataclass(frozen=True)
class TravelCharge:
    travel_minutes: float
    travel_chf: float
    callout_chf: float
    callout_applied: bool
    billing_mode: str

    @property
    def total(self) -> float:
        return self.travel_chf + self.callout_chf

    def to_dict(self) -> Dict[str, Any]:
        return {
            "travel_minutes": self.travel_minutes,
            "travel_chf": self.travel_chf,
            "callout_chf": self.callout_chf,
            "callout_applied": self.callout_applied,
            "billing_mode": self.billing_mode,
        }


NO_TRAVEL = TravelCharge(
    travel_minutes=0.0, travel_chf=0.0, callout_chf=0.0, callout_applied=False, billing_mode=BILLING_METERED
)


def callout_applies(apply_callout: Optional[bool], auto_apply_callout: bool) -> bool:
    """Explicit True/False wins; unanswered (None) falls back to the catalog default."""
    if apply_callout is None:
        return bool(auto_apply_callout)
    return bool(apply_callout)


class TravelAndCalloutPolicy:
    """Travel/call-out pricing bound to one catalog snapshot."""

    def __init__(self, catalog: CatalogRegistry):
        self.catalog = catalog

    def default_round_trip_minutes(self) -> float:
        return 2.0 * self.catalog.travel.one_way_default_minutes

    def round_trip_minutes(self, travel_minutes: Any) -> float:
        """None → 2 × one-way default; strings parsed; negatives clamp to 0."""
        default = self.default_round_trip_minutes()
        if travel_minutes is None:
            return default
        return max(0.0, parse_number(travel_minutes, default))

    def billing_mode(self, billing_mode: Optional[str]) -> str:
        mode = (billing_mode or "").strip().lower()
        if mode in BILLING_MODES:
            return mode
        if mode:
            logger.debug("unknown billing mode %r, using catalog default", billing_mode)
        return self.catalog.travel.billing_mode

    def price(
        self,
        travel_minutes_round_trip: Any = None,
        billing_mode: Optional[str] = None,
        apply_callout: Optional[bool] = None,
    ) -> TravelCharge:
        """
        Price travel and call-out for one job.

        Args:
            travel_minutes_round_trip: Round-trip minutes; None uses the catalog default.
            billing_mode:              "metered" | "fixed"; None uses the catalog default.
            apply_callout:             True / False / None (unanswered).

        Returns:
            TravelCharge with full-precision CHF amounts.
        """
        rates = self.catalog.rates
        mode = self.billing_mode(billing_mode)
        minutes = self.round_trip_minutes(travel_minutes_round_trip)

        if mode == BILLING_FIXED:
            return TravelCharge(
                travel_minutes=minutes,
                travel_chf=0.0,
                callout_chf=rates.callout_fee,
                callout_applied=True,
                billing_mode=mode,
            )

        applied = callout_applies(apply_callout, self.catalog.travel.auto_apply_callout)
        return TravelCharge(
            travel_minutes=minutes,
            travel_chf=minutes * rates.travel_rate_per_minute,
            callout_chf=rates.callout_fee if applied else 0.0,
            callout_applied=applied,
            billing_mode=mode,
        )


def price_travel(
    travel_minutes_round_trip: Any,
    billing_mode: Optional[str],
    catalog: CatalogRegistry,
    apply_callout: Optional[bool] = None,
) -> TravelCharge:
    """Functional form of ``TravelAndCalloutPolicy(catalog).price``."""
    return TravelAndCalloutPolicy(catalog).price(travel_minutes_round_trip, billing_mode, apply_callout)
