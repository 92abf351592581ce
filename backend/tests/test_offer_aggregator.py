"""
test_offer_aggregator.py — Unit tests for OfferAggregator and presentation rounding.

Tests cover:
  - Manual offer rows (qty × unit price), discount, tax
  - Service offer: priced line items + travel + call-out + VAT
  - VAT additivity without intermediate rounding
  - Installation offers: incentives after VAT, floored at zero
  - Flat-rate maintenance offers
  - Presentation rounding (half-up cents, 5-Rappen steps) and CHF formatting
"""

import math
from decimal import Decimal

import pytest

from fieldquote.services.catalog_registry import CatalogRegistry
from fieldquote.services.installation_economics import quote_installation
from fieldquote.services.line_item_pricer import LineItemPricer
from fieldquote.services.money import RAPPEN, format_chf, round_chf
from fieldquote.services.offer_aggregator import OfferAggregator, compute_offer_totals, item_total


# ===========================================================================
# Class 1: Manual offer rows
# ===========================================================================

class TestManualOffer:

    def test_item_total(self):
        assert item_total(0, 100) == 0.0
        assert item_total(3, 50) == 150.0
        assert item_total(2, 12.5) == 25.0

    def test_item_total_negative_qty_is_credit(self):
        assert item_total(-2, 10) == -20.0

    def test_subtotal_discount_tax_total(self):
        rows = [{"qty": 2, "unitPrice": 100}, {"qty": 1, "unitPrice": 50}]
        t = compute_offer_totals(rows, tax_percent=10, discount_pct=5)
        assert t.subtotal == 250.0
        assert t.discount == 12.5
        assert t.vat == 23.75
        assert t.total == 261.25

    def test_empty_rows(self):
        t = compute_offer_totals([], tax_percent=5, discount_pct=5)
        assert (t.subtotal, t.discount, t.vat, t.total) == (0.0, 0.0, 0.0, 0.0)

    def test_zero_discount(self):
        t = compute_offer_totals([{"qty": 1, "unit_price": 100}], tax_percent=8)
        assert t.discount == 0.0
        assert t.vat == 8.0
        assert t.total == 108.0

    def test_zero_tax(self):
        t = compute_offer_totals([{"qty": 2, "unitPrice": 50}], tax_percent=0, discount_pct=10)
        assert t.discount == 10.0
        assert t.vat == 0.0
        assert t.total == 90.0

    def test_string_inputs(self):
        t = compute_offer_totals([{"qty": "2", "unitPrice": "12,50"}], tax_percent="10", discount_pct="")
        assert t.subtotal == 25.0
        assert t.total == 27.5

    def test_discount_clamped(self):
        t = compute_offer_totals([{"qty": 1, "unitPrice": 100}], tax_percent=10, discount_pct=150)
        assert t.discount_pct == 100.0
        assert t.total == 0.0


# ===========================================================================
# Class 2: Service offers
# ===========================================================================

class TestServiceOffer:

    def test_items_travel_callout_vat(self, pricer, travel_policy, aggregator):
        """
        Lighting ×3 = 360, switch ×2 = 90 → 450; travel 30 min × 2 = 60;
        call-out 50 → 560; VAT 10% = 56 → 616.
        """
        items = [
            pricer.price("lighting", {"light_type": "wall", "environment": "outdoor", "style": "simple"}, 3),
            pricer.price("sockets_switches", {"point_type": "switch"}, 2),
        ]
        travel = travel_policy.price(None, "metered", apply_callout=True)
        t = aggregator.aggregate(items, 10, travel=travel)
        assert t.items_subtotal == 450.0
        assert t.travel == 60.0
        assert t.callout == 50.0
        assert t.subtotal == 560.0
        assert t.vat == 56.0
        assert t.net_before_incentives == 616.0
        assert t.incentives == 0.0
        assert t.total == 616.0

    def test_no_travel(self, pricer, aggregator):
        items = [pricer.price("sockets_switches", {"point_type": "switch"}, 1)]
        t = aggregator.aggregate(items, 0)
        assert t.travel == 0.0
        assert t.callout == 0.0
        assert t.total == 45.0

    @pytest.mark.parametrize("vat_percent", [0, 2.6, 7.7, 8.1, 19.0])
    def test_vat_additivity(self, pricer, travel_policy, aggregator, vat_percent):
        items = [
            pricer.price("wallbox", {"power": "11", "connection_type": "smart", "distance": "10-25"}, 1),
            pricer.price("other", {"description": "Fault finding"}, "1,75"),
        ]
        t = aggregator.aggregate(items, vat_percent, travel=travel_policy.price(37.3, apply_callout=True))
        assert t.total == t.subtotal + t.subtotal * vat_percent / 100

    def test_idempotent(self, pricer, travel_policy, aggregator):
        items = [pricer.price("sockets_switches", {"point_type": "switch"}, 7)]
        travel = travel_policy.price(23)
        assert aggregator.aggregate(items, 8.1, travel, 3) == aggregator.aggregate(items, 8.1, travel, 3)

    def test_vat_defaults_to_catalog_rate(self, pricer, round_catalog, aggregator):
        items = [pricer.price("sockets_switches", {"point_type": "switch"}, 1)]
        assert aggregator.aggregate(items, catalog=round_catalog).vat == 4.5
        assert aggregator.aggregate(items, 0, catalog=round_catalog).vat == 0.0
        assert aggregator.aggregate(items).vat == 0.0

    def test_vat_on_discounted_subtotal(self, aggregator):
        t = aggregator.aggregate([{"qty": 1, "unitPrice": 1000}], 10, discount_pct=10)
        assert t.discount == 100.0
        assert t.vat == 90.0
        assert t.total == 990.0


# ===========================================================================
# Class 3: Installation offers
# ===========================================================================

class TestInstallationOffer:

    def test_incentives_after_vat(self, aggregator):
        t = aggregator.aggregate([{"qty": 1, "unitPrice": 1000}], 10, incentives=300)
        assert t.net_before_incentives == 1100.0
        assert t.total == 800.0

    def test_incentives_floor(self, aggregator):
        t = aggregator.aggregate([{"qty": 1, "unitPrice": 1000}], 10, incentives=5000)
        assert t.total == 0.0

    def test_from_economics(self, default_catalog, aggregator):
        quote = quote_installation(10, default_catalog, discount_pct=5, heat_pump=True)
        b = quote.economics
        t = aggregator.aggregate_installation(b)
        assert t.subtotal == b.subtotal
        assert t.discount == b.discount
        assert t.vat == b.vat
        assert t.net_before_incentives == b.total_before_incentives
        assert t.incentives == 5500.0
        assert t.total == b.total_net
        assert t.total >= 0.0


# ===========================================================================
# Class 4: Maintenance
# ===========================================================================

class TestMaintenance:

    def test_flat_rate(self, default_catalog, aggregator):
        m = aggregator.maintenance_offer("20", default_catalog)
        assert m.panels == 20.0
        assert m.net == 700.0
        assert m.vat == pytest.approx(56.7)
        assert m.gross == pytest.approx(756.7)

    def test_negative_panels(self, default_catalog, aggregator):
        m = aggregator.maintenance_offer(-4, default_catalog)
        assert m.net == 0.0
        assert m.gross == 0.0


# ===========================================================================
# Class 5: Presentation rounding
# ===========================================================================

class TestPresentation:

    def test_round_huge_and_non_finite(self):
        assert round_chf(1e308) == 1e308
        assert round_chf(-1.5e300, RAPPEN) == -1.5e300
        assert math.isinf(round_chf(float("inf")))
        assert math.isnan(round_chf(float("nan")))
        assert format_chf(float("inf")) == "CHF inf"

    @pytest.mark.parametrize("qty", [3, 5])
    def test_display_with_extreme_rate(self, qty):
        """A 1e308 CHF/h rate stays displayable, even when the total overflows."""
        pricer = LineItemPricer(CatalogRegistry.resolve({"rates": {"hourlyWorker": "1e308"}}))
        items = [pricer.price("sockets_switches", {"point_type": "switch"}, qty)]
        t = OfferAggregator().aggregate(items, 8.1)
        shown = t.to_display()
        if math.isfinite(t.total):
            assert shown["total"] == t.total
        else:
            assert math.isinf(shown["total"])

    def test_round_half_up(self):
        assert round_chf(2.675) == 2.68
        assert round_chf(1.005) == 1.01
        assert round_chf(-1.005) == -1.01

    def test_round_to_rappen(self):
        assert round_chf(12.34, RAPPEN) == 12.35
        assert round_chf(12.32, RAPPEN) == 12.3
        assert round_chf(12.325, Decimal("0.05")) == 12.35

    def test_format(self):
        assert format_chf(1234567.891) == "CHF 1'234'567.89"
        assert format_chf(0) == "CHF 0.00"

    def test_display_rounds_only_at_the_end(self):
        t = compute_offer_totals([{"qty": 1, "unitPrice": 99.99}], tax_percent=7.7, discount_pct=2.5)
        shown = t.to_display()
        assert shown["discount"] == 2.5
        assert shown["vat"] == 7.51
        assert shown["total"] == 105.0
        assert shown["vat_percent"] == 7.7
        # full precision retained on the value object
        assert t.total == pytest.approx(104.99699925)
