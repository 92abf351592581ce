"""
conftest.py — Shared pytest fixtures for the quote engine test suite.

The engine is pure, so no database, network or clock fixtures are needed.
The API tests drive the FastAPI app in-process through TestClient.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``fieldquote.*`` imports resolve correctly regardless of where pytest is
    invoked.
"""

import sys
import os
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any fieldquote imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def default_catalog():
    """
    CatalogRegistry resolved from an empty configuration (all defaults).

    Defaults:
      worker 95 CHF/h, apprentice 45 CHF/h, travel 1.5 CHF/min, call-out 60,
      one-way 20 min, auto call-out on, VAT 8.1%, curve 8 kW@2000 → 200 kW@1000.
    """
    from fieldquote.services.catalog_registry import CatalogRegistry
    return CatalogRegistry.resolve({})


@pytest.fixture(scope="session")
def round_catalog_config():
    """
    Raw configuration with round numbers for exact assertions.

    Rates: worker 60 CHF/h, apprentice 30 CHF/h, travel 2 CHF/min, call-out 50.
    Travel: one-way 15 min, auto call-out off, metered.
    VAT 10%.  Lighting wall light: 30 min, simple tier 40 CHF, outdoor +30 min / +20 CHF.
    Wallbox 11 kW: 120 min, smart 1000 CHF, band 10-25 → 300 CHF.
    """
    return {
        "rates": {"hourlyWorker": 60, "hourlyApprentice": "30", "travelRatePerMinute": "2,0", "calloutFee": 50},
        "travel": {"oneWayDefaultMinutes": 15, "autoApplyCallout": False, "billingMode": "metered"},
        "vatPercent": 10,
        "categoryCatalog": {
            "lighting": {
                "options": {
                    "wall": {"minutesPerUnit": 30, "materials": {"simple": {"unitCHF": 40}}},
                },
                "contextAddons": {"outdoor": {"extraMinutes": 30, "extraCHF": 20}},
            },
            "sockets_switches": {
                "options": {"switch": {"minutesPerUnit": 30, "materials": {"base": {"unitCHF": 15}}}},
            },
            "wallbox": {
                "options": {
                    "11": {
                        "minutesPerUnit": 120,
                        "materials": {"smart": {"unitCHF": 1000}},
                        "distanceBandCHF": {"10-25": 300},
                    },
                },
            },
            "other": {
                "options": {"custom": {"label": "Site visit", "minutesPerUnit": 60, "materials": {"base": 10}}},
            },
        },
    }


@pytest.fixture(scope="session")
def round_catalog(round_catalog_config):
    from fieldquote.services.catalog_registry import CatalogRegistry
    return CatalogRegistry.resolve(round_catalog_config)


@pytest.fixture(scope="session")
def pricer(round_catalog):
    from fieldquote.services.line_item_pricer import LineItemPricer
    return LineItemPricer(round_catalog)


@pytest.fixture(scope="session")
def travel_policy(round_catalog):
    from fieldquote.services.travel_policy import TravelAndCalloutPolicy
    return TravelAndCalloutPolicy(round_catalog)


@pytest.fixture(scope="session")
def aggregator():
    from fieldquote.services.offer_aggregator import OfferAggregator
    return OfferAggregator()


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def client():
    """TestClient over the full app (middleware and routers included)."""
    from fastapi.testclient import TestClient
    from fieldquote.main import app
    return TestClient(app)
