"""
test_api.py — HTTP surface tests through FastAPI's TestClient.

Tests cover:
  - /health and request-tracing headers
  - Catalog resolve/defaults/questionnaire
  - Line item pricing, including 422 for incomplete answers
  - Travel, service offer, manual offer
  - Size suggestions and installation offers
  - Maintenance and wallbox configurator
"""

import re


_LIGHTING = {"light_type": "wall", "environment": "indoor", "style": "simple"}


# ===========================================================================
# Class 1: Service plumbing
# ===========================================================================

class TestHealthAndHeaders:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "active"
        assert body["currency"] == "CHF"

    def test_request_id_generated(self, client):
        resp = client.get("/health")
        assert resp.headers["X-Request-ID"]
        assert float(resp.headers["X-Process-Time"]) >= 0.0

    def test_request_id_propagated(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert resp.headers["X-Request-ID"] == "abc-123"


# ===========================================================================
# Class 2: Catalog
# ===========================================================================

class TestCatalogRoutes:

    def test_defaults(self, client):
        body = client.get("/api/catalog/defaults").json()
        assert body["vatPercent"] == 8.1
        assert "lighting" in body["categoryCatalog"]

    def test_resolve_merges_partial(self, client):
        resp = client.post("/api/catalog/resolve", json={"catalog": {"rates": {"hourlyWorker": "80,5"}}})
        assert resp.status_code == 200
        body = resp.json()
        assert body["rates"]["hourlyWorker"] == 80.5
        assert body["rates"]["calloutFee"] == 60.0

    def test_resolve_oversized_integer(self, client):
        resp = client.post("/api/catalog/resolve", json={"catalog": {"vatPercent": 10 ** 400}})
        assert resp.status_code == 200
        assert resp.json()["vatPercent"] == 8.1

    def test_questionnaire(self, client):
        body = client.get("/api/catalog/questionnaire").json()
        assert [c["key"] for c in body["categories"]][:3] == ["lighting", "sockets_switches", "wallbox"]


# ===========================================================================
# Class 3: Service quotes
# ===========================================================================

class TestServiceQuotes:

    def test_line_item(self, client, round_catalog_config):
        resp = client.post("/api/quotes/line-item", json={
            "catalog": round_catalog_config,
            "category": "lighting",
            "answers": dict(_LIGHTING, environment="outdoor"),
            "quantity": "3",
        })
        assert resp.status_code == 200
        item = resp.json()["item"]
        assert item["subtotal"] == 360.0
        assert item["description"] == "Lighting · Wall light · Outdoor · Simple"

    def test_line_item_incomplete(self, client):
        resp = client.post("/api/quotes/line-item", json={
            "category": "lighting",
            "answers": {"light_type": "wall"},
        })
        assert resp.status_code == 422
        detail = resp.json()["detail"]
        assert detail["missing"] == ["environment", "style", "quantity"]

    def test_line_item_unknown_category(self, client):
        resp = client.post("/api/quotes/line-item", json={"category": "plumbing", "answers": {}})
        assert resp.status_code == 422
        assert "Unknown category" in resp.json()["detail"]["message"]

    def test_line_item_schema_error(self, client):
        assert client.post("/api/quotes/line-item", json={"answers": {}}).status_code == 422

    def test_travel_tri_state(self, client):
        unanswered = client.post("/api/quotes/travel", json={}).json()
        unchecked = client.post("/api/quotes/travel", json={"apply_callout": False}).json()
        assert unanswered["callout_applied"] is True
        assert unchecked["callout_applied"] is False
        assert unanswered["travel_minutes"] == 40.0

    def test_service_offer(self, client, round_catalog_config):
        resp = client.post("/api/quotes/service-offer", json={
            "catalog": round_catalog_config,
            "items": [
                {"category": "lighting", "answers": dict(_LIGHTING, environment="outdoor"), "quantity": 3},
                {"category": "sockets_switches", "answers": {"point_type": "switch", "quantity": "2"}},
            ],
            "apply_callout": True,
        })
        assert resp.status_code == 200
        body = resp.json()
        assert re.fullmatch(r"SRV-\d{8}-[A-Z0-9]{6}", body["reference"])
        assert len(body["items"]) == 2
        assert body["totals"]["subtotal"] == 560.0
        assert body["totals"]["total"] == 616.0
        assert body["display"]["total"] == 616.0

    def test_service_offer_rejects_incomplete_item(self, client):
        resp = client.post("/api/quotes/service-offer", json={
            "items": [{"category": "wallbox", "answers": {"power": "11"}}],
        })
        assert resp.status_code == 422

    def test_manual_offer(self, client):
        resp = client.post("/api/quotes/manual-offer", json={
            "rows": [{"qty": 2, "unit_price": 100}, {"qty": 1, "unit_price": "50"}],
            "tax_percent": 10,
            "discount_pct": 5,
        })
        totals = resp.json()["totals"]
        assert totals["subtotal"] == 250.0
        assert totals["discount"] == 12.5
        assert totals["vat"] == 23.75
        assert totals["total"] == 261.25


# ===========================================================================
# Class 4: Installation, maintenance, wallbox
# ===========================================================================

class TestInstallationQuotes:

    def test_size_suggestions(self, client):
        body = client.post("/api/quotes/size-suggestions", json={"annual_kwh": "14000"}).json()
        assert body["options"] == [12.0, 16.0, 25.0]
        assert body["mid"] == 16.0

    def test_size_suggestions_from_cost_and_custom_sizes(self, client):
        body = client.post("/api/quotes/size-suggestions", json={
            "annual_cost": 2800,
            "catalog": {"energyPrices": {"buyCHFPerKWh": 0.25}},
            "sizes_kw": ["6", "9", "11,5", 15],
        }).json()
        # 2800 / 0.25 = 11200 kWh → 11.2 kW target; 11.5 is closest
        assert body["mid"] == 11.5

    def test_installation_defaults_to_mid_size(self, client):
        resp = client.post("/api/quotes/installation", json={"annual_kwh": 14000, "heat_pump": True})
        assert resp.status_code == 200
        body = resp.json()
        assert re.fullmatch(r"FV-\d+", body["reference"])
        assert body["sizes"] == [12.0, 16.0, 25.0]
        assert body["quote"]["economics"]["kw"] == 16.0
        assert body["totals"]["incentives"] == 16.0 * 550.0

    def test_installation_explicit_kw(self, client):
        body = client.post("/api/quotes/installation", json={
            "kw": "104",
            "catalog": {"incentives": {"federalCHFPerKW": 0, "cantonalCHFPerKW": 0, "municipalCHFPerKW": 0},
                        "vatPercent": 0},
        }).json()
        assert body["sizes"] is None
        assert body["quote"]["economics"]["unit_price"] == 1500.0
        assert body["totals"]["total"] == 104 * 1500.0

    def test_installation_payback_none_without_benefit(self, client):
        body = client.post("/api/quotes/installation", json={
            "kw": 10,
            "catalog": {"energyPrices": {"buyCHFPerKWh": 0, "exportCHFPerKWh": 0}},
        }).json()
        assert body["quote"]["economics"]["payback_years"] is None

    def test_installation_reference_increases(self, client):
        first = client.post("/api/quotes/installation", json={"kw": 10}).json()["reference"]
        second = client.post("/api/quotes/installation", json={"kw": 10}).json()["reference"]
        assert int(second.split("-")[1]) > int(first.split("-")[1])

    def test_maintenance(self, client):
        body = client.post("/api/quotes/maintenance", json={"panels": "20"}).json()
        assert body["net"] == 700.0

    def test_wallbox(self, client):
        body = client.post("/api/quotes/wallbox", json={
            "power_kw": 22, "connection_type": "smart", "distance_band": "10-25",
        }).json()
        assert body["item"]["subtotal"] == 2350.0
