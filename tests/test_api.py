import dataclasses

import pytest
from fastapi.testclient import TestClient

from enrollment_pricing.api import state
from enrollment_pricing.api.main import app


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


@pytest.fixture
def square_configured(monkeypatch):
    """Give the shared checkout service gateway credentials for one test."""
    configured = dataclasses.replace(
        state.checkout_service.settings,
        square_location_id="LOC123",
        square_access_token="sandbox-token",
    )
    monkeypatch.setattr(state.checkout_service, "settings", configured)
    return configured


@pytest.fixture
def square_unconfigured(monkeypatch):
    unconfigured = dataclasses.replace(
        state.checkout_service.settings,
        square_location_id=None,
        square_access_token=None,
    )
    monkeypatch.setattr(state.checkout_service, "settings", unconfigured)
    return unconfigured


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_health_reports_configuration(client):
    body = client.get("/api/health").json()
    assert body["ok"] is True
    assert "timestamp" in body
    assert set(body["warnings"]) == {"missingAccessToken", "missingLocationId", "notProduction"}
    assert body["squareConfigured"] == (
        not body["warnings"]["missingAccessToken"] and not body["warnings"]["missingLocationId"]
    )


def test_programs_lists_levels_and_packages(client):
    body = client.get("/api/programs").json()
    assert body["defaultLevel"] == "level2"
    assert [(l["id"], l["baseCents"]) for l in body["levels"]] == [
        ("level1", 8000), ("level2", 10000), ("level3", 12000),
    ]
    assert body["levels"][1]["name"] == "Level 2 - Intermediate"
    assert [(p["sessions"], p["discountPct"], p["expiryDays"]) for p in body["packages"]] == [
        (8, 0, 30), (16, 10, 60), (24, 20, 90),
    ]


def test_quote(client):
    response = client.post("/api/quote", json={"level": "level2", "sessions": 24, "promoCode": "welcome10"})
    assert response.status_code == 200
    body = response.json()
    assert body["totalCents"] == 7200
    assert body["currency"] == "USD"
    assert body["expiryDays"] == 90
    assert body["breakdown"] == {
        "baseCents": 10000,
        "packageDiscountCents": 2000,
        "timeAdjCents": 0,
        "promoCents": 800,
    }
    assert body["formattedTotal"] == "$72.00"
    assert body["promoApplied"] == "WELCOME10"
    assert body["warnings"] == []


def test_quote_with_bad_promo_still_prices(client):
    body = client.post("/api/quote", json={"level": "level1", "sessions": 8, "promoCode": "BOGUSCODE"}).json()
    assert body["totalCents"] == 8000
    assert body["promoApplied"] is None
    assert body["warnings"]


def test_quote_negative_sessions_rejected(client):
    response = client.post("/api/quote", json={"level": "level1", "sessions": -8})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "sessions"


def test_quote_blank_level_rejected(client):
    response = client.post("/api/quote", json={"level": "  ", "sessions": 8})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "level"


def test_quote_missing_fields_rejected(client):
    response = client.post("/api/quote", json={"level": "level1"})
    assert response.status_code == 422


def test_payment_request(client, square_configured):
    response = client.post("/api/checkout/payment-request", json={
        "level": "level3", "sessions": 16, "promoCode": "WELCOME10", "sourceId": "cnon:ok",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["payment"]["amountMoney"] == {"amount": 9720, "currency": "USD"}
    assert body["payment"]["sourceId"] == "cnon:ok"
    assert body["payment"]["locationId"] == "LOC123"
    assert body["payment"]["idempotencyKey"]
    assert body["quote"]["totalCents"] == 9720


def test_payment_request_requires_source(client, square_configured):
    response = client.post("/api/checkout/payment-request", json={"level": "level3", "sessions": 16})
    assert response.status_code == 400
    assert "sourceId" in response.json()["detail"]


def test_payment_link(client, square_configured):
    response = client.post(
        "/api/checkout/payment-link",
        json={"level": "level1", "sessions": 16, "description": "Level 1 package"},
        headers={"origin": "http://localhost:5174"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["paymentLink"].startswith("http://localhost:5174/payment?orderId=")
    assert "amount=7200" in body["paymentLink"]
    assert body["redirectUrl"] == f"http://localhost:5174/payment-success?orderId={body['orderId']}"
    assert body["note"] == "Enrollment for Level 1 - Beginner"


def test_cors_allows_localhost(client):
    response = client.options(
        "/api/quote",
        headers={"origin": "http://localhost:3000", "access-control-request-method": "POST"},
    )
    assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"


def test_payment_request_without_square_configuration(client, square_unconfigured):
    response = client.post("/api/checkout/payment-request", json={
        "level": "level3", "sessions": 16, "sourceId": "cnon:ok",
    })
    assert response.status_code == 500
    assert response.json()["detail"] == "Server missing Square configuration"


def test_payment_link_without_square_configuration(client, square_unconfigured):
    response = client.post("/api/checkout/payment-link", json={"level": "level1", "sessions": 8})
    assert response.status_code == 500
