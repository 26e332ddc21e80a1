from __future__ import annotations

import logging
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.conftest import add_rule, auth_headers

RULE_PAYLOAD = {
    "vehicle_type_id": 1,
    "location_id": 7,
    "season": "high",
    "daily_rate": "600.00",
    "weekly_rate": "3800.00",
    "effective_from": "2024-01-01T00:00:00",
    "notes": "Downtown high season",
}


def test_requests_without_token_are_rejected(client: TestClient) -> None:
    assert client.get("/api/config/system").status_code == 401
    assert client.get("/api/config/pricing").status_code == 401


def test_invalid_token_is_rejected(client: TestClient) -> None:
    response = client.get("/api/config/system", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_roles_outside_config_admins_are_forbidden(client: TestClient) -> None:
    headers = auth_headers(user_id=9, roles=("seller",))
    assert client.get("/api/config/system", headers=headers).status_code == 403
    assert client.post("/api/config/pricing", json=RULE_PAYLOAD, headers=headers).status_code == 403


def test_director_general_is_allowed(client: TestClient) -> None:
    headers = auth_headers(user_id=9, roles=("director_general",))
    response = client.get("/api/config/system", headers=headers)
    assert response.status_code == 200
    assert response.json() == []


def test_health_reports_database(client: TestClient) -> None:
    body = client.get("/health").json()
    assert body["database"]["status"] == "healthy"


def test_system_config_lifecycle(client: TestClient, admin_headers: dict[str, str]) -> None:
    response = client.post(
        "/api/config/system",
        json={"config_key": "tax_rate", "config_value": "16", "config_type": "number", "category": "fiscal"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    created = response.json()
    assert created["updated_by"] == 42

    response = client.get("/api/config/system/key/tax_rate", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["typed_value"] == {"type": "number", "value": 16.0}

    response = client.put(
        f"/api/config/system/{created['id']}",
        json={"config_value": "8"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["config_value"] == "8"

    response = client.get("/api/config/system", params={"category": "fiscal"}, headers=admin_headers)
    assert [c["config_key"] for c in response.json()] == ["tax_rate"]


def test_system_config_errors(client: TestClient, admin_headers: dict[str, str]) -> None:
    assert client.get("/api/config/system/key/nope", headers=admin_headers).status_code == 404
    assert client.put("/api/config/system/999", json={"config_value": "x"}, headers=admin_headers).status_code == 404

    payload = {"config_key": "currency", "config_value": "MXN", "is_editable": False}
    created = client.post("/api/config/system", json=payload, headers=admin_headers).json()
    assert client.post("/api/config/system", json=payload, headers=admin_headers).status_code == 400

    response = client.put(f"/api/config/system/{created['id']}", json={"config_value": "USD"}, headers=admin_headers)
    assert response.status_code == 403

    response = client.post(
        "/api/config/system",
        json={"config_key": "max_days", "config_value": "thirty", "config_type": "number"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_stored_value_that_does_not_decode(
    client: TestClient, admin_headers: dict[str, str], db_session: Session
) -> None:
    from rental_admin.models import SystemConfig

    db_session.add(SystemConfig(config_key="maintenance_mode", config_value="yes", config_type="boolean"))
    db_session.commit()

    response = client.get("/api/config/system/key/maintenance_mode", headers=admin_headers)
    assert response.status_code == 422


def test_upsert_by_key(client: TestClient, admin_headers: dict[str, str]) -> None:
    response = client.put(
        "/api/config/system/key/support_email",
        json={"config_value": "help@example.com", "category": "email"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    first = response.json()

    response = client.put(
        "/api/config/system/key/support_email",
        json={"config_value": "support@example.com"},
        headers=admin_headers,
    )
    assert response.json()["id"] == first["id"]
    assert response.json()["config_value"] == "support@example.com"
    assert response.json()["category"] == "email"


def test_create_and_resolve_price_rule(
    client: TestClient, admin_headers: dict[str, str], fleet: dict[str, int]
) -> None:
    response = client.post("/api/config/pricing", json=RULE_PAYLOAD, headers=admin_headers)
    assert response.status_code == 201
    rule = response.json()
    assert rule["is_active"] is True
    assert rule["created_by"] == 42
    assert rule["vehicle_type"]["name"] == "Sedan"
    assert rule["location"]["name"] == "Downtown"

    response = client.get(
        "/api/config/pricing/active",
        params={"vehicle_type_id": 1, "location_id": 7, "as_of": "2024-03-01T00:00:00"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["id"] == rule["id"]
    assert Decimal(response.json()["daily_rate"]) == Decimal("600")

    assert client.get(f"/api/config/pricing/{rule['id']}", headers=admin_headers).status_code == 200
    listed = client.get("/api/config/pricing", params={"location_id": 7}, headers=admin_headers).json()
    assert [r["id"] for r in listed] == [rule["id"]]


def test_active_price_rule_errors(
    client: TestClient, admin_headers: dict[str, str], fleet: dict[str, int]
) -> None:
    response = client.get("/api/config/pricing/active", params={"location_id": 7}, headers=admin_headers)
    assert response.status_code == 400

    response = client.get(
        "/api/config/pricing/active",
        params={"vehicle_type_id": 2, "location_id": 7},
        headers=admin_headers,
    )
    assert response.status_code == 404


def test_create_price_rule_with_bad_window(
    client: TestClient, admin_headers: dict[str, str], fleet: dict[str, int]
) -> None:
    payload = dict(RULE_PAYLOAD, effective_from="2024-06-01T00:00:00", effective_until="2024-05-01T00:00:00")
    response = client.post("/api/config/pricing", json=payload, headers=admin_headers)
    assert response.status_code == 400


def test_price_rule_update_and_deactivate(
    client: TestClient, admin_headers: dict[str, str], db_session: Session, fleet: dict[str, int]
) -> None:
    rule = add_rule(db_session, daily_rate="500", location_id=7)

    response = client.put(f"/api/config/pricing/{rule.id}", json={"location_id": 8}, headers=admin_headers)
    assert response.status_code == 400

    response = client.put(f"/api/config/pricing/{rule.id}", json={"daily_rate": "520.00"}, headers=admin_headers)
    assert response.status_code == 200
    assert Decimal(response.json()["daily_rate"]) == Decimal("520")

    for _ in range(2):
        response = client.post(f"/api/config/pricing/{rule.id}/deactivate", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    assert client.post("/api/config/pricing/999/deactivate", headers=admin_headers).status_code == 404


def test_quote_falls_back_to_vehicle_type_rate(
    client: TestClient, admin_headers: dict[str, str], db_session: Session, fleet: dict[str, int]
) -> None:
    add_rule(db_session, daily_rate="600", location_id=7)
    params = {"location_id": 7, "as_of": "2024-03-01T00:00:00"}

    quote = client.get("/api/config/pricing/quote", params={"vehicle_type_id": 1, **params}, headers=admin_headers).json()
    assert quote["source"] == "price_config"
    assert Decimal(quote["daily_rate"]) == Decimal("600")

    quote = client.get("/api/config/pricing/quote", params={"vehicle_type_id": 2, **params}, headers=admin_headers).json()
    assert quote["source"] == "vehicle_type"
    assert Decimal(quote["daily_rate"]) == Decimal("900")

    response = client.get("/api/config/pricing/quote", params={"vehicle_type_id": 55}, headers=admin_headers)
    assert response.status_code == 404


def test_non_finite_numbers_are_rejected(client: TestClient, admin_headers: dict[str, str]) -> None:
    for key, value, config_type in [("k_nan", "NaN", "number"), ("k_inf", "1e999", "number"), ("k_json", "NaN", "json")]:
        response = client.post(
            "/api/config/system",
            json={"config_key": key, "config_value": value, "config_type": config_type},
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert client.get(f"/api/config/system/key/{key}", headers=admin_headers).status_code == 404


def test_rejected_requests_are_not_logged_as_errors(
    client: TestClient, admin_headers: dict[str, str], caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        response = client.get("/api/config/system/key/missing_key", headers=admin_headers)

    assert response.status_code == 404
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert any(r.levelno == logging.WARNING and "NotFoundError" in r.getMessage() for r in caplog.records)
