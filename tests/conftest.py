from __future__ import annotations

import os

# Settings are read at import time, so the environment must be in place first
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-1234"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import Iterator
from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from rental_admin.core.db import get_engine, get_session_maker
from rental_admin.core.security import create_access_token
from rental_admin.main import app
from rental_admin.models import Base, Location, PriceConfig, VehicleType


@pytest.fixture()
def db_session() -> Iterator[Session]:
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = get_session_maker()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session: Session) -> TestClient:
    return TestClient(app)


def auth_headers(user_id: int = 1, roles: tuple[str, ...] = ("admin",)) -> dict[str, str]:
    token = create_access_token(user_id, roles=list(roles))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    return auth_headers(user_id=42, roles=("admin",))


@pytest.fixture()
def fleet(db_session: Session) -> dict[str, int]:
    """Two vehicle types and two locations, ids returned by name."""
    sedan = VehicleType(id=1, name="Sedan", daily_rate=Decimal("450.00"))
    van = VehicleType(id=2, name="Van", daily_rate=Decimal("900.00"))
    downtown = Location(id=7, name="Downtown", city="Monterrey")
    airport = Location(id=8, name="Airport", city="Monterrey")
    db_session.add_all([sedan, van, downtown, airport])
    db_session.commit()
    return {"sedan": 1, "van": 2, "downtown": 7, "airport": 8}


def add_rule(
    db: Session,
    *,
    daily_rate: str,
    vehicle_type_id: int | None = 1,
    location_id: int | None = None,
    effective_from: datetime = datetime(2024, 1, 1),
    effective_until: datetime | None = None,
    is_active: bool = True,
    created_at: datetime | None = None,
) -> PriceConfig:
    rule = PriceConfig(
        vehicle_type_id=vehicle_type_id,
        location_id=location_id,
        daily_rate=Decimal(daily_rate),
        effective_from=effective_from,
        effective_until=effective_until,
        is_active=is_active,
        created_by=1,
    )
    if created_at is not None:
        rule.created_at = created_at
    db.add(rule)
    db.commit()
    return rule
