# rental_admin/models/price_config.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional, get_args

from sqlalchemy import (
    String, Text, Boolean, Integer, Numeric, DateTime, ForeignKey,
    CheckConstraint, Index
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rental_admin.models.base import Base, sql_in_list
from rental_admin.models.location import Location
from rental_admin.models.vehicle_type import VehicleType

Season = Literal["low", "regular", "high", "peak"]
SEASONS = get_args(Season)

# Columns fixed at creation; they define which queries a rule can answer
SCOPING_FIELDS = ("vehicle_type_id", "location_id", "created_by")


class PriceConfig(Base):
    """Dated price rule. A null vehicle_type_id or location_id is a wildcard."""
    __tablename__ = "price_configs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    vehicle_type_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("vehicle_types.id"), nullable=True
    )
    location_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("locations.id"), nullable=True
    )
    season: Mapped[Optional[Season]] = mapped_column(String(16), nullable=True)

    daily_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    weekly_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    monthly_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    minimum_rental_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=1)
    discount_percentage: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    extra_hour_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    extra_day_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    insurance_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    deposit_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    late_fee_per_day: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    effective_from: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    effective_until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    vehicle_type: Mapped[Optional["VehicleType"]] = relationship("VehicleType", lazy="joined")
    location: Mapped[Optional["Location"]] = relationship("Location", lazy="joined")

    __table_args__ = (
        Index("ix_price_configs_vehicle_type_id", "vehicle_type_id"),
        Index("ix_price_configs_location_id", "location_id"),
        Index("ix_price_configs_effective_from", "effective_from"),
        Index("ix_price_configs_is_active", "is_active"),
        CheckConstraint("daily_rate >= 0", name="ck_price_configs_daily_rate_positive"),
        CheckConstraint(
            f"season IS NULL OR season IN ({sql_in_list(SEASONS)})",
            name="ck_price_configs_season",
        ),
        CheckConstraint(
            "effective_until IS NULL OR effective_until >= effective_from",
            name="ck_price_configs_effective_window",
        ),
    )

    def __repr__(self):
        return (
            f"<PriceConfig(id={self.id}, vehicle_type_id={self.vehicle_type_id}, "
            f"location_id={self.location_id}, daily_rate={self.daily_rate}, active={self.is_active})>"
        )
