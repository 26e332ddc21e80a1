# rental_admin/schemas/pricing_schema.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime, timezone
from decimal import Decimal

from rental_admin.models.price_config import Season

RateSource = Literal["price_config", "vehicle_type"]


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC; aware values are converted first"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class VehicleTypeRef(BaseModel):
    id: int
    name: str
    daily_rate: Decimal

    class Config:
        from_attributes = True


class LocationRef(BaseModel):
    id: int
    name: str
    city: Optional[str] = None

    class Config:
        from_attributes = True


class PriceConfigCreate(BaseModel):
    vehicle_type_id: Optional[int] = Field(None, ge=1)  # None applies to all vehicle types
    location_id: Optional[int] = Field(None, ge=1)      # None applies to all locations
    season: Optional[Season] = None
    daily_rate: Decimal = Field(..., ge=0, decimal_places=2)
    weekly_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    monthly_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    minimum_rental_days: int = Field(1, ge=1)
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    extra_hour_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    extra_day_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    insurance_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    deposit_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    late_fee_per_day: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    effective_from: datetime
    effective_until: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("effective_from", "effective_until")
    @classmethod
    def normalize_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class PriceConfigUpdate(BaseModel):
    """
    Partial update. Scoping fields are accepted here only so the service can
    reject attempts to change them with a clear message.
    """
    vehicle_type_id: Optional[int] = None
    location_id: Optional[int] = None
    created_by: Optional[int] = None

    season: Optional[Season] = None
    daily_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    weekly_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    monthly_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    minimum_rental_days: Optional[int] = Field(None, ge=1)
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    extra_hour_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    extra_day_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    insurance_rate: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    deposit_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    late_fee_per_day: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    effective_from: Optional[datetime] = None
    effective_until: Optional[datetime] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("effective_from", "effective_until")
    @classmethod
    def normalize_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class PriceConfigOut(BaseModel):
    id: int
    vehicle_type_id: Optional[int] = None
    location_id: Optional[int] = None
    season: Optional[Season] = None
    daily_rate: Decimal
    weekly_rate: Optional[Decimal] = None
    monthly_rate: Optional[Decimal] = None
    minimum_rental_days: Optional[int] = None
    discount_percentage: Optional[Decimal] = None
    extra_hour_rate: Optional[Decimal] = None
    extra_day_rate: Optional[Decimal] = None
    insurance_rate: Optional[Decimal] = None
    deposit_amount: Optional[Decimal] = None
    late_fee_per_day: Optional[Decimal] = None
    effective_from: datetime
    effective_until: Optional[datetime] = None
    is_active: bool
    notes: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime

    vehicle_type: Optional[VehicleTypeRef] = None
    location: Optional[LocationRef] = None

    class Config:
        from_attributes = True


class PriceQuoteOut(BaseModel):
    """Effective daily rate for a vehicle type at a location and date"""
    vehicle_type_id: int
    location_id: Optional[int] = None
    as_of: datetime
    daily_rate: Decimal
    source: RateSource
    price_config_id: Optional[int] = None
