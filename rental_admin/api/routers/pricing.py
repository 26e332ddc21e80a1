# rental_admin/api/routers/pricing.py
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from rental_admin.core.db import get_db
from rental_admin.core.exceptions import NotFoundError
from rental_admin.api.deps.auth import require_config_admin
from rental_admin.schemas.pricing_schema import (
    PriceConfigCreate,
    PriceConfigOut,
    PriceConfigUpdate,
    PriceQuoteOut,
)
from rental_admin.services.pricing_service import PriceResolver, PriceRuleService

router = APIRouter()


@router.get("/pricing", response_model=List[PriceConfigOut])
def list_price_configs(
    vehicle_type_id: Optional[int] = Query(None, ge=1),
    location_id: Optional[int] = Query(None, ge=1),
    is_active: Optional[bool] = None,
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    """List price rules, newest effective date first"""
    return PriceRuleService(db).list(vehicle_type_id, location_id, is_active)


@router.post("/pricing", response_model=PriceConfigOut, status_code=status.HTTP_201_CREATED)
def create_price_config(
    data: PriceConfigCreate,
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    return PriceRuleService(db).create(data.model_dump(), created_by=ctx["user_id"])


@router.get("/pricing/active", response_model=PriceConfigOut)
def get_active_price_config(
    vehicle_type_id: Optional[int] = Query(None, ge=1),
    location_id: Optional[int] = Query(None, ge=1),
    as_of: Optional[datetime] = Query(None, description="Defaults to now (UTC)"),
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    """Resolve the single price rule that applies right now (or at as_of)"""
    rule = PriceResolver(db).resolve(vehicle_type_id, location_id, as_of)
    if rule is None:
        raise NotFoundError("No active price configuration found")
    return rule


@router.get("/pricing/quote", response_model=PriceQuoteOut)
def quote_daily_rate(
    vehicle_type_id: int = Query(..., ge=1),
    location_id: Optional[int] = Query(None, ge=1),
    as_of: Optional[datetime] = None,
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    """Daily rate from the applicable rule, falling back to the vehicle type's base rate"""
    return PriceResolver(db).quote_daily_rate(vehicle_type_id, location_id, as_of)


@router.get("/pricing/{rule_id}", response_model=PriceConfigOut)
def get_price_config(
    rule_id: int = Path(..., ge=1),
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    return PriceRuleService(db).get(rule_id)


@router.put("/pricing/{rule_id}", response_model=PriceConfigOut)
def update_price_config(
    data: PriceConfigUpdate,
    rule_id: int = Path(..., ge=1),
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    return PriceRuleService(db).update(rule_id, data.model_dump(exclude_unset=True))


@router.post("/pricing/{rule_id}/deactivate", response_model=PriceConfigOut)
def deactivate_price_config(
    rule_id: int = Path(..., ge=1),
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    return PriceRuleService(db).deactivate(rule_id)
