# rental_admin/api/routers/system_config.py
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from rental_admin.core.db import get_db
from rental_admin.core.exceptions import NotFoundError
from rental_admin.api.deps.auth import require_config_admin
from rental_admin.schemas.config_schema import (
    CONFIG_KEY_PATTERN,
    ConfigCategory,
    SystemConfigCreate,
    SystemConfigDetail,
    SystemConfigOut,
    SystemConfigUpdate,
    SystemConfigUpsert,
)
from rental_admin.services.config_service import SystemConfigService

router = APIRouter()


@router.get("/system", response_model=List[SystemConfigOut])
def list_system_configs(
    category: Optional[ConfigCategory] = Query(None),
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    """List system configs, optionally filtered by category"""
    return SystemConfigService(db).list_by_category(category)


@router.post("/system", response_model=SystemConfigOut, status_code=status.HTTP_201_CREATED)
def create_system_config(
    data: SystemConfigCreate,
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    return SystemConfigService(db).create(**data.model_dump(), updated_by=ctx["user_id"])


# Specific key routes are declared before /system/{config_id}
@router.get("/system/key/{key}", response_model=SystemConfigDetail)
def get_config_by_key(
    key: str = Path(..., pattern=CONFIG_KEY_PATTERN),
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    """Get a config row with its value decoded per config_type"""
    service = SystemConfigService(db)
    typed_value = service.get_by_key(key)
    if typed_value is None:
        raise NotFoundError("Configuration not found")

    row = service.get_row_by_key(key)
    return SystemConfigDetail(
        **SystemConfigOut.model_validate(row).model_dump(),
        typed_value=typed_value,
    )


@router.put("/system/key/{key}", response_model=SystemConfigOut)
def upsert_system_config(
    data: SystemConfigUpsert,
    key: str = Path(..., pattern=CONFIG_KEY_PATTERN),
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    """Create the config if it does not exist, otherwise update its value"""
    return SystemConfigService(db).upsert(
        key,
        data.config_value,
        config_type=data.config_type,
        category=data.category,
        is_editable=data.is_editable,
        description=data.description,
        updated_by=ctx["user_id"],
    )


@router.put("/system/{config_id}", response_model=SystemConfigOut)
def update_system_config(
    data: SystemConfigUpdate,
    config_id: int = Path(..., ge=1),
    ctx: dict = Depends(require_config_admin),
    db: Session = Depends(get_db)
):
    return SystemConfigService(db).update(
        config_id,
        data.config_value,
        description=data.description,
        updated_by=ctx["user_id"],
    )
