# rental_admin/schemas/config_schema.py
from pydantic import BaseModel, Field
from typing import Annotated, Any, Literal, Optional, Union
from datetime import datetime

from rental_admin.models.system_config import ConfigCategory, ConfigType

CONFIG_KEY_PATTERN = r"^[a-zA-Z0-9_]+$"


# Typed config values: one variant per config_type, discriminated by "type"
class StringConfigValue(BaseModel):
    type: Literal["string"] = "string"
    value: str


class NumberConfigValue(BaseModel):
    type: Literal["number"] = "number"
    value: float


class BooleanConfigValue(BaseModel):
    type: Literal["boolean"] = "boolean"
    value: bool


class JsonConfigValue(BaseModel):
    type: Literal["json"] = "json"
    value: Any


TypedConfigValue = Annotated[
    Union[StringConfigValue, NumberConfigValue, BooleanConfigValue, JsonConfigValue],
    Field(discriminator="type"),
]


class SystemConfigCreate(BaseModel):
    config_key: str = Field(..., min_length=1, max_length=100, pattern=CONFIG_KEY_PATTERN)
    config_value: str = Field(..., min_length=1, max_length=1000)
    config_type: ConfigType = "string"
    category: ConfigCategory = "general"
    description: Optional[str] = Field(None, max_length=500)
    is_editable: bool = True


class SystemConfigUpdate(BaseModel):
    config_value: str = Field(..., min_length=1, max_length=1000)
    description: Optional[str] = Field(None, max_length=500)


class SystemConfigUpsert(BaseModel):
    """Create-or-update payload addressed by key"""
    config_value: str = Field(..., min_length=1, max_length=1000)
    config_type: ConfigType = "string"
    category: ConfigCategory = "general"
    description: Optional[str] = Field(None, max_length=500)
    is_editable: bool = True


class SystemConfigOut(BaseModel):
    id: int
    config_key: str
    config_value: str
    config_type: ConfigType
    category: ConfigCategory
    description: Optional[str] = None
    is_editable: bool
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SystemConfigDetail(SystemConfigOut):
    """Config row with its value decoded per config_type"""
    typed_value: TypedConfigValue


