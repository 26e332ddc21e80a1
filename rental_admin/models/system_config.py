# rental_admin/models/system_config.py
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, get_args

from sqlalchemy import String, Text, Boolean, Integer, DateTime, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from rental_admin.models.base import Base, sql_in_list

ConfigType = Literal["string", "number", "boolean", "json"]
ConfigCategory = Literal["general", "pricing", "email", "notifications", "security", "business", "fiscal"]

CONFIG_TYPES = get_args(ConfigType)
CONFIG_CATEGORIES = get_args(ConfigCategory)


class SystemConfig(Base):
    """Typed key/value system setting; config_value is always stored as text"""
    __tablename__ = "system_configs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    config_key: Mapped[str] = mapped_column(String(100), nullable=False)
    config_value: Mapped[str] = mapped_column(Text, nullable=False)
    config_type: Mapped[ConfigType] = mapped_column(String(16), default="string", nullable=False)
    category: Mapped[ConfigCategory] = mapped_column(String(24), default="general", nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_editable: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_system_configs_config_key", "config_key", unique=True),
        Index("ix_system_configs_category", "category"),
        CheckConstraint(
            f"config_type IN ({sql_in_list(CONFIG_TYPES)})",
            name="ck_system_configs_config_type",
        ),
        CheckConstraint(
            f"category IN ({sql_in_list(CONFIG_CATEGORIES)})",
            name="ck_system_configs_category",
        ),
    )

    def __repr__(self):
        return f"<SystemConfig(key={self.config_key}, type={self.config_type}, value={self.config_value!r})>"
