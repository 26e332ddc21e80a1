# rental_admin/services/config_service.py - System configuration business logic
from sqlalchemy.orm import Session
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import Any, List, Optional
import json
import logging
import math

from rental_admin.core.exceptions import (
    ConfigDecodeError,
    ConfigPermissionError,
    NotFoundError,
    ValidationError,
)
from rental_admin.models.system_config import SystemConfig, CONFIG_TYPES, CONFIG_CATEGORIES
from rental_admin.schemas.config_schema import (
    BooleanConfigValue,
    JsonConfigValue,
    NumberConfigValue,
    StringConfigValue,
    TypedConfigValue,
)

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range for a JSON number")
    return value


def decode_config_value(config_type: str, raw: str, config_key: str = "") -> TypedConfigValue:
    """
    Decode a stored config_value according to its config_type.

    Raises:
        ConfigDecodeError: If the text does not parse for the declared type
    """
    if config_type == "string":
        return StringConfigValue(value=raw)

    if config_type == "number":
        try:
            number = float(raw)
        except (TypeError, ValueError):
            number = None
        if number is None or not math.isfinite(number):
            raise ConfigDecodeError(
                f"Config '{config_key}' is declared as number but value {raw!r} is not a finite number",
                config_key=config_key, config_type=config_type,
            )
        return NumberConfigValue(value=number)

    if config_type == "boolean":
        # Only the exact lowercase literals decode
        if raw == "true":
            return BooleanConfigValue(value=True)
        if raw == "false":
            return BooleanConfigValue(value=False)
        raise ConfigDecodeError(
            f"Config '{config_key}' is declared as boolean but value {raw!r} is not 'true' or 'false'",
            config_key=config_key, config_type=config_type,
        )

    if config_type == "json":
        try:
            return JsonConfigValue(value=json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float))
        except (TypeError, ValueError) as e:
            raise ConfigDecodeError(
                f"Config '{config_key}' is declared as json but value does not parse: {e}",
                config_key=config_key, config_type=config_type,
            )

    raise ConfigDecodeError(
        f"Config '{config_key}' has unknown config_type '{config_type}'",
        config_key=config_key, config_type=config_type,
    )


class SystemConfigService:
    """Service class for system configuration operations"""

    def __init__(self, db: Session):
        self.db = db

    def _find_by_key(self, key: str) -> Optional[SystemConfig]:
        return self.db.execute(
            select(SystemConfig).where(SystemConfig.config_key == key)
        ).scalar_one_or_none()

    def get(self, config_id: int) -> SystemConfig:
        config = self.db.get(SystemConfig, config_id)
        if config is None:
            raise NotFoundError("Configuration not found")
        return config

    def get_row_by_key(self, key: str) -> SystemConfig:
        config = self._find_by_key(key)
        if config is None:
            raise NotFoundError(f"Configuration '{key}' not found")
        return config

    def get_by_key(self, key: str) -> Optional[TypedConfigValue]:
        """
        Return the decoded value for ``key``, or None when no such key exists.

        Raises:
            ConfigDecodeError: If the stored value does not match its config_type
        """
        config = self._find_by_key(key)
        if config is None:
            return None
        return decode_config_value(config.config_type, config.config_value, config.config_key)

    def list_by_category(self, category: Optional[str] = None) -> List[SystemConfig]:
        """List configs, optionally filtered by category"""
        query = select(SystemConfig)
        if category:
            query = query.where(SystemConfig.category == category)
        return list(self.db.execute(
            query.order_by(SystemConfig.category.asc(), SystemConfig.config_key.asc())
        ).scalars().all())

    def create(
        self,
        config_key: str,
        config_value: str,
        config_type: str = "string",
        category: str = "general",
        description: Optional[str] = None,
        is_editable: bool = True,
        updated_by: Optional[int] = None,
    ) -> SystemConfig:
        """
        Create a new config row.

        Raises:
            ValidationError: If the key already exists or type/category is unknown
            ConfigDecodeError: If the value does not decode for config_type
        """
        self._validate_type_and_category(config_type, category)
        if self._find_by_key(config_key) is not None:
            raise ValidationError(f"Configuration '{config_key}' already exists")
        decode_config_value(config_type, config_value, config_key)

        config = SystemConfig(
            config_key=config_key,
            config_value=config_value,
            config_type=config_type,
            category=category,
            description=description,
            is_editable=is_editable,
            updated_by=updated_by,
        )

        try:
            self.db.add(config)
            self.db.commit()
            self.db.refresh(config)
        except IntegrityError:
            # Concurrent create of the same key
            self.db.rollback()
            raise ValidationError(f"Configuration '{config_key}' already exists")

        logger.info(f"Created system config '{config_key}' ({config_type}/{category})")
        return config

    def update(
        self,
        config_id: int,
        config_value: str,
        description: Optional[str] = None,
        updated_by: Optional[int] = None,
    ) -> SystemConfig:
        """
        Update value (and optionally description) of an existing config.

        Raises:
            NotFoundError: Unknown id
            ConfigPermissionError: Config is not editable
            ConfigDecodeError: New value does not decode for the row's type
        """
        config = self.get(config_id)
        self._apply_update(config, config_value, description, updated_by)
        self.db.commit()
        self.db.refresh(config)
        logger.info(f"Updated system config '{config.config_key}' by user {updated_by}")
        return config

    def upsert(
        self,
        key: str,
        value: Any,
        config_type: str = "string",
        category: str = "general",
        is_editable: bool = True,
        description: Optional[str] = None,
        updated_by: Optional[int] = None,
    ) -> SystemConfig:
        """
        Create the config if missing, otherwise update its value.

        ``value`` may be a Python value; it is encoded to text per config_type.
        An existing row keeps its type and category.

        Raises:
            ConfigPermissionError: Existing row is not editable
        """
        existing = self._find_by_key(key)
        if existing is None:
            return self.create(
                config_key=key,
                config_value=encode_config_value(config_type, value),
                config_type=config_type,
                category=category,
                description=description,
                is_editable=is_editable,
                updated_by=updated_by,
            )

        self._check_editable(existing, updated_by)
        self._apply_update(existing, encode_config_value(existing.config_type, value), description, updated_by)
        self.db.commit()
        self.db.refresh(existing)
        logger.info(f"Upserted system config '{key}' by user {updated_by}")
        return existing

    def _apply_update(self, config: SystemConfig, config_value: str,
                      description: Optional[str], updated_by: Optional[int]) -> None:
        self._check_editable(config, updated_by)

        decode_config_value(config.config_type, config_value, config.config_key)
        config.config_value = config_value
        config.updated_by = updated_by
        if description is not None:
            config.description = description

    @staticmethod
    def _check_editable(config: SystemConfig, updated_by: Optional[int]) -> None:
        if not config.is_editable:
            logger.warning(f"Rejected update of non-editable config '{config.config_key}' by user {updated_by}")
            raise ConfigPermissionError("This configuration is not editable")

    @staticmethod
    def _validate_type_and_category(config_type: str, category: str) -> None:
        if config_type not in CONFIG_TYPES:
            raise ValidationError(f"config_type must be one of: {list(CONFIG_TYPES)}")
        if category not in CONFIG_CATEGORIES:
            raise ValidationError(f"category must be one of: {list(CONFIG_CATEGORIES)}")


def encode_config_value(config_type: str, value: Any) -> str:
    """Encode a Python value into the text form stored in config_value"""
    if isinstance(value, str):
        return value
    if config_type == "boolean" and isinstance(value, bool):
        return "true" if value else "false"
    if config_type == "number" and isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if config_type == "json":
        return json.dumps(value)
    raise ValidationError(f"Value {value!r} cannot be stored as {config_type}")
