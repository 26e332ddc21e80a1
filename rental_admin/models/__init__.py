# rental_admin/models/__init__.py - Import all models so SQLAlchemy can discover them

from rental_admin.models.base import Base

from rental_admin.models.vehicle_type import VehicleType
from rental_admin.models.location import Location
from rental_admin.models.system_config import SystemConfig
from rental_admin.models.price_config import PriceConfig

__all__ = [
    "Base",
    "VehicleType",
    "Location",
    "SystemConfig",
    "PriceConfig",
]
