from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Text, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from rental_admin.models.base import Base


class VehicleType(Base):
    """Vehicle category carrying the base daily rate used when no price rule applies"""
    __tablename__ = "vehicle_types"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    daily_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    def __repr__(self):
        return f"<VehicleType(id={self.id}, name='{self.name}', daily_rate={self.daily_rate})>"
