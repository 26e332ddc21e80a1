# rental_admin/services/pricing_service.py - Price rule storage and resolution
from sqlalchemy.orm import Session
from sqlalchemy import select, or_, case
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from rental_admin.core.exceptions import NotFoundError, ValidationError
from rental_admin.models.location import Location
from rental_admin.models.price_config import PriceConfig, SCOPING_FIELDS
from rental_admin.models.vehicle_type import VehicleType
from rental_admin.schemas.pricing_schema import PriceConfigOut, PriceQuoteOut, to_naive_utc

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = (
    "season", "daily_rate", "weekly_rate", "monthly_rate", "minimum_rental_days",
    "discount_percentage", "extra_hour_rate", "extra_day_rate", "insurance_rate",
    "deposit_amount", "late_fee_per_day", "effective_from", "effective_until",
    "is_active", "notes",
)


def _check_window(effective_from: datetime, effective_until: Optional[datetime]) -> None:
    if effective_from is None:
        raise ValidationError("effective_from is required")
    if effective_until is not None and effective_until < effective_from:
        raise ValidationError("effective_until cannot be earlier than effective_from")


class PriceRuleService:
    """Create, list, update and deactivate price rules"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, rule_id: int) -> PriceConfig:
        rule = self.db.get(PriceConfig, rule_id)
        if rule is None:
            raise NotFoundError("Price configuration not found")
        return rule

    def list(
        self,
        vehicle_type_id: Optional[int] = None,
        location_id: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> List[PriceConfig]:
        query = select(PriceConfig)
        if vehicle_type_id is not None:
            query = query.where(PriceConfig.vehicle_type_id == vehicle_type_id)
        if location_id is not None:
            query = query.where(PriceConfig.location_id == location_id)
        if is_active is not None:
            query = query.where(PriceConfig.is_active == is_active)

        return list(self.db.execute(
            query.order_by(PriceConfig.effective_from.desc(), PriceConfig.id.desc())
        ).scalars().unique().all())

    def create(self, data: Dict[str, Any], created_by: int) -> PriceConfig:
        """
        Create an active price rule.

        Raises:
            ValidationError: Bad effective window or unknown vehicle type/location
        """
        fields = dict(data)
        fields["effective_from"] = to_naive_utc(fields.get("effective_from"))
        fields["effective_until"] = to_naive_utc(fields.get("effective_until"))
        _check_window(fields["effective_from"], fields["effective_until"])
        self._check_references(fields.get("vehicle_type_id"), fields.get("location_id"))

        fields.pop("is_active", None)
        fields.pop("created_by", None)
        rule = PriceConfig(**fields, is_active=True, created_by=created_by)

        self.db.add(rule)
        self.db.commit()
        self.db.refresh(rule)

        logger.info(
            f"Created price rule {rule.id} (vehicle_type={rule.vehicle_type_id}, "
            f"location={rule.location_id}, daily_rate={rule.daily_rate}) by user {created_by}"
        )
        return rule

    def update(self, rule_id: int, changes: Dict[str, Any]) -> PriceConfig:
        """
        Apply a partial update.

        Raises:
            NotFoundError: Unknown id
            ValidationError: Scoping field change, unknown field or bad window
        """
        rule = self.get(rule_id)

        for field in SCOPING_FIELDS:
            if field in changes and changes[field] != getattr(rule, field):
                logger.warning(f"Rejected change of {field} on price rule {rule_id}")
                raise ValidationError(f"{field} cannot be changed after creation")

        unknown = set(changes) - set(MUTABLE_FIELDS) - set(SCOPING_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown fields: {sorted(unknown)}")

        updates = {k: v for k, v in changes.items() if k in MUTABLE_FIELDS}
        if "daily_rate" in updates and updates["daily_rate"] is None:
            raise ValidationError("daily_rate cannot be null")
        if "is_active" in updates and updates["is_active"] is None:
            raise ValidationError("is_active cannot be null")
        for field in ("effective_from", "effective_until"):
            if field in updates:
                updates[field] = to_naive_utc(updates[field])

        _check_window(
            updates.get("effective_from", rule.effective_from),
            updates.get("effective_until", rule.effective_until),
        )

        for field, value in updates.items():
            setattr(rule, field, value)

        self.db.commit()
        self.db.refresh(rule)
        logger.info(f"Updated price rule {rule_id}: {sorted(updates)}")
        return rule

    def deactivate(self, rule_id: int) -> PriceConfig:
        """Mark a rule inactive. Deactivating an inactive rule is a no-op."""
        rule = self.get(rule_id)
        if not rule.is_active:
            logger.debug(f"Price rule {rule_id} already inactive")
            return rule

        rule.is_active = False
        self.db.commit()
        self.db.refresh(rule)
        logger.info(f"Deactivated price rule {rule_id}")
        return rule

    def _check_references(self, vehicle_type_id: Optional[int], location_id: Optional[int]) -> None:
        if vehicle_type_id is not None and self.db.get(VehicleType, vehicle_type_id) is None:
            raise ValidationError(f"Vehicle type {vehicle_type_id} does not exist")
        if location_id is not None and self.db.get(Location, location_id) is None:
            raise ValidationError(f"Location {location_id} does not exist")


class PriceResolver:
    """
    Picks the single price rule that applies to a vehicle type, optional
    location and instant.

    Candidates are active rules whose effective window contains ``as_of`` and
    whose scoping fields either equal the requested values or are null. The
    winner is the most specific candidate: explicit location first, then
    explicit vehicle type, then the most recently created.
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve(
        self,
        vehicle_type_id: Optional[int],
        location_id: Optional[int] = None,
        as_of: Optional[datetime] = None,
    ) -> Optional[PriceConfigOut]:
        if vehicle_type_id is None:
            raise ValidationError("vehicle_type_id is required")

        as_of = to_naive_utc(as_of) or datetime.utcnow()

        location_clause = (
            or_(PriceConfig.location_id == location_id, PriceConfig.location_id.is_(None))
            if location_id is not None
            else PriceConfig.location_id.is_(None)
        )

        query = (
            select(PriceConfig)
            .where(
                PriceConfig.is_active == True,
                PriceConfig.effective_from <= as_of,
                or_(PriceConfig.effective_until.is_(None), PriceConfig.effective_until >= as_of),
                or_(PriceConfig.vehicle_type_id == vehicle_type_id, PriceConfig.vehicle_type_id.is_(None)),
                location_clause,
            )
            .order_by(
                case((PriceConfig.location_id.is_(None), 1), else_=0),
                case((PriceConfig.vehicle_type_id.is_(None), 1), else_=0),
                PriceConfig.created_at.desc(),
                PriceConfig.id.desc(),
            )
            .limit(1)
        )

        rule = self.db.execute(query).scalars().first()
        if rule is None:
            logger.debug(
                f"No active price rule for vehicle_type={vehicle_type_id} location={location_id} as_of={as_of}"
            )
            return None

        return PriceConfigOut.model_validate(rule)

    def quote_daily_rate(
        self,
        vehicle_type_id: int,
        location_id: Optional[int] = None,
        as_of: Optional[datetime] = None,
    ) -> PriceQuoteOut:
        """
        Effective daily rate: the resolved rule's rate, or the vehicle type's
        base rate when no rule applies.

        Raises:
            NotFoundError: Unknown vehicle type
        """
        vehicle_type = self.db.get(VehicleType, vehicle_type_id)
        if vehicle_type is None:
            raise NotFoundError(f"Vehicle type {vehicle_type_id} not found")

        as_of = to_naive_utc(as_of) or datetime.utcnow()
        rule = self.resolve(vehicle_type_id, location_id, as_of)

        if rule is not None:
            return PriceQuoteOut(
                vehicle_type_id=vehicle_type_id,
                location_id=location_id,
                as_of=as_of,
                daily_rate=rule.daily_rate,
                source="price_config",
                price_config_id=rule.id,
            )

        return PriceQuoteOut(
            vehicle_type_id=vehicle_type_id,
            location_id=location_id,
            as_of=as_of,
            daily_rate=vehicle_type.daily_rate,
            source="vehicle_type",
        )
