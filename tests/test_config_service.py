from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from rental_admin.core.exceptions import (
    ConfigDecodeError,
    ConfigPermissionError,
    NotFoundError,
    ValidationError,
)
from rental_admin.services.config_service import (
    SystemConfigService,
    decode_config_value,
    encode_config_value,
)


def test_decode_number_is_float() -> None:
    decoded = decode_config_value("number", "16", "tax_rate")
    assert decoded.type == "number"
    assert decoded.value == 16.0
    assert isinstance(decoded.value, float)


@pytest.mark.parametrize("raw, expected", [("true", True), ("false", False)])
def test_decode_boolean_literals(raw: str, expected: bool) -> None:
    decoded = decode_config_value("boolean", raw)
    assert decoded.type == "boolean"
    assert decoded.value is expected


@pytest.mark.parametrize("raw", ["True", "FALSE", "1", "yes", ""])
def test_decode_boolean_is_case_sensitive(raw: str) -> None:
    with pytest.raises(ConfigDecodeError):
        decode_config_value("boolean", raw, "maintenance_mode")


def test_decode_json_and_string() -> None:
    decoded = decode_config_value("json", '{"from": "08:00", "to": "20:00"}')
    assert decoded.value == {"from": "08:00", "to": "20:00"}

    decoded = decode_config_value("string", "Rentals S.A.")
    assert decoded.type == "string"
    assert decoded.value == "Rentals S.A."


def test_decode_errors_carry_key_and_type() -> None:
    with pytest.raises(ConfigDecodeError) as excinfo:
        decode_config_value("number", "sixteen", "tax_rate")
    assert excinfo.value.config_key == "tax_rate"
    assert excinfo.value.config_type == "number"
    assert excinfo.value.status_code == 422

    with pytest.raises(ConfigDecodeError):
        decode_config_value("json", "{not json", "hours")


def test_encode_python_values() -> None:
    assert encode_config_value("boolean", True) == "true"
    assert encode_config_value("number", 16) == "16"
    assert encode_config_value("json", {"a": [1, 2]}) == '{"a": [1, 2]}'
    with pytest.raises(ValidationError):
        encode_config_value("number", True)


def test_get_by_key_returns_typed_value_or_none(db_session: Session) -> None:
    service = SystemConfigService(db_session)
    service.create("tax_rate", "16", config_type="number", category="fiscal")

    assert service.get_by_key("tax_rate").value == 16.0
    assert service.get_by_key("missing_key") is None


def test_get_by_key_with_bad_stored_value(db_session: Session) -> None:
    service = SystemConfigService(db_session)
    config = service.create("maintenance_mode", "false", config_type="boolean")
    # Rows written outside the service can hold values that no longer decode
    config.config_value = "TRUE"
    db_session.commit()

    with pytest.raises(ConfigDecodeError):
        service.get_by_key("maintenance_mode")


def test_list_by_category_is_ordered(db_session: Session) -> None:
    service = SystemConfigService(db_session)
    service.create("zeta", "z", category="general")
    service.create("alpha", "a", category="general")
    service.create("tax_rate", "16", config_type="number", category="fiscal")

    assert [c.config_key for c in service.list_by_category()] == ["tax_rate", "alpha", "zeta"]
    assert [c.config_key for c in service.list_by_category("general")] == ["alpha", "zeta"]
    assert service.list_by_category("email") == []


def test_create_rejects_duplicates_and_bad_values(db_session: Session) -> None:
    service = SystemConfigService(db_session)
    service.create("company_name", "Rentals S.A.")

    with pytest.raises(ValidationError):
        service.create("company_name", "Other")
    with pytest.raises(ValidationError):
        service.create("new_key", "x", config_type="yaml")
    with pytest.raises(ValidationError):
        service.create("new_key", "x", category="marketing")
    with pytest.raises(ConfigDecodeError):
        service.create("tax_rate", "abc", config_type="number")


def test_update_changes_value_and_records_editor(db_session: Session) -> None:
    service = SystemConfigService(db_session)
    config = service.create("tax_rate", "16", config_type="number", category="fiscal")

    updated = service.update(config.id, "8", description="Border zone", updated_by=5)

    assert updated.config_value == "8"
    assert updated.description == "Border zone"
    assert updated.updated_by == 5


def test_update_non_editable_is_rejected(db_session: Session) -> None:
    service = SystemConfigService(db_session)
    config = service.create("company_rfc", "RAS010101AAA", is_editable=False)

    with pytest.raises(ConfigPermissionError):
        service.update(config.id, "XXX010101AAA", updated_by=5)

    db_session.refresh(config)
    assert config.config_value == "RAS010101AAA"


def test_update_rejects_value_of_wrong_type(db_session: Session) -> None:
    service = SystemConfigService(db_session)
    config = service.create("tax_rate", "16", config_type="number")

    with pytest.raises(ConfigDecodeError):
        service.update(config.id, "sixteen")


def test_update_unknown_id(db_session: Session) -> None:
    with pytest.raises(NotFoundError):
        SystemConfigService(db_session).update(999, "x")


def test_upsert_creates_then_updates(db_session: Session) -> None:
    service = SystemConfigService(db_session)

    created = service.upsert("late_fee_grace_hours", 2, config_type="number", category="pricing", updated_by=3)
    assert created.config_value == "2"
    assert created.category == "pricing"

    # Existing rows keep their type and category
    updated = service.upsert("late_fee_grace_hours", "4", config_type="string", category="general", updated_by=4)
    assert updated.id == created.id
    assert updated.config_value == "4"
    assert updated.config_type == "number"
    assert updated.category == "pricing"
    assert updated.updated_by == 4


def test_upsert_non_editable_is_rejected(db_session: Session) -> None:
    service = SystemConfigService(db_session)
    service.create("currency", "MXN", is_editable=False)

    with pytest.raises(ConfigPermissionError):
        service.upsert("currency", "USD")


@pytest.mark.parametrize("raw", ["NaN", "nan", "inf", "-Infinity", "1e999"])
def test_decode_number_rejects_non_finite(raw: str) -> None:
    with pytest.raises(ConfigDecodeError):
        decode_config_value("number", raw, "tax_rate")


@pytest.mark.parametrize("raw", ["NaN", "[1, Infinity]", '{"limit": -Infinity}', '{"limit": 1e999}'])
def test_decode_json_rejects_non_finite(raw: str) -> None:
    with pytest.raises(ConfigDecodeError):
        decode_config_value("json", raw, "limits")


def test_non_finite_number_is_never_stored(db_session: Session) -> None:
    service = SystemConfigService(db_session)

    with pytest.raises(ConfigDecodeError):
        service.create("tax_rate", "NaN", config_type="number")
    assert service.get_by_key("tax_rate") is None

    config = service.create("deposit_factor", "1.5", config_type="number")
    with pytest.raises(ConfigDecodeError):
        service.update(config.id, "inf")
    with pytest.raises(ConfigDecodeError):
        service.upsert("deposit_factor", float("nan"))
    assert service.get_by_key("deposit_factor").value == 1.5


def test_upsert_non_editable_checks_permission_before_encoding(db_session: Session) -> None:
    service = SystemConfigService(db_session)
    service.create("business_hours", '{"from": "08:00"}', config_type="json", is_editable=False)

    with pytest.raises(ConfigPermissionError):
        service.upsert("business_hours", object())
