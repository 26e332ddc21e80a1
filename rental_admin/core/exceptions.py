"""Exception hierarchy for the configuration and pricing services.

Services raise these; ``rental_admin.main`` maps each class to an HTTP
status code so routers never build error responses by hand.
"""

from __future__ import annotations


class RentalAdminError(Exception):
    """Base exception for all rental_admin errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(RentalAdminError):
    """Unknown config key, config id or price rule id."""

    status_code = 404


class ValidationError(RentalAdminError):
    """Bad date range, immutable field change or missing scoping field."""

    status_code = 400


class ConfigPermissionError(RentalAdminError):
    """Write attempted on a configuration marked as not editable."""

    status_code = 403


class ConfigDecodeError(RentalAdminError):
    """Stored config value does not parse for its declared type."""

    status_code = 422

    def __init__(self, message: str, *, config_key: str = "", config_type: str = "") -> None:
        self.config_key = config_key
        self.config_type = config_type
        super().__init__(message)
