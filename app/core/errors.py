"""Domain errors raised by services and mapped to HTTP responses in app.main."""
from typing import List, Optional


class DomainError(Exception):
    """Base class for errors that carry an HTTP status."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(DomainError):
    """Malformed or missing input."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        validation_errors: Optional[List[str]] = None,
        details: Optional[str] = None,
    ):
        self.validation_errors = list(validation_errors or [])
        if details is None and self.validation_errors:
            details = "; ".join(self.validation_errors)
        super().__init__(message, details)

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["validationErrors"] = self.validation_errors
        return body


class NotFoundError(DomainError):
    """Entity does not exist within the tenant."""

    status_code = 404


class SettingsNotProvisionedError(NotFoundError):
    """The tenant has no settings row."""

    def __init__(self, tenant_id: str):
        super().__init__(
            "Settings not found",
            details=f"Tenant {tenant_id} has not been provisioned with settings",
        )


class ConflictError(DomainError):
    """A business rule rejected the request."""

    status_code = 400


class SlotUnavailableError(ConflictError):
    """The requested time slot cannot be booked."""

    status_code = 409


class TransactionFailedError(DomainError):
    """The database rejected a transaction; it was rolled back."""

    status_code = 500


class SlotIdError(ValueError):
    """A time slot ID could not be parsed."""

    def __init__(self, slot_id: str, reason: str):
        super().__init__(
            f"Invalid time slot ID format: {slot_id}. "
            f"Expected format: courtId-YYYY-MM-DD-HH:MM ({reason})"
        )
        self.slot_id = slot_id
        self.reason = reason


class TenantInactiveError(DomainError):
    """The tenant exists but has been deactivated."""

    status_code = 403

    def __init__(self):
        super().__init__("Tenant is inactive")
