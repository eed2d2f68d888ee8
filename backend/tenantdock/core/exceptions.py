"""
Exceptions for TenantDock.

Provisioning errors are raised by the services; the API layer turns them
into FormError responses.
"""
from typing import Any

from fastapi import HTTPException

GENERIC_PROVISIONING_MESSAGE = (
    "An error occurred while creating your workspace. Please try again."
)


class ProvisioningError(Exception):
    """Base class for tenant provisioning errors."""


class FieldValidationError(ProvisioningError):
    """Input rejected on one or more fields; nothing was persisted."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class SchemaAlreadyExists(FieldValidationError):
    """The subdomain maps to a schema (or tenant) that already exists."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        super().__init__({"subdomain": "This subdomain is already taken. Please choose another one."})


class ProvisioningFailure(ProvisioningError):
    """Provisioning aborted and was rolled back. The message is safe to show."""

    def __init__(self, message: str = GENERIC_PROVISIONING_MESSAGE):
        super().__init__(message)


class CompensationFailure(ProvisioningFailure):
    """Rollback could not drop the schema it created; the schema is orphaned."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        super().__init__()


class FormError(HTTPException):
    """HTTP error carrying per-field messages and the input to re-display."""

    def __init__(self, status_code: int, errors: dict[str, str], input: dict[str, Any] | None = None):
        super().__init__(
            status_code=status_code,
            detail={"errors": errors, "input": input or {}},
        )
