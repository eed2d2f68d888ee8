"""
Signup schemas.
"""
from pydantic import EmailStr, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from tenantdock.schemas.common import BaseSchema
from tenantdock.services.plan_catalog import ProvisioningPlan

REDACTED_FIELDS = {"password", "password_confirmation"}


class SignupRequest(BaseSchema):
    """Organization signup request."""

    company_name: str = Field(min_length=1, max_length=255)
    subdomain: str = Field(min_length=1, max_length=50, pattern=r"^[a-z0-9-]+$")
    admin_name: str = Field(min_length=1, max_length=255)
    admin_email: EmailStr
    password: str = Field(min_length=8)
    password_confirmation: str
    plan: ProvisioningPlan

    @field_validator("password_confirmation")
    @classmethod
    def check_passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise PydanticCustomError("password_mismatch", "Password confirmation does not match")
        return value


class TenantResponse(BaseSchema):
    """Tenant identity."""

    id: int
    name: str
    subdomain: str
    schema_name: str
    plan: str
    is_active: bool


class SignupResponse(BaseSchema):
    """Successful signup with what to show the new admin."""

    tenant: TenantResponse
    company_name: str
    access_url: str
    admin_email: str
    plan: str
    message: str


# Friendlier wording for the validation errors people actually hit
FIELD_MESSAGES = {
    ("subdomain", "string_pattern_mismatch"):
        "The subdomain may only contain lowercase letters, digits and hyphens.",
    ("password", "string_too_short"):
        "The password must be at least 8 characters long.",
}
