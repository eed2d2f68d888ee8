"""
Pydantic schemas for TenantDock API.
"""
from tenantdock.schemas.common import BaseSchema, ErrorDetail, ErrorResponse
from tenantdock.schemas.signup import SignupRequest, SignupResponse, TenantResponse

__all__ = [
    # Common
    "BaseSchema",
    "ErrorDetail",
    "ErrorResponse",
    # Signup
    "SignupRequest",
    "SignupResponse",
    "TenantResponse",
]
