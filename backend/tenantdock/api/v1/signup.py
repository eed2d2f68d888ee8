"""
Organization signup endpoint.
"""
from fastapi import APIRouter, status

from tenantdock.core.deps import Provisioner
from tenantdock.core.exceptions import FieldValidationError, FormError, ProvisioningFailure
from tenantdock.schemas.common import ErrorResponse
from tenantdock.schemas.signup import (
    REDACTED_FIELDS,
    SignupRequest,
    SignupResponse,
    TenantResponse,
)

router = APIRouter(prefix="/signup", tags=["Signup"])


@router.post(
    "",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def signup(
    request: SignupRequest,
    provisioner: Provisioner,
) -> SignupResponse:
    """Create an organization with its own schema and admin account."""
    submitted = request.model_dump(mode="json", exclude=REDACTED_FIELDS)

    try:
        result = await provisioner.provision(
            company_name=request.company_name,
            subdomain=request.subdomain,
            admin_name=request.admin_name,
            admin_email=request.admin_email,
            password=request.password,
            plan=request.plan,
        )
    except FieldValidationError as exc:
        raise FormError(status.HTTP_422_UNPROCESSABLE_ENTITY, exc.errors, submitted) from exc
    except ProvisioningFailure as exc:
        raise FormError(status.HTTP_500_INTERNAL_SERVER_ERROR, {"error": str(exc)}, submitted) from exc

    return SignupResponse(
        tenant=TenantResponse.model_validate(result.tenant),
        company_name=result.tenant.name,
        access_url=result.access_url,
        admin_email=result.admin_email,
        plan=result.plan_label,
        message=result.message,
    )
