"""
Common Pydantic schemas used across the API.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ErrorDetail(BaseSchema):
    """Messages keyed by field, plus the submitted input for re-display."""

    errors: dict[str, str]
    input: dict[str, Any] = {}


class ErrorResponse(BaseSchema):
    """Error response."""

    detail: ErrorDetail
