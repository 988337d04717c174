"""Contribution schemas."""

from typing import Optional

from pydantic import Field

from app.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class ContributionCreate(BaseSchema):
    """Suggest the real landlord for a property."""

    landlord_id: int = Field(..., gt=0)
    suggested_name: str = Field(..., min_length=1, max_length=255)
    how_you_know: str = Field(..., min_length=1)
    contact_info: Optional[str] = Field(None, max_length=255)


class ContributionResponse(BaseSchema, IDMixin, CreatedAtMixin):
    """Stored contribution. The contributor identity is never echoed back."""

    landlord_id: int
    suggested_name: str
    how_you_know: str
    contact_info: Optional[str] = None


class ContributionCreatedResponse(BaseSchema):
    message: str
    contribution: ContributionResponse
