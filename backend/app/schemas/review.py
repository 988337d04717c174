"""Review and vote schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from app.schemas.base import BaseSchema, CreatedAtMixin, IDMixin

MIN_CONTENT_LENGTH = 10


class ReviewRatings(BaseSchema):
    """The six 1-5 ratings every review carries."""

    overall_rating: int = Field(..., ge=1, le=5)
    deposit_return_rating: int = Field(..., ge=1, le=5)
    responsiveness_rating: int = Field(..., ge=1, le=5)
    ethics_rating: int = Field(..., ge=1, le=5)
    maintenance_rating: int = Field(..., ge=1, le=5)
    communication_rating: int = Field(..., ge=1, le=5)


class ReviewCreate(ReviewRatings):
    """Submit a review.

    Either ``landlord_id`` or ``landlord_name`` must be given; a name that
    matches no landlord creates one.
    """

    landlord_id: Optional[int] = Field(None, gt=0)
    landlord_name: Optional[str] = Field(None, min_length=1, max_length=255)
    property_address: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)

    content: str = Field(..., min_length=MIN_CONTENT_LENGTH)
    is_anonymous: bool = False
    author_name: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def validate_landlord_reference(self):
        """A review must point at a landlord by id or by name."""
        if self.landlord_id is None and not self.landlord_name:
            raise ValueError("landlordId or landlordName is required")
        return self


class ReviewResponse(BaseSchema, IDMixin, CreatedAtMixin):
    """Review response."""

    landlord_id: int
    author_name: Optional[str] = None
    is_anonymous: bool
    overall_rating: int
    deposit_return_rating: int
    responsiveness_rating: int
    ethics_rating: int
    maintenance_rating: int
    communication_rating: int
    content: str
    helpful_votes: int
    not_helpful_votes: int


class VoteCreate(BaseSchema):
    """Helpful / not-helpful vote."""

    is_helpful: bool
