"""Landlord schemas."""

from typing import Optional

from pydantic import Field

from app.models.enums import CandidateSource
from app.schemas.base import BaseSchema, IDMixin


class LandlordCreate(BaseSchema):
    """Explicitly add a landlord."""

    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = None


class LandlordResponse(BaseSchema, IDMixin):
    """Landlord with derived ratings."""

    name: str
    location: str
    address: Optional[str] = None
    average_rating: Optional[float] = None
    total_reviews: int = 0
    deposit_return_rating: Optional[float] = None
    responsiveness_rating: Optional[float] = None
    ethics_rating: Optional[float] = None
    maintenance_rating: Optional[float] = None
    communication_rating: Optional[float] = None


class EnhancedLandlordResponse(LandlordResponse):
    """Landlord result annotated with where its identity came from."""

    source: CandidateSource
    owner_source: Optional[str] = None
    confidence: Optional[float] = None
    has_verified_name: bool = True
