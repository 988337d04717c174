"""Reviews router."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_requester_identity
from app.schemas.base import MessageResponse
from app.schemas.review import ReviewCreate, ReviewResponse, VoteCreate
from app.services.reviews import RATING_FIELDS, ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("", response_model=List[ReviewResponse])
async def list_reviews(
    db: AsyncSession = Depends(get_db),
):
    """All reviews, newest first."""
    reviews = await ReviewService(db).list_reviews()
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
):
    """Submit a review.

    The landlord's ratings are recomputed before the response is sent.
    """
    review = await ReviewService(db).submit_review(
        ratings={field: getattr(data, field) for field in RATING_FIELDS},
        content=data.content,
        landlord_id=data.landlord_id,
        landlord_name=data.landlord_name,
        property_address=data.property_address,
        location=data.location,
        is_anonymous=data.is_anonymous,
        author_name=data.author_name,
    )
    return ReviewResponse.model_validate(review)


@router.post("/{review_id}/vote", response_model=MessageResponse)
async def vote_on_review(
    review_id: int,
    data: VoteCreate,
    db: AsyncSession = Depends(get_db),
    voter_identity: str = Depends(get_requester_identity),
):
    """Vote a review helpful or not helpful, once per voter."""
    await ReviewService(db).cast_vote(review_id, voter_identity, data.is_helpful)
    return MessageResponse(message="Vote recorded successfully")
