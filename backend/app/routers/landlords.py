"""Landlords router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.enums import SortOrder
from app.schemas.contribution import ContributionResponse
from app.schemas.landlord import LandlordCreate, LandlordResponse
from app.schemas.review import ReviewResponse
from app.services.contributions import ContributionGate
from app.services.reconciler import IdentityReconciler
from app.services.rentcast import RentCastClient, get_rentcast_client
from app.services.reviews import ReviewService

router = APIRouter(prefix="/landlords", tags=["landlords"])


@router.get("", response_model=List[LandlordResponse])
async def list_landlords(
    search: Optional[str] = None,
    location: Optional[str] = None,
    sort_by: SortOrder = Query(SortOrder.MOST_RECENT, alias="sortBy"),
    filter_rating: Optional[int] = Query(None, alias="filterRating", ge=1, le=5),
    db: AsyncSession = Depends(get_db),
    rentcast: RentCastClient = Depends(get_rentcast_client),
):
    """Search landlords across local data and RentCast.

    RentCast failures never fail the request; local matches are returned.
    """
    reconciler = IdentityReconciler(db, rentcast=rentcast)
    candidates = await reconciler.search(
        query=search,
        location=location,
        sort_by=sort_by,
        min_rating=filter_rating,
    )
    return [LandlordResponse.model_validate(c) for c in candidates]


@router.post("", response_model=LandlordResponse, status_code=status.HTTP_201_CREATED)
async def create_landlord(
    data: LandlordCreate,
    db: AsyncSession = Depends(get_db),
):
    """Add a landlord. Names are unique, case-insensitively."""
    landlord = await ReviewService(db).create_landlord(
        name=data.name,
        location=data.location,
        address=data.address,
    )
    return LandlordResponse.model_validate(landlord)


@router.get("/{landlord_id}", response_model=LandlordResponse)
async def get_landlord(
    landlord_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a landlord by ID."""
    landlord = await ReviewService(db).get_landlord(landlord_id)
    return LandlordResponse.model_validate(landlord)


@router.get("/{landlord_id}/reviews", response_model=List[ReviewResponse])
async def list_landlord_reviews(
    landlord_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Reviews for a landlord, newest first."""
    service = ReviewService(db)
    await service.get_landlord(landlord_id)
    reviews = await service.list_reviews_for_landlord(landlord_id)
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.get("/{landlord_id}/contributions", response_model=List[ContributionResponse])
async def list_landlord_contributions(
    landlord_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Ownership suggestions submitted for a landlord."""
    contributions = await ContributionGate(db).list_for_landlord(landlord_id)
    return [ContributionResponse.model_validate(c) for c in contributions]
