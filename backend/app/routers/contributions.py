"""Community contributions router."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_requester_identity
from app.schemas.contribution import (
    ContributionCreate,
    ContributionCreatedResponse,
    ContributionResponse,
)
from app.services.contributions import ContributionGate

router = APIRouter(tags=["contributions"])


@router.post(
    "/contribute-landlord-name",
    response_model=ContributionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def contribute_landlord_name(
    data: ContributionCreate,
    db: AsyncSession = Depends(get_db),
    contributor_identity: str = Depends(get_requester_identity),
):
    """Suggest who really owns a property. One suggestion per contributor per landlord."""
    contribution = await ContributionGate(db).submit_contribution(
        landlord_id=data.landlord_id,
        contributor_identity=contributor_identity,
        suggested_name=data.suggested_name,
        how_you_know=data.how_you_know,
        contact_info=data.contact_info,
    )
    return ContributionCreatedResponse(
        message="Thank you for your contribution!",
        contribution=ContributionResponse.model_validate(contribution),
    )
