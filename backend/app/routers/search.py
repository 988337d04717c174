"""Enhanced search router."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.schemas.landlord import EnhancedLandlordResponse
from app.services.owner_lookup import OwnerLookupService, get_owner_lookup
from app.services.reconciler import IdentityReconciler
from app.services.rentcast import RentCastClient, get_rentcast_client

router = APIRouter(tags=["search"])


def get_enabled_owner_lookup() -> Optional[OwnerLookupService]:
    """Owner lookup service, or None when disabled by configuration."""
    if not get_settings().owner_lookup_enabled:
        return None
    return get_owner_lookup()


@router.get("/enhanced-search", response_model=List[EnhancedLandlordResponse])
async def enhanced_search(
    search: Optional[str] = None,
    location: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    rentcast: RentCastClient = Depends(get_rentcast_client),
    owner_lookup: Optional[OwnerLookupService] = Depends(get_enabled_owner_lookup),
):
    """Search enriched with public-record owner names (best-effort)."""
    errors = []
    if not search or not search.strip():
        errors.append({"loc": ["query", "search"], "msg": "Search query is required"})
    if not location or not location.strip():
        errors.append({"loc": ["query", "location"], "msg": "Location is required"})
    if errors:
        raise ValidationError("Search query and location are required", errors=errors)

    reconciler = IdentityReconciler(
        db,
        rentcast=rentcast,
        owner_lookup=owner_lookup,
        owner_lookup_timeout=get_settings().owner_lookup_timeout_seconds,
    )
    candidates = await reconciler.enhanced_search(search, location)
    return [EnhancedLandlordResponse.model_validate(c) for c in candidates]
