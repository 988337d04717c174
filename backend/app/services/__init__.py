"""Services for Landlord Ledger."""

from app.services.store import StoreInterface, DatabaseStore
from app.services.ratings import RatingAggregator, aggregate_ratings
from app.services.reviews import ReviewService
from app.services.reconciler import IdentityReconciler, LandlordCandidate
from app.services.contributions import ContributionGate
from app.services.rentcast import RentCastClient, get_rentcast_client
from app.services.owner_lookup import OwnerLookupService, get_owner_lookup, close_owner_lookup

__all__ = [
    "StoreInterface",
    "DatabaseStore",
    "RatingAggregator",
    "aggregate_ratings",
    "ReviewService",
    "IdentityReconciler",
    "LandlordCandidate",
    "ContributionGate",
    "RentCastClient",
    "get_rentcast_client",
    "OwnerLookupService",
    "get_owner_lookup",
    "close_owner_lookup",
]
