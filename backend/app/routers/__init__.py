"""API Routers for Landlord Ledger."""

from app.routers.landlords import router as landlords_router
from app.routers.reviews import router as reviews_router
from app.routers.contributions import router as contributions_router
from app.routers.search import router as search_router

__all__ = [
    "landlords_router",
    "reviews_router",
    "contributions_router",
    "search_router",
]
