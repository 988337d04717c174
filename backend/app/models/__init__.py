"""SQLAlchemy models for Landlord Ledger."""

from app.models.landlord import Landlord
from app.models.review import Review
from app.models.vote import Vote
from app.models.contribution import Contribution

__all__ = [
    "Landlord",
    "Review",
    "Vote",
    "Contribution",
]
