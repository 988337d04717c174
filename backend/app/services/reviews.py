"""Review lifecycle: landlord creation, review submission and voting."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Landlord, Review
from app.schemas.review import MIN_CONTENT_LENGTH
from app.services.ratings import RatingAggregator
from app.services.store import DatabaseStore, StoreInterface

logger = logging.getLogger(__name__)

PLACEHOLDER_LOCATION = "Location not specified"
LANDLORD_CREATE_ATTEMPTS = 3

RATING_FIELDS = (
    "overall_rating",
    "deposit_return_rating",
    "responsiveness_rating",
    "ethics_rating",
    "maintenance_rating",
    "communication_rating",
)


def validate_review_input(ratings: dict[str, int], content: str) -> None:
    """Reject out-of-range ratings and short content before any write."""
    errors = []
    for field in RATING_FIELDS:
        value = ratings.get(field)
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append({"loc": [field], "msg": "Rating must be an integer"})
        elif not 1 <= value <= 5:
            errors.append({"loc": [field], "msg": "Rating must be between 1 and 5"})

    if content is None or len(content.strip()) < MIN_CONTENT_LENGTH:
        errors.append(
            {
                "loc": ["content"],
                "msg": f"Review must be at least {MIN_CONTENT_LENGTH} characters long",
            }
        )

    if errors:
        raise ValidationError("Invalid review data", errors=errors)


class ReviewService:
    """Owns the create-landlord, create-review and cast-vote transactions."""

    def __init__(self, db: AsyncSession, store: Optional[StoreInterface] = None):
        self.db = db
        self.store = store or DatabaseStore(db)
        self.aggregator = RatingAggregator(self.store)

    # ------------------------------------------------------------------
    # Landlords
    # ------------------------------------------------------------------

    async def get_landlord(self, landlord_id: int) -> Landlord:
        landlord = await self.store.get_landlord(landlord_id)
        if not landlord:
            raise NotFoundError("Landlord not found")
        return landlord

    async def create_landlord(
        self,
        name: str,
        location: str,
        address: Optional[str] = None,
    ) -> Landlord:
        """Explicit "add landlord". Duplicate names (case-insensitive) conflict."""
        if not name or not name.strip():
            raise ValidationError.for_field("name", "Name is required")
        if not location or not location.strip():
            raise ValidationError.for_field("location", "Location is required")

        if await self.store.get_landlord_by_name(name):
            raise ConflictError("Landlord already exists")

        landlord = await self.store.create_landlord(name, location, address)
        await self.db.commit()
        logger.info(f"[REVIEWS] Landlord created: {landlord.id} {landlord.name!r}")
        return landlord

    async def get_or_create_landlord(
        self,
        name: str,
        location: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Landlord:
        """Find a landlord by exact name or create it.

        A concurrent creator can win the race between lookup and insert; the
        unique name index rejects our insert and we look the winner up again.
        """
        for _ in range(LANDLORD_CREATE_ATTEMPTS):
            existing = await self.store.get_landlord_by_name(name)
            if existing:
                return existing
            try:
                landlord = await self.store.create_landlord(
                    name,
                    location or PLACEHOLDER_LOCATION,
                    address,
                )
                await self.db.commit()
                logger.info(f"[REVIEWS] Landlord created from review: {landlord.id} {landlord.name!r}")
                return landlord
            except ConflictError:
                logger.info(f"[REVIEWS] Landlord {name!r} created concurrently, retrying lookup")
                continue

        existing = await self.store.get_landlord_by_name(name)
        if existing:
            return existing
        raise ConflictError("Landlord could not be created")

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    async def submit_review(
        self,
        ratings: dict[str, int],
        content: str,
        landlord_id: Optional[int] = None,
        landlord_name: Optional[str] = None,
        property_address: Optional[str] = None,
        location: Optional[str] = None,
        is_anonymous: bool = False,
        author_name: Optional[str] = None,
    ) -> Review:
        """Persist a review and recompute its landlord's ratings.

        With no ``landlord_id`` the landlord is resolved by exact
        case-insensitive name, and created if missing.
        """
        validate_review_input(ratings, content)

        if landlord_id is None:
            if not landlord_name or not landlord_name.strip():
                raise ValidationError.for_field("landlordName", "Landlord name is required")
            landlord = await self.get_or_create_landlord(landlord_name, location, property_address)
            landlord_id = landlord.id

        # Lock the landlord for the insert-then-recompute sequence.
        landlord = await self.store.get_landlord(landlord_id, for_update=True)
        if not landlord:
            raise NotFoundError("Landlord not found")

        review = await self.store.create_review(
            landlord_id,
            author_name=None if is_anonymous else author_name,
            is_anonymous=is_anonymous,
            content=content,
            **{field: ratings[field] for field in RATING_FIELDS},
        )
        await self.aggregator.recompute(landlord_id)
        await self.db.commit()

        logger.info(f"[REVIEWS] Review {review.id} created for landlord {landlord_id}")
        return review

    async def list_reviews_for_landlord(self, landlord_id: int) -> list[Review]:
        return await self.store.list_reviews_for_landlord(landlord_id)

    async def list_reviews(self) -> list[Review]:
        return await self.store.list_reviews()

    # ------------------------------------------------------------------
    # Votes
    # ------------------------------------------------------------------

    async def cast_vote(self, review_id: int, voter_identity: str, is_helpful: bool) -> None:
        """Record one vote per voter per review and bump the matching counter.

        A repeat vote by the same identity is rejected, never overwritten.
        """
        review = await self.store.get_review(review_id)
        if not review:
            raise NotFoundError("Review not found")

        await self.store.create_vote(review_id, voter_identity, is_helpful)
        await self.store.increment_review_votes(review_id, is_helpful)
        await self.db.commit()

        logger.info(f"[REVIEWS] Vote recorded on review {review_id} (helpful={is_helpful})")
