"""Persistent store with provider interface.

The store exposes the reads and writes the domain services need. It flushes
but never commits; the calling service owns the transaction boundary.
Uniqueness invariants (landlord name, one vote per voter per review, one
contribution per contributor per landlord) are enforced by database
constraints and surface here as ``ConflictError``.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.models import Contribution, Landlord, Review, Vote
from app.models.review import RATING_COLUMNS

logger = logging.getLogger(__name__)

# Location search ignores this sentinel sent by the search form.
ALL_LOCATIONS = "all locations"

_LOCATION_SPLIT_RE = re.compile(r"[,\s]+")


def location_tokens(location: Optional[str]) -> list[str]:
    """Split a location string into non-empty lowercase tokens.

    "Frederick, MD" -> ["frederick", "md"]
    """
    if not location or location.strip().lower() == ALL_LOCATIONS:
        return []
    return [part for part in _LOCATION_SPLIT_RE.split(location.lower()) if part]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class StoreInterface(ABC):
    """Abstract interface for the system of record."""

    # Landlords

    @abstractmethod
    async def get_landlord(self, landlord_id: int, for_update: bool = False) -> Optional[Landlord]:
        """Point lookup by id."""

    @abstractmethod
    async def get_landlord_by_name(self, name: str) -> Optional[Landlord]:
        """Exact, case-insensitive name lookup."""

    @abstractmethod
    async def create_landlord(
        self,
        name: str,
        location: str,
        address: Optional[str] = None,
    ) -> Landlord:
        """Insert a landlord. Raises ConflictError if the name is taken."""

    @abstractmethod
    async def search_landlords(self, query: str = "", location: Optional[str] = None) -> list[Landlord]:
        """Substring search on name/address, filtered by location tokens.

        A landlord passes the location filter when any location token is a
        substring of its location or address field.
        """

    @abstractmethod
    async def list_landlords(self) -> list[Landlord]:
        """All landlords, most recent first."""

    @abstractmethod
    async def apply_rating_summary(self, landlord: Landlord, values: dict[str, float], total_reviews: int) -> None:
        """Overwrite the derived rating fields in one update."""

    # Reviews

    @abstractmethod
    async def get_review(self, review_id: int) -> Optional[Review]:
        """Point lookup by id."""

    @abstractmethod
    async def create_review(self, landlord_id: int, **fields) -> Review:
        """Insert a review with zeroed vote counters."""

    @abstractmethod
    async def list_reviews_for_landlord(self, landlord_id: int) -> list[Review]:
        """Reviews for one landlord, newest first."""

    @abstractmethod
    async def list_reviews(self) -> list[Review]:
        """All reviews, newest first."""

    @abstractmethod
    async def list_rating_rows(self, landlord_id: int) -> list[tuple[int, ...]]:
        """The six rating columns of every review for a landlord."""

    # Votes

    @abstractmethod
    async def create_vote(self, review_id: int, voter_identity: str, is_helpful: bool) -> Vote:
        """Insert a vote. Raises ConflictError if this voter already voted."""

    @abstractmethod
    async def increment_review_votes(self, review_id: int, is_helpful: bool) -> None:
        """Atomically add one to the helpful or not-helpful counter."""

    # Contributions

    @abstractmethod
    async def get_contribution(self, contributor_identity: str, landlord_id: int) -> Optional[Contribution]:
        """Existing contribution for a (contributor, landlord) pair."""

    @abstractmethod
    async def create_contribution(
        self,
        landlord_id: int,
        contributor_identity: str,
        suggested_name: str,
        how_you_know: str,
        contact_info: Optional[str] = None,
    ) -> Contribution:
        """Insert a contribution. Raises ConflictError on a repeat contributor."""

    @abstractmethod
    async def list_contributions_for_landlord(self, landlord_id: int) -> list[Contribution]:
        """Contributions for one landlord, newest first."""


class DatabaseStore(StoreInterface):
    """SQLAlchemy-backed store (PostgreSQL in production, SQLite in dev/tests)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _flush_unique(self, conflict_message: str) -> None:
        """Flush pending inserts, mapping a uniqueness violation to ConflictError.

        The whole session is rolled back on conflict so nothing partial remains.
        """
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(f"[STORE] Uniqueness conflict: {conflict_message} ({e.orig})")
            raise ConflictError(conflict_message) from e

    # ------------------------------------------------------------------
    # Landlords
    # ------------------------------------------------------------------

    async def get_landlord(self, landlord_id: int, for_update: bool = False) -> Optional[Landlord]:
        query = select(Landlord).where(Landlord.id == landlord_id)
        if for_update:
            # Serializes recomputes for one landlord; ignored by SQLite,
            # which serializes writers anyway. Refresh any identity-map copy
            # so unchanged-looking values are still written.
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_landlord_by_name(self, name: str) -> Optional[Landlord]:
        result = await self.db.execute(
            select(Landlord).where(func.lower(Landlord.name) == name.strip().lower())
        )
        return result.scalar_one_or_none()

    async def create_landlord(
        self,
        name: str,
        location: str,
        address: Optional[str] = None,
    ) -> Landlord:
        landlord = Landlord(
            name=name.strip(),
            location=location.strip(),
            address=address,
            average_rating=0,
            total_reviews=0,
            deposit_return_rating=0,
            responsiveness_rating=0,
            ethics_rating=0,
            maintenance_rating=0,
            communication_rating=0,
        )
        self.db.add(landlord)
        await self._flush_unique("Landlord already exists")
        return landlord

    async def search_landlords(self, query: str = "", location: Optional[str] = None) -> list[Landlord]:
        conditions = []

        if query:
            pattern = f"%{_escape_like(query.lower())}%"
            conditions.append(
                or_(
                    func.lower(Landlord.name).like(pattern, escape="\\"),
                    func.lower(func.coalesce(Landlord.address, "")).like(pattern, escape="\\"),
                )
            )

        tokens = location_tokens(location)
        if tokens:
            token_conditions = []
            for token in tokens:
                pattern = f"%{_escape_like(token)}%"
                token_conditions.append(
                    or_(
                        func.lower(Landlord.location).like(pattern, escape="\\"),
                        func.lower(func.coalesce(Landlord.address, "")).like(pattern, escape="\\"),
                    )
                )
            # Loose match: any one token in the location or the address.
            conditions.append(or_(*token_conditions))

        stmt = select(Landlord)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        result = await self.db.execute(stmt.order_by(Landlord.id.desc()))
        return list(result.scalars().all())

    async def list_landlords(self) -> list[Landlord]:
        result = await self.db.execute(select(Landlord).order_by(Landlord.id.desc()))
        return list(result.scalars().all())

    async def apply_rating_summary(self, landlord: Landlord, values: dict[str, float], total_reviews: int) -> None:
        for field, value in values.items():
            setattr(landlord, field, value)
        landlord.total_reviews = total_reviews
        await self.db.flush()

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    async def get_review(self, review_id: int) -> Optional[Review]:
        result = await self.db.execute(select(Review).where(Review.id == review_id))
        return result.scalar_one_or_none()

    async def create_review(self, landlord_id: int, **fields) -> Review:
        review = Review(
            landlord_id=landlord_id,
            helpful_votes=0,
            not_helpful_votes=0,
            **fields,
        )
        self.db.add(review)
        await self.db.flush()
        return review

    async def list_reviews_for_landlord(self, landlord_id: int) -> list[Review]:
        result = await self.db.execute(
            select(Review)
            .where(Review.landlord_id == landlord_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(result.scalars().all())

    async def list_reviews(self) -> list[Review]:
        result = await self.db.execute(
            select(Review).order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(result.scalars().all())

    async def list_rating_rows(self, landlord_id: int) -> list[tuple[int, ...]]:
        columns = [getattr(Review, col) for col in RATING_COLUMNS]
        result = await self.db.execute(select(*columns).where(Review.landlord_id == landlord_id))
        return [tuple(row) for row in result.all()]

    # ------------------------------------------------------------------
    # Votes
    # ------------------------------------------------------------------

    async def create_vote(self, review_id: int, voter_identity: str, is_helpful: bool) -> Vote:
        vote = Vote(
            review_id=review_id,
            voter_identity=voter_identity,
            is_helpful=is_helpful,
        )
        self.db.add(vote)
        await self._flush_unique("You have already voted on this review")
        return vote

    async def increment_review_votes(self, review_id: int, is_helpful: bool) -> None:
        # Relative update in SQL; never read-modify-write in Python.
        if is_helpful:
            values = {"helpful_votes": Review.helpful_votes + 1}
        else:
            values = {"not_helpful_votes": Review.not_helpful_votes + 1}
        await self.db.execute(
            update(Review)
            .where(Review.id == review_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    # ------------------------------------------------------------------
    # Contributions
    # ------------------------------------------------------------------

    async def get_contribution(self, contributor_identity: str, landlord_id: int) -> Optional[Contribution]:
        result = await self.db.execute(
            select(Contribution).where(
                Contribution.contributor_identity == contributor_identity,
                Contribution.landlord_id == landlord_id,
            )
        )
        return result.scalar_one_or_none()

    async def create_contribution(
        self,
        landlord_id: int,
        contributor_identity: str,
        suggested_name: str,
        how_you_know: str,
        contact_info: Optional[str] = None,
    ) -> Contribution:
        contribution = Contribution(
            landlord_id=landlord_id,
            contributor_identity=contributor_identity,
            suggested_name=suggested_name,
            how_you_know=how_you_know,
            contact_info=contact_info,
        )
        self.db.add(contribution)
        await self._flush_unique("You have already contributed information for this property")
        return contribution

    async def list_contributions_for_landlord(self, landlord_id: int) -> list[Contribution]:
        result = await self.db.execute(
            select(Contribution)
            .where(Contribution.landlord_id == landlord_id)
            .order_by(Contribution.created_at.desc(), Contribution.id.desc())
        )
        return list(result.scalars().all())
