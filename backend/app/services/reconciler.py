"""Identity reconciliation across the local store, RentCast and owner lookup.

Each source yields ``LandlordCandidate`` records tagged with their
provenance. Merging is a fold over a table keyed by lowercased
name + location: the first candidate seen for a key wins. Candidates are
plain snapshots, so a rolled-back insert never invalidates results already
collected.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, UpstreamUnavailableError
from app.models import Landlord
from app.models.enums import CandidateSource, SortOrder
from app.services.owner_lookup import OwnerLookupService, OwnerRecord
from app.services.rentcast import ExternalLandlord, RentCastClient
from app.services.store import DatabaseStore, StoreInterface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LandlordCandidate:
    """A landlord as seen by one source. ``id`` is None until persisted."""

    name: str
    location: str
    source: CandidateSource
    address: Optional[str] = None
    id: Optional[int] = None
    average_rating: Optional[float] = None
    total_reviews: int = 0
    deposit_return_rating: Optional[float] = None
    responsiveness_rating: Optional[float] = None
    ethics_rating: Optional[float] = None
    maintenance_rating: Optional[float] = None
    communication_rating: Optional[float] = None
    owner_source: Optional[str] = None
    confidence: Optional[float] = None
    has_verified_name: bool = True
    confidence: Optional[float] = None
    # Where to look up the owner for external candidates
    lookup_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.name.lower(), self.location.lower())

    @classmethod
    def from_landlord(cls, landlord: Landlord, source: CandidateSource = CandidateSource.LOCAL) -> "LandlordCandidate":
        return cls(
            id=landlord.id,
            name=landlord.name,
            location=landlord.location,
            address=landlord.address,
            source=source,
            average_rating=landlord.average_rating,
            total_reviews=landlord.total_reviews or 0,
            deposit_return_rating=landlord.deposit_return_rating,
            responsiveness_rating=landlord.responsiveness_rating,
            ethics_rating=landlord.ethics_rating,
            maintenance_rating=landlord.maintenance_rating,
            communication_rating=landlord.communication_rating,
        )

    @classmethod
    def from_external(cls, external: ExternalLandlord) -> "LandlordCandidate":
        return cls(
            name=external.name,
            location=external.location,
            address=external.address,
            source=CandidateSource.EXTERNAL,
            has_verified_name=external.has_verified_name,
            lookup_address=external.lookup_address,
            city=external.city,
            state=external.state,
        )

    def with_stored(self, landlord: Landlord) -> "LandlordCandidate":
        """Adopt the stored record's id and ratings, keeping provenance."""
        stored = LandlordCandidate.from_landlord(landlord, source=self.source)
        return replace(
            stored,
            owner_source=self.owner_source,
            confidence=self.confidence,
            has_verified_name=self.has_verified_name,
        )


def merge_candidates(*sources: Iterable[LandlordCandidate]) -> list[LandlordCandidate]:
    """Fold candidate streams into a de-duplicated list, first seen wins."""
    seen: dict[tuple[str, str], LandlordCandidate] = {}
    for candidates in sources:
        for candidate in candidates:
            if candidate.key not in seen:
                seen[candidate.key] = candidate
    return list(seen.values())


def dedupe_by_id(candidates: Iterable[LandlordCandidate]) -> list[LandlordCandidate]:
    """Drop later candidates that resolved to an already-listed landlord."""
    ids: set[int] = set()
    result = []
    for candidate in candidates:
        if candidate.id is not None:
            if candidate.id in ids:
                continue
            ids.add(candidate.id)
        result.append(candidate)
    return result


def filter_and_sort(
    candidates: list[LandlordCandidate],
    sort_by: SortOrder = SortOrder.MOST_RECENT,
    min_rating: Optional[int] = None,
) -> list[LandlordCandidate]:
    """Apply the minimum-rating filter (unset counts as 0) and a sort order."""
    if min_rating is not None:
        candidates = [c for c in candidates if (c.average_rating or 0) >= min_rating]

    if sort_by == SortOrder.HIGHEST_RATED:
        return sorted(candidates, key=lambda c: c.average_rating or 0, reverse=True)
    if sort_by == SortOrder.LOWEST_RATED:
        return sorted(candidates, key=lambda c: c.average_rating or 0)
    if sort_by == SortOrder.MOST_REVIEWS:
        return sorted(candidates, key=lambda c: c.total_reviews or 0, reverse=True)
    return sorted(candidates, key=lambda c: c.id or 0, reverse=True)


class IdentityReconciler:
    """Builds landlord search results from every available source."""

    def __init__(
        self,
        db: AsyncSession,
        rentcast: Optional[RentCastClient] = None,
        owner_lookup: Optional[OwnerLookupService] = None,
        owner_lookup_timeout: float = 20.0,
        store: Optional[StoreInterface] = None,
    ):
        self.db = db
        self.store = store or DatabaseStore(db)
        self.rentcast = rentcast
        self.owner_lookup = owner_lookup
        self.owner_lookup_timeout = owner_lookup_timeout

    async def search(
        self,
        query: Optional[str] = None,
        location: Optional[str] = None,
        sort_by: SortOrder = SortOrder.MOST_RECENT,
        min_rating: Optional[int] = None,
    ) -> list[LandlordCandidate]:
        """Local matches merged with RentCast results.

        RentCast is only consulted when a query or location is given, and a
        failure there degrades to local results.
        """
        query = (query or "").strip()
        location = (location or "").strip()

        local = await self._local_candidates(query, location)
        if not query and not location:
            return filter_and_sort(local, sort_by, min_rating)

        external = await self._external_candidates(query, location)
        merged = merge_candidates(local, external)
        persisted = await self._persist_new(merged)
        return filter_and_sort(dedupe_by_id(persisted), sort_by, min_rating)

    async def enhanced_search(self, query: str, location: str) -> list[LandlordCandidate]:
        """Search enriched with public-record owner names.

        Each RentCast candidate gets an owner lookup, run concurrently and
        bounded by a timeout; a found owner replaces the candidate's name.
        """
        query = query.strip()
        location = location.strip()

        local = await self._local_candidates(query, location)
        external = await self._external_candidates(query, location)
        enriched = await self._enrich_with_owners(external)

        merged = merge_candidates(local, enriched)
        persisted = await self._persist_new(merged)
        return dedupe_by_id(persisted)

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    async def _local_candidates(self, query: str, location: str) -> list[LandlordCandidate]:
        if not query and not location:
            landlords = await self.store.list_landlords()
        else:
            landlords = await self.store.search_landlords(query, location or None)
        return [LandlordCandidate.from_landlord(landlord) for landlord in landlords]

    async def _external_candidates(self, query: str, location: str) -> list[LandlordCandidate]:
        if self.rentcast is None or not self.rentcast.enabled:
            return []
        try:
            externals = await self.rentcast.search_properties(query, location or None)
        except UpstreamUnavailableError as e:
            logger.warning(f"[RECONCILE] RentCast unavailable, using local results only: {e}")
            return []

        return [LandlordCandidate.from_external(external) for external in externals]

    async def _enrich_with_owners(self, candidates: list[LandlordCandidate]) -> list[LandlordCandidate]:
        if self.owner_lookup is None or not candidates:
            return candidates
        results = await asyncio.gather(*(self._lookup_owner(c) for c in candidates))
        enriched = []
        for candidate, owner in zip(candidates, results):
            if owner is None:
                enriched.append(candidate)
                continue
            enriched.append(
                replace(
                    candidate,
                    name=owner.owner_name,
                    source=CandidateSource.SCRAPED,
                    owner_source=owner.source,
                    confidence=owner.confidence,
                    has_verified_name=True,
                )
            )
        return enriched

    async def _lookup_owner(self, candidate: LandlordCandidate) -> Optional[OwnerRecord]:
        address = candidate.lookup_address or candidate.address
        if not address:
            return None
        city = candidate.city or candidate.location.split(",")[0].strip()
        state = candidate.state or ""
        try:
            return await asyncio.wait_for(
                self.owner_lookup.get_property_owner(address, city, state),
                timeout=self.owner_lookup_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[RECONCILE] Owner lookup timed out for {address!r}")
            return None
        except Exception as e:
            logger.error(f"[RECONCILE] Owner lookup error for {address!r}: {e}")
            return None

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _persist_new(self, candidates: list[LandlordCandidate]) -> list[LandlordCandidate]:
        """Give every not-yet-stored candidate a store id.

        Best-effort: a candidate that cannot be stored is dropped from the
        results, never failing the search.
        """
        result = []
        for candidate in candidates:
            if candidate.id is not None:
                result.append(candidate)
                continue
            stored = await self._get_or_create(candidate)
            if stored is None:
                logger.warning(f"[RECONCILE] Could not persist candidate {candidate.name!r}, dropped")
                continue
            result.append(candidate.with_stored(stored))
        return result

    async def _get_or_create(self, candidate: LandlordCandidate) -> Optional[Landlord]:
        try:
            existing = await self.store.get_landlord_by_name(candidate.name)
            if existing:
                return existing
            try:
                landlord = await self.store.create_landlord(
                    candidate.name,
                    candidate.location,
                    candidate.address,
                )
                await self.db.commit()
                logger.info(f"[RECONCILE] Stored {candidate.source.value} landlord {landlord.id} {landlord.name!r}")
                return landlord
            except ConflictError:
                # Inserted by a concurrent request since our lookup.
                return await self.store.get_landlord_by_name(candidate.name)
        except Exception as e:
            logger.error(f"[RECONCILE] Persisting {candidate.name!r} failed: {e}")
            await self.db.rollback()
            return None
