"""Rating aggregation.

A landlord's averages are always recomputed from the full review set and
overwritten, never adjusted by a delta, so any interleaving of recomputes
converges on the same values.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from app.models.enums import RatingCategory
from app.services.store import StoreInterface

logger = logging.getLogger(__name__)

# Order matches app.models.review.RATING_COLUMNS
CATEGORIES = (
    RatingCategory.OVERALL,
    RatingCategory.DEPOSIT_RETURN,
    RatingCategory.RESPONSIVENESS,
    RatingCategory.ETHICS,
    RatingCategory.MAINTENANCE,
    RatingCategory.COMMUNICATION,
)

_TENTHS = Decimal("0.1")


def round_rating(total: int, count: int) -> float:
    """Mean rounded half-up to one decimal place (4.25 -> 4.3)."""
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(_TENTHS, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class RatingSummary:
    """Aggregated ratings for one landlord."""

    averages: dict[RatingCategory, float]
    total_reviews: int

    def landlord_values(self) -> dict[str, float]:
        """Averages keyed by landlord column name."""
        return {category.landlord_field: value for category, value in self.averages.items()}


def aggregate_ratings(rows: Sequence[Sequence[int]]) -> Optional[RatingSummary]:
    """Average each category across a review set.

    ``rows`` holds one tuple of six ratings per review, in ``CATEGORIES``
    order. Returns None for an empty set.
    """
    count = len(rows)
    if count == 0:
        return None

    averages = {}
    for index, category in enumerate(CATEGORIES):
        total = sum(row[index] for row in rows)
        averages[category] = round_rating(total, count)

    return RatingSummary(averages=averages, total_reviews=count)


class RatingAggregator:
    """Recomputes a landlord's derived rating fields."""

    def __init__(self, store: StoreInterface):
        self.store = store

    async def recompute(self, landlord_id: int) -> Optional[RatingSummary]:
        """Re-read every review for the landlord and overwrite its averages.

        An empty review set leaves the landlord untouched. The landlord row
        is locked first so two recomputes for the same landlord cannot
        interleave their read and write.
        """
        landlord = await self.store.get_landlord(landlord_id, for_update=True)
        if landlord is None:
            logger.warning(f"[RATINGS] Recompute skipped, landlord {landlord_id} not found")
            return None

        summary = aggregate_ratings(await self.store.list_rating_rows(landlord_id))
        if summary is None:
            return None

        await self.store.apply_rating_summary(
            landlord,
            summary.landlord_values(),
            summary.total_reviews,
        )
        logger.info(
            f"[RATINGS] Landlord {landlord_id}: {summary.total_reviews} reviews, "
            f"average {summary.averages[RatingCategory.OVERALL]}"
        )
        return summary
