"""Enumeration types for the Landlord Ledger domain model."""

from enum import Enum


class SortOrder(str, Enum):
    """Result ordering for landlord listings."""
    MOST_RECENT = "most-recent"      # id descending; ids are assigned monotonically
    HIGHEST_RATED = "highest-rated"
    LOWEST_RATED = "lowest-rated"
    MOST_REVIEWS = "most-reviews"


class CandidateSource(str, Enum):
    """Where a landlord candidate was discovered."""
    LOCAL = "local"          # Persistent store
    EXTERNAL = "external"    # Property-search provider
    SCRAPED = "scraped"      # Public-record owner lookup


class RatingCategory(str, Enum):
    """Rated categories; each maps to a review column and a landlord average."""
    OVERALL = "overall"
    DEPOSIT_RETURN = "deposit_return"
    RESPONSIVENESS = "responsiveness"
    ETHICS = "ethics"
    MAINTENANCE = "maintenance"
    COMMUNICATION = "communication"

    @property
    def review_field(self) -> str:
        return f"{self.value}_rating"

    @property
    def landlord_field(self) -> str:
        if self is RatingCategory.OVERALL:
            return "average_rating"
        return f"{self.value}_rating"
