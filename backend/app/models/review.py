"""Review model."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.landlord import Landlord
    from app.models.vote import Vote


RATING_COLUMNS = (
    "overall_rating",
    "deposit_return_rating",
    "responsiveness_rating",
    "ethics_rating",
    "maintenance_rating",
    "communication_rating",
)


class Review(Base):
    """One tenant's evaluation of one landlord.

    Immutable after insert except for the vote counters.
    """

    __tablename__ = "reviews"
    __table_args__ = tuple(
        CheckConstraint(f"{col} BETWEEN 1 AND 5", name=f"ck_reviews_{col}_range")
        for col in RATING_COLUMNS
    ) + (
        CheckConstraint("helpful_votes >= 0", name="ck_reviews_helpful_votes"),
        CheckConstraint("not_helpful_votes >= 0", name="ck_reviews_not_helpful_votes"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    landlord_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("landlords.id"),
        nullable=False,
        index=True,
    )

    author_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Ratings (1-5)
    overall_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    deposit_return_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    responsiveness_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    ethics_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    maintenance_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    communication_rating: Mapped[int] = mapped_column(Integer, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    helpful_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    not_helpful_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    landlord: Mapped["Landlord"] = relationship("Landlord", back_populates="reviews")
    votes: Mapped[list["Vote"]] = relationship("Vote", back_populates="review")
