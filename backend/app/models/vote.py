"""Vote model."""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.review import Review


class Vote(Base):
    """A helpful/not-helpful judgment on a review.

    ``(review_id, voter_identity)`` is the uniqueness key: one vote per voter
    per review, never overwritten.
    """

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("review_id", "voter_identity", name="uq_votes_review_voter"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    review_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reviews.id"),
        nullable=False,
        index=True,
    )
    voter_identity: Mapped[str] = mapped_column(String(255), nullable=False)
    is_helpful: Mapped[bool] = mapped_column(Boolean, nullable=False)

    review: Mapped["Review"] = relationship("Review", back_populates="votes")
