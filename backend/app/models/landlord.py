"""Landlord model."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Float, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.review import Review
    from app.models.contribution import Contribution


class Landlord(Base):
    """A person or company managing one or more rental properties.

    Rating fields and ``total_reviews`` are derived from the landlord's
    reviews and are only written by the rating aggregator.
    """

    __tablename__ = "landlords"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Ratings (computed from reviews)
    average_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    total_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    deposit_return_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    responsiveness_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    ethics_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    maintenance_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    communication_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)

    # Relationships
    reviews: Mapped[list["Review"]] = relationship("Review", back_populates="landlord")
    contributions: Mapped[list["Contribution"]] = relationship(
        "Contribution", back_populates="landlord"
    )


# Names are unique case-insensitively; duplicate creates fail here.
Index("uq_landlords_name_lower", func.lower(Landlord.name), unique=True)
