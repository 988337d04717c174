"""Contribution model."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.landlord import Landlord


class Contribution(Base):
    """A crowd-submitted suggestion for who really owns a property.

    Advisory only: promoting a suggested name onto the landlord is a manual step.
    """

    __tablename__ = "landlord_contributions"
    __table_args__ = (
        UniqueConstraint(
            "contributor_identity", "landlord_id", name="uq_contributions_contributor_landlord"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    landlord_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("landlords.id"),
        nullable=False,
        index=True,
    )

    suggested_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_info: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    how_you_know: Mapped[str] = mapped_column(Text, nullable=False)
    contributor_identity: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    landlord: Mapped["Landlord"] = relationship("Landlord", back_populates="contributions")
