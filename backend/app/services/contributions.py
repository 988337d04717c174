"""Crowd-sourced landlord-name contributions."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Contribution
from app.services.store import DatabaseStore, StoreInterface

logger = logging.getLogger(__name__)


class ContributionGate:
    """Accepts one ownership suggestion per contributor per landlord.

    Contributions are advisory and never change the landlord record.
    """

    def __init__(self, db: AsyncSession, store: Optional[StoreInterface] = None):
        self.db = db
        self.store = store or DatabaseStore(db)

    async def submit_contribution(
        self,
        landlord_id: int,
        contributor_identity: str,
        suggested_name: str,
        how_you_know: str,
        contact_info: Optional[str] = None,
    ) -> Contribution:
        errors = []
        if not suggested_name or not suggested_name.strip():
            errors.append({"loc": ["suggestedName"], "msg": "Suggested name is required"})
        if not how_you_know or not how_you_know.strip():
            errors.append({"loc": ["howYouKnow"], "msg": "Tell us how you know"})
        if errors:
            raise ValidationError("Invalid input data", errors=errors)

        if not await self.store.get_landlord(landlord_id):
            raise NotFoundError("Landlord not found")

        # The unique (contributor, landlord) constraint is the real guard;
        # this lookup only avoids a doomed insert.
        if await self.store.get_contribution(contributor_identity, landlord_id):
            raise ConflictError("You have already contributed information for this property")

        contribution = await self.store.create_contribution(
            landlord_id=landlord_id,
            contributor_identity=contributor_identity,
            suggested_name=suggested_name.strip(),
            how_you_know=how_you_know.strip(),
            contact_info=contact_info.strip() if contact_info and contact_info.strip() else None,
        )
        await self.db.commit()

        logger.info(f"[CONTRIB] Contribution {contribution.id} recorded for landlord {landlord_id}")
        return contribution

    async def list_for_landlord(self, landlord_id: int) -> list[Contribution]:
        if not await self.store.get_landlord(landlord_id):
            raise NotFoundError("Landlord not found")
        return await self.store.list_contributions_for_landlord(landlord_id)
