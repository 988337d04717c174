"""Ownership contributions: one per contributor per landlord."""

import pytest

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.services.contributions import ContributionGate
from app.services.reviews import ReviewService


def _contribute(db, landlord_id, identity="10.0.0.1", **overrides):
    data = {
        "suggested_name": "Acme Holdings LLC",
        "how_you_know": "Name is on my lease",
        "contact_info": None,
    }
    data.update(overrides)
    return ContributionGate(db).submit_contribution(
        landlord_id=landlord_id,
        contributor_identity=identity,
        **data,
    )


class TestSubmitContribution:
    async def test_contribution_recorded(self, db, frederick_landlords):
        contribution = await _contribute(db, frederick_landlords[0].id, contact_info=" tenant@example.com ")

        assert contribution.id is not None
        assert contribution.suggested_name == "Acme Holdings LLC"
        assert contribution.contact_info == "tenant@example.com"
        assert contribution.created_at is not None

    async def test_blank_contact_info_stored_as_none(self, db, frederick_landlords):
        contribution = await _contribute(db, frederick_landlords[0].id, contact_info="   ")

        assert contribution.contact_info is None

    async def test_second_contribution_from_same_contributor_rejected(self, db, frederick_landlords):
        landlord_id = frederick_landlords[0].id
        await _contribute(db, landlord_id)

        with pytest.raises(ConflictError) as exc:
            await _contribute(db, landlord_id, suggested_name="Someone Else")

        assert "already contributed" in exc.value.message
        assert len(await ContributionGate(db).list_for_landlord(landlord_id)) == 1

    async def test_other_contributors_and_landlords_allowed(self, db, frederick_landlords):
        await _contribute(db, frederick_landlords[0].id, identity="10.0.0.1")
        await _contribute(db, frederick_landlords[0].id, identity="10.0.0.2")
        await _contribute(db, frederick_landlords[1].id, identity="10.0.0.1")

        gate = ContributionGate(db)
        assert len(await gate.list_for_landlord(frederick_landlords[0].id)) == 2
        assert len(await gate.list_for_landlord(frederick_landlords[1].id)) == 1

    async def test_missing_landlord(self, db):
        with pytest.raises(NotFoundError):
            await _contribute(db, 4242)

    async def test_requires_suggested_name_and_reason(self, db, frederick_landlords):
        with pytest.raises(ValidationError) as exc:
            await _contribute(db, frederick_landlords[0].id, suggested_name=" ", how_you_know="")

        locs = [error["loc"] for error in exc.value.errors]
        assert locs == [["suggestedName"], ["howYouKnow"]]

    async def test_contribution_does_not_rename_landlord(self, db, frederick_landlords):
        landlord_id = frederick_landlords[0].id
        await _contribute(db, landlord_id, suggested_name="Totally Different Owner")

        landlord = await ReviewService(db).get_landlord(landlord_id)
        assert landlord.name == "Frederick Property Management"

    async def test_list_for_missing_landlord(self, db):
        with pytest.raises(NotFoundError):
            await ContributionGate(db).list_for_landlord(4242)
