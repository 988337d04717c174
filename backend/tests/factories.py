"""Test data builders and in-process fakes for external providers."""

import asyncio

import httpx

from app.services.owner_lookup import OwnerRecord
from app.services.rentcast import RentCastClient

RENTCAST_BASE_URL = "https://rentcast.test/v1"

GOOD_CONTENT = "Responsive landlord, deposit came back in full."


def ratings(value: int = 4, **overrides) -> dict[str, int]:
    """Six-category rating dict, every category set to ``value``."""
    data = {
        "overall_rating": value,
        "deposit_return_rating": value,
        "responsiveness_rating": value,
        "ethics_rating": value,
        "maintenance_rating": value,
        "communication_rating": value,
    }
    data.update(overrides)
    return data


def make_rentcast(handler) -> RentCastClient:
    """RentCast client answering from an in-process handler."""
    return RentCastClient(
        api_key="test-key",
        base_url=RENTCAST_BASE_URL,
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )


def rentcast_payload(*properties):
    """Handler returning ``properties`` for every request."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=list(properties))

    return handler


def rentcast_failure(status_code: int = 500):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"error": "boom"})

    return handler


class FakeOwnerLookup:
    """Owner lookup answering from a dict keyed by address."""

    def __init__(self, owners=None, delay: float = 0.0):
        self.owners = owners or {}
        self.delay = delay
        self.calls = []

    async def get_property_owner(self, address, city, state):
        self.calls.append((address, city, state))
        if self.delay:
            await asyncio.sleep(self.delay)
        owner_name = self.owners.get(address)
        if owner_name is None:
            return None
        return OwnerRecord(
            owner_name=owner_name,
            address=address,
            city=city,
            state=state,
            source="Web Search",
            confidence=0.3,
        )
