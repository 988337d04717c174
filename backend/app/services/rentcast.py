"""
Landlord Ledger - RentCast Client

Property search against the RentCast API. Property records are grouped by
owner / management company into landlord candidates.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from app.core.config import get_settings
from app.core.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)

UNKNOWN_OWNER_PREFIX = "Unknown Owner"

# Keys checked, in order, for a landlord name on a property record.
OWNER_NAME_KEYS = ("propertyManager", "managementCompany", "landlord", "ownerName")


@dataclass
class ExternalLandlord:
    """A landlord candidate derived from one or more property records."""

    name: str
    location: str
    addresses: list[str] = field(default_factory=list)
    city: Optional[str] = None
    state: Optional[str] = None
    has_verified_name: bool = True

    @property
    def address(self) -> Optional[str]:
        if not self.addresses:
            return None
        if len(self.addresses) == 1:
            return self.addresses[0]
        return f"{len(self.addresses)} properties"

    @property
    def lookup_address(self) -> Optional[str]:
        """First street address, for per-property owner lookups."""
        return self.addresses[0] if self.addresses else None


def build_search_params(query: str, location: Optional[str], limit: int) -> dict[str, Any]:
    """Translate free-text query/location into RentCast query parameters.

    "City, ST" becomes city/state; any other location is sent as an address.
    A non-empty query always wins the address slot.
    """
    params: dict[str, Any] = {"limit": limit}

    if location:
        parts = [part.strip() for part in location.split(",")]
        if len(parts) >= 2 and parts[0] and parts[1]:
            params["city"] = parts[0]
            params["state"] = parts[1]
        else:
            params["address"] = location.strip()

    if query:
        params["address"] = query.strip()

    return params


def _owner_name(prop: dict[str, Any]) -> Optional[str]:
    for key in OWNER_NAME_KEYS:
        value = prop.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    owner = prop.get("owner")
    if isinstance(owner, dict):
        names = owner.get("names") or []
        for name in names:
            if isinstance(name, str) and name.strip():
                return name.strip()
    return None


def _property_address(prop: dict[str, Any]) -> Optional[str]:
    for key in ("formattedAddress", "address", "addressLine1"):
        value = prop.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def convert_properties_to_landlords(properties: list[dict[str, Any]]) -> list[ExternalLandlord]:
    """Group property records into landlord candidates.

    Grouping key is lowercased name + "City, ST". A property with no named
    owner becomes its own "Unknown Owner: <address>" candidate so that it can
    receive ownership contributions.
    """
    grouped: dict[str, ExternalLandlord] = {}

    for prop in properties:
        if not isinstance(prop, dict):
            continue

        city = (prop.get("city") or "").strip()
        state = (prop.get("state") or "").strip()
        location = ", ".join(part for part in (city, state) if part) or "Location not specified"
        address = _property_address(prop)

        name = _owner_name(prop)
        verified = name is not None
        if name is None:
            name = f"{UNKNOWN_OWNER_PREFIX}: {address}" if address else f"{UNKNOWN_OWNER_PREFIX}: {location}"

        key = f"{name.lower()}-{location.lower()}"
        landlord = grouped.get(key)
        if landlord is None:
            landlord = ExternalLandlord(
                name=name,
                location=location,
                city=city or None,
                state=state or None,
                has_verified_name=verified,
            )
            grouped[key] = landlord

        if address and address not in landlord.addresses:
            landlord.addresses.append(address)

    return list(grouped.values())


class RentCastClient:
    """
    Client for the RentCast property API.

    Every call is bounded by ``timeout``. Failures raise
    ``UpstreamUnavailableError``; callers decide how to degrade.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.rentcast.io/v1",
        timeout: float = 10.0,
        limit: int = 50,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.limit = limit
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            headers={
                "X-Api-Key": self.api_key or "",
                "Accept": "application/json",
            },
            timeout=self.timeout,
        )

    async def fetch_properties(self, query: str, location: Optional[str] = None) -> list[dict[str, Any]]:
        """Raw property records matching the query/location."""
        if not self.enabled:
            raise UpstreamUnavailableError("RentCast API key not configured")

        params = build_search_params(query, location, self.limit)
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/properties", params=params)
        except httpx.TimeoutException as e:
            logger.warning(f"[RENTCAST] Property search timed out after {self.timeout}s")
            raise UpstreamUnavailableError("RentCast request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"[RENTCAST] Property search error: {e}")
            raise UpstreamUnavailableError("RentCast request failed") from e

        if response.status_code != 200:
            logger.warning(f"[RENTCAST] Property search failed: {response.status_code}")
            raise UpstreamUnavailableError(f"RentCast returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"[RENTCAST] Invalid JSON in response: {e}")
            raise UpstreamUnavailableError("RentCast returned invalid JSON") from e

        if isinstance(data, dict):
            data = data.get("properties", [])
        if not isinstance(data, list):
            raise UpstreamUnavailableError("RentCast returned an unexpected payload")

        logger.info(f"[RENTCAST] {len(data)} properties for query={query!r} location={location!r}")
        return data

    async def search_properties(self, query: str, location: Optional[str] = None) -> list[ExternalLandlord]:
        """Landlord candidates for the query/location."""
        properties = await self.fetch_properties(query, location)
        return convert_properties_to_landlords(properties)


# Singleton
_rentcast_client: Optional[RentCastClient] = None


def get_rentcast_client() -> RentCastClient:
    """Get the RentCast client instance."""
    global _rentcast_client
    if _rentcast_client is None:
        settings = get_settings()
        _rentcast_client = RentCastClient(
            api_key=settings.rentcast_api_key,
            base_url=settings.rentcast_base_url,
            timeout=settings.external_timeout_seconds,
            limit=settings.rentcast_result_limit,
        )
    return _rentcast_client
