"""
Landlord Ledger - Public-Record Owner Lookup

Best-effort scraping of property owner names from county assessor sites,
with a web-search fallback for jurisdictions we have no parser for.

Low reliability by nature: every failure returns None and callers must never
block the primary search on it. The service owns one shared HTTP session,
created on first use and released by ``aclose()`` at application shutdown.

Pages are fetched as static HTML; nothing here runs JavaScript. Assessor
sites that render results client-side (NYC ACRIS, Cook County) usually come
back without an owner, so those lookups mostly end in None.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from app.core.config import get_settings

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

WEB_SEARCH_URL = "https://html.duckduckgo.com/html/"
WEB_SEARCH_CONFIDENCE = 0.3

OWNER_PATTERNS = (
    re.compile(r"owned by ([^,.\n]+)", re.IGNORECASE),
    re.compile(r"owner:?\s*([^,.\n]+)", re.IGNORECASE),
    re.compile(r"landlord:?\s*([^,.\n]+)", re.IGNORECASE),
)

MAX_OWNER_NAME_LENGTH = 255


@dataclass(frozen=True)
class OwnerRecord:
    """An owner name found for a property, with where it came from."""

    owner_name: str
    address: str
    city: str
    state: str
    source: str
    confidence: float


@dataclass(frozen=True)
class AssessorSource:
    """A county assessor page that renders the owner for an address query."""

    name: str
    state: str
    city_fragment: str
    url: str
    address_param: str
    owner_selector: str
    city: str
    confidence: float = 0.7

    def matches(self, city: str, state: str) -> bool:
        return state.lower() == self.state and self.city_fragment in city.lower()


ASSESSOR_SOURCES = (
    AssessorSource(
        name="NYC ACRIS",
        state="ny",
        city_fragment="new york",
        url="https://a836-acris.nyc.gov/DS/DocumentSearch/BBLResult",
        address_param="address",
        owner_selector=".owner-name",
        city="New York",
    ),
    AssessorSource(
        name="LA County Assessor",
        state="ca",
        city_fragment="los angeles",
        url="https://portal.assessor.lacounty.gov/parceldetail",
        address_param="address",
        owner_selector="#owner-name",
        city="Los Angeles",
    ),
    AssessorSource(
        name="Cook County Assessor",
        state="il",
        city_fragment="chicago",
        url="https://www.cookcountyassessor.com/address-search",
        address_param="address",
        owner_selector=".owner-name",
        city="Chicago",
    ),
)


def clean_owner_name(raw: Optional[str]) -> Optional[str]:
    """Collapse whitespace and drop empty or oversized values."""
    if not raw:
        return None
    name = " ".join(raw.split()).strip(" :;-")
    if not name or len(name) > MAX_OWNER_NAME_LENGTH:
        return None
    return name


def parse_assessor_owner(html: str, selector: str) -> Optional[str]:
    """First owner element on an assessor results page."""
    soup = BeautifulSoup(html, "lxml")
    element = soup.select_one(selector)
    if element is None:
        return None
    return clean_owner_name(element.get_text(" "))


def parse_search_owner(html: str) -> Optional[str]:
    """Pull an owner name out of web search result snippets."""
    soup = BeautifulSoup(html, "lxml")
    for result in soup.select(".result"):
        text = result.get_text(" ").lower()
        if not any(word in text for word in ("owner", "property", "landlord")):
            continue
        snippet = result.select_one(".result__snippet")
        if snippet is None:
            continue
        snippet_text = snippet.get_text(" ")
        for pattern in OWNER_PATTERNS:
            match = pattern.search(snippet_text)
            if match:
                name = clean_owner_name(match.group(1))
                if name:
                    return name
    return None


class OwnerLookupService:
    """
    Per-jurisdiction owner lookup.

    Routing:
    1. New York, NY -> NYC ACRIS
    2. Los Angeles, CA -> LA County Assessor
    3. Chicago, IL -> Cook County Assessor
    4. Anywhere else -> web search snippets

    ACRIS and Cook County render results with JavaScript, which the static
    HTTP session cannot execute; expect None from them in most cases.
    """

    def __init__(
        self,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport
        self._session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    @property
    def has_session(self) -> bool:
        return self._session is not None and not self._session.is_closed

    async def _get_session(self) -> httpx.AsyncClient:
        """Shared session, created on first use."""
        async with self._session_lock:
            if not self.has_session:
                self._session = httpx.AsyncClient(
                    transport=self._transport,
                    headers=HEADERS,
                    follow_redirects=True,
                    timeout=self.timeout,
                )
                logger.info("[OWNER] Scraper session opened")
            return self._session

    async def aclose(self) -> None:
        """Release the shared session."""
        async with self._session_lock:
            if self._session is not None:
                await self._session.aclose()
                self._session = None
                logger.info("[OWNER] Scraper session closed")

    async def get_property_owner(self, address: str, city: str, state: str) -> Optional[OwnerRecord]:
        """Owner of the property at ``address``, or None."""
        if not address:
            return None
        try:
            for source in ASSESSOR_SOURCES:
                if source.matches(city or "", state or ""):
                    return await self._scrape_assessor(source, address)
            return await self._scrape_web_search(address, city or "", state or "")
        except Exception as e:
            logger.error(f"[OWNER] Property owner lookup error: {e}")
            return None

    async def _scrape_assessor(self, source: AssessorSource, address: str) -> Optional[OwnerRecord]:
        try:
            session = await self._get_session()
            response = await session.get(source.url, params={source.address_param: address})
            if response.status_code != 200:
                logger.warning(f"[OWNER] {source.name} returned {response.status_code}")
                return None
            owner_name = parse_assessor_owner(response.text, source.owner_selector)
        except httpx.HTTPError as e:
            logger.error(f"[OWNER] {source.name} scraping error: {e}")
            return None

        if not owner_name:
            return None

        return OwnerRecord(
            owner_name=owner_name,
            address=address,
            city=source.city,
            state=source.state.upper(),
            source=source.name,
            confidence=source.confidence,
        )

    async def _scrape_web_search(self, address: str, city: str, state: str) -> Optional[OwnerRecord]:
        query = f'"{address}" property owner {city} {state}'.strip()
        try:
            session = await self._get_session()
            response = await session.get(WEB_SEARCH_URL, params={"q": query})
            if response.status_code != 200:
                logger.warning(f"[OWNER] Web search returned {response.status_code}")
                return None
            owner_name = parse_search_owner(response.text)
        except httpx.HTTPError as e:
            logger.error(f"[OWNER] Web search scraping error: {e}")
            return None

        if not owner_name:
            return None

        return OwnerRecord(
            owner_name=owner_name,
            address=address,
            city=city,
            state=state,
            source="Web Search",
            confidence=WEB_SEARCH_CONFIDENCE,
        )


# Singleton
_owner_lookup: Optional[OwnerLookupService] = None


def get_owner_lookup() -> OwnerLookupService:
    """Get the owner lookup service instance."""
    global _owner_lookup
    if _owner_lookup is None:
        settings = get_settings()
        _owner_lookup = OwnerLookupService(timeout=settings.owner_lookup_timeout_seconds)
    return _owner_lookup


async def close_owner_lookup() -> None:
    """Release the scraper session on shutdown."""
    if _owner_lookup is not None:
        await _owner_lookup.aclose()
