"""RentCast client: request building, failure mapping and landlord grouping."""

import httpx
import pytest

from app.core.exceptions import UpstreamUnavailableError
from app.services.rentcast import RentCastClient, build_search_params, convert_properties_to_landlords
from tests.factories import RENTCAST_BASE_URL, make_rentcast, rentcast_failure, rentcast_payload

ELM_STREET = {
    "formattedAddress": "10 Elm St, Frederick, MD 21701",
    "city": "Frederick",
    "state": "MD",
    "propertyManager": "Elm Street Management",
}


class TestBuildSearchParams:
    def test_city_state_location(self):
        assert build_search_params("", "Frederick, MD", 50) == {
            "limit": 50,
            "city": "Frederick",
            "state": "MD",
        }

    def test_other_location_sent_as_address(self):
        assert build_search_params("", "21701", 10) == {"limit": 10, "address": "21701"}

    def test_query_takes_address_slot(self):
        params = build_search_params("10 Elm St", "Frederick, MD", 50)

        assert params["address"] == "10 Elm St"
        assert params["city"] == "Frederick"


class TestConvertPropertiesToLandlords:
    def test_groups_properties_by_manager_and_location(self):
        second = dict(ELM_STREET, formattedAddress="12 Elm St, Frederick, MD 21701")

        landlords = convert_properties_to_landlords([ELM_STREET, second])

        assert len(landlords) == 1
        landlord = landlords[0]
        assert landlord.name == "Elm Street Management"
        assert landlord.location == "Frederick, MD"
        assert landlord.address == "2 properties"
        assert landlord.lookup_address == "10 Elm St, Frederick, MD 21701"

    def test_single_property_keeps_its_address(self):
        landlords = convert_properties_to_landlords([ELM_STREET])

        assert landlords[0].address == "10 Elm St, Frederick, MD 21701"
        assert landlords[0].has_verified_name is True

    def test_owner_names_used_when_no_manager(self):
        prop = {
            "addressLine1": "5 Pine Rd",
            "city": "Frederick",
            "state": "MD",
            "owner": {"names": ["Pine Road Trust"]},
        }

        assert convert_properties_to_landlords([prop])[0].name == "Pine Road Trust"

    def test_unknown_owner_named_after_address(self):
        prop = {"formattedAddress": "7 Birch Ln, Frederick, MD 21701", "city": "Frederick", "state": "MD"}

        landlord = convert_properties_to_landlords([prop])[0]

        assert landlord.name == "Unknown Owner: 7 Birch Ln, Frederick, MD 21701"
        assert landlord.has_verified_name is False

    def test_unknown_owners_not_grouped_together(self):
        props = [
            {"formattedAddress": "1 A St", "city": "Frederick", "state": "MD"},
            {"formattedAddress": "2 B St", "city": "Frederick", "state": "MD"},
        ]

        assert len(convert_properties_to_landlords(props)) == 2

    def test_non_dict_records_skipped(self):
        assert convert_properties_to_landlords(["junk", None, ELM_STREET])[0].name == "Elm Street Management"


class TestRentCastClient:
    async def test_search_sends_key_and_params(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("X-Api-Key")
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=[ELM_STREET])

        landlords = await make_rentcast(handler).search_properties("", "Frederick, MD")

        assert seen["url"].startswith(f"{RENTCAST_BASE_URL}/properties")
        assert seen["key"] == "test-key"
        assert seen["params"]["city"] == "Frederick"
        assert seen["params"]["state"] == "MD"
        assert [landlord.name for landlord in landlords] == ["Elm Street Management"]

    async def test_wrapped_payload_accepted(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"properties": [ELM_STREET]})

        assert len(await make_rentcast(handler).fetch_properties("", "Frederick, MD")) == 1

    async def test_non_200_raises(self):
        with pytest.raises(UpstreamUnavailableError):
            await make_rentcast(rentcast_failure(503)).search_properties("", "Frederick, MD")

    async def test_timeout_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamUnavailableError):
            await make_rentcast(handler).search_properties("", "Frederick, MD")

    async def test_invalid_json_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>not json</html>")

        with pytest.raises(UpstreamUnavailableError):
            await make_rentcast(handler).fetch_properties("", "Frederick, MD")

    async def test_missing_key_raises_without_calling(self):
        client = RentCastClient(api_key=None)

        assert client.enabled is False
        with pytest.raises(UpstreamUnavailableError):
            await client.search_properties("", "Frederick, MD")

    async def test_empty_result(self):
        assert await make_rentcast(rentcast_payload()).search_properties("", "Nowhere, ZZ") == []
