"""Tests for the location client and the shipping quoter."""

from unittest.mock import MagicMock

import pytest
import requests

from courier_service.shipping import (
    CityNotFound,
    LocationCity,
    LocationClient,
    LocationDistance,
    LocationUnavailable,
    ShippingQuoter,
    ShippingValidationError,
)
from courier_service.shipping.service import parse_city_name


def _response(status_code: int = 200, payload: object = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


SAO_PAULO = {"id": "sp-id", "name": "São Paulo", "stateCode": "SP", "countryCode": "BRA"}
RECIFE = {"id": "rec-id", "name": "Recife", "stateCode": "PE", "countryCode": "BRA"}


# ── LocationClient ───────────────────────────────────────────────────────────


class TestLocationClient:
    def test_search_cities_parses_payload(self):
        session = MagicMock()
        session.get.return_value = _response(payload=[SAO_PAULO])
        client = LocationClient("http://location.test/", timeout=3, session=session)

        cities = client.search_cities("São Paulo")

        assert cities == [LocationCity(id="sp-id", name="São Paulo", state_code="SP", country_code="BRA")]
        session.get.assert_called_once_with(
            "http://location.test/cities", params={"query": "São Paulo"}, timeout=3
        )

    def test_distance_parses_payload(self):
        session = MagicMock()
        session.get.return_value = _response(payload={"kilometers": 2128.5})
        client = LocationClient("http://location.test", session=session)

        distance = client.calculate_distance_between_cities("sp-id", "rec-id")

        assert distance == LocationDistance(kilometers=2128.5)
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"originCityId": "sp-id", "destinationCityId": "rec-id"}

    def test_requires_arguments(self):
        session = MagicMock()
        client = LocationClient("http://location.test", session=session)
        with pytest.raises(ValueError, match="Validation error"):
            client.search_cities("")
        with pytest.raises(ValueError, match="Validation error"):
            client.calculate_distance_between_cities("sp-id", "")
        session.get.assert_not_called()

    def test_http_error_is_unavailable(self):
        session = MagicMock()
        session.get.return_value = _response(500, {"message": "Internal server error"})
        client = LocationClient("http://location.test", session=session)
        with pytest.raises(LocationUnavailable):
            client.search_cities("Recife")

    def test_transport_error_is_unavailable(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("refused")
        client = LocationClient("http://location.test", session=session)
        with pytest.raises(LocationUnavailable):
            client.search_cities("Recife")

    def test_malformed_payload_is_unavailable(self):
        session = MagicMock()
        session.get.return_value = _response(payload={"error": "Location not found"})
        client = LocationClient("http://location.test", session=session)
        with pytest.raises(LocationUnavailable):
            client.search_cities("Recife")


# ── ShippingQuoter ───────────────────────────────────────────────────────────


def _locations(cities_by_query: dict[str, list[LocationCity]], kilometers: float = 100.0) -> MagicMock:
    locations = MagicMock(spec=LocationClient)
    locations.search_cities.side_effect = lambda query: cities_by_query.get(query, [])
    locations.calculate_distance_between_cities.return_value = LocationDistance(kilometers=kilometers)
    return locations


def test_parse_city_name():
    assert parse_city_name("Recife, PE") == ("Recife", "PE")
    assert parse_city_name("  Campinas ,sp ") == ("Campinas", "SP")
    assert parse_city_name("Recife") == ("Recife", None)


@pytest.mark.asyncio
async def test_quote_resolves_cities_and_computes_cost():
    locations = _locations(
        {
            "São Paulo": [LocationCity.from_payload(SAO_PAULO)],
            "Recife": [LocationCity.from_payload(RECIFE)],
        },
        kilometers=2000.0,
    )
    quoter = ShippingQuoter(locations, base_fee_cents=500, rate_per_km_kg_cents=0.5)

    quote = await quoter.quote("São Paulo, SP", "Recife, PE", 10, 0.1)

    assert quote.distance_in_kilometers == 2000.0
    # billable weight is max(10 kg, 0.1 L * 0.3) = 10 kg
    assert quote.cost_in_cents == 500 + 2000 * 10 * 0.5
    locations.calculate_distance_between_cities.assert_called_once_with("sp-id", "rec-id")
    assert quote.to_dict() == {"distanceInKilometers": 2000.0, "costInCents": 10500}


@pytest.mark.asyncio
async def test_quote_picks_city_in_requested_state():
    locations = _locations(
        {
            "Campinas": [
                LocationCity(id="cg-ms", name="Campinas", state_code="MS"),
                LocationCity(id="cg-sp", name="Campinas", state_code="SP"),
            ],
            "Recife": [LocationCity.from_payload(RECIFE)],
        }
    )
    await ShippingQuoter(locations).quote("Campinas, SP", "Recife, PE", 1, 1)
    locations.calculate_distance_between_cities.assert_called_once_with("cg-sp", "rec-id")


def test_bulky_parcels_are_billed_by_volume():
    quoter = ShippingQuoter(MagicMock(spec=LocationClient), base_fee_cents=0, rate_per_km_kg_cents=1)
    # 100 L * 0.3 kg/L = 30 kg billable, more than the 2 kg actual weight
    assert quoter.cost_in_cents(10, 2, 100) == 300


@pytest.mark.asyncio
async def test_unknown_city_is_not_found():
    locations = _locations({"Recife": [LocationCity.from_payload(RECIFE)]})
    with pytest.raises(CityNotFound):
        await ShippingQuoter(locations).quote("Cidade Inexistente, XX", "Recife, PE", 10, 0.1)
    locations.calculate_distance_between_cities.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "origin,destination,weight,volume",
    [
        ("", "Recife, PE", 10, 0.1),
        ("São Paulo, SP", " , PE", 10, 0.1),
        ("São Paulo, SP", "Recife, PE", 0, 0.1),
        ("São Paulo, SP", "Recife, PE", 10, -1),
        ("São Paulo, SP", "Recife, PE", float("nan"), 0.1),
    ],
)
async def test_invalid_input_is_rejected_before_any_lookup(origin, destination, weight, volume):
    locations = _locations({})
    with pytest.raises(ShippingValidationError):
        await ShippingQuoter(locations).quote(origin, destination, weight, volume)
    locations.search_cities.assert_not_called()


@pytest.mark.asyncio
async def test_location_failure_propagates():
    locations = MagicMock(spec=LocationClient)
    locations.search_cities.side_effect = LocationUnavailable("GET /cities returned 500")
    with pytest.raises(LocationUnavailable):
        await ShippingQuoter(locations).quote("São Paulo, SP", "Recife, PE", 10, 0.1)


@pytest.mark.asyncio
async def test_same_state_quote_has_no_cost():
    locations = _locations(
        {
            "São Paulo": [LocationCity.from_payload(SAO_PAULO)],
            "Campinas": [LocationCity(id="cg-sp", name="Campinas", state_code="sp")],
        },
        kilometers=95.0,
    )

    quote = await ShippingQuoter(locations).quote("São Paulo, SP", "Campinas, SP", 10, 0.1)

    assert quote.distance_in_kilometers == 95.0
    assert quote.cost_in_cents is None
    assert quote.to_dict() == {"distanceInKilometers": 95.0, "costInCents": None}


@pytest.mark.asyncio
async def test_cities_without_state_code_are_charged():
    locations = _locations(
        {
            "Lisboa": [LocationCity(id="lis", name="Lisboa")],
            "Porto": [LocationCity(id="opo", name="Porto")],
        },
        kilometers=300.0,
    )
    quote = await ShippingQuoter(locations, base_fee_cents=0, rate_per_km_kg_cents=1).quote("Lisboa", "Porto", 1, 1)
    assert quote.cost_in_cents == 300
