import asyncio
import logging
import math

from .adapters import LocationClient
from .errors import CityNotFound, ShippingValidationError
from .models import LocationCity, ShippingQuote

logger = logging.getLogger(__name__)

# kilograms per liter used to turn volume into a billable weight
VOLUMETRIC_FACTOR_KG_PER_L = 0.3


def parse_city_name(value: str) -> tuple[str, str | None]:
    """Split "Recife, PE" into ("Recife", "PE"); the state part is optional."""
    city, _, state = value.partition(",")
    return city.strip(), (state.strip().upper() or None)


class ShippingQuoter:
    def __init__(
        self,
        locations: LocationClient,
        *,
        base_fee_cents: float = 500,
        rate_per_km_kg_cents: float = 0.5,
    ) -> None:
        self._locations = locations
        self._base_fee = base_fee_cents
        self._rate = rate_per_km_kg_cents

    async def quote(
        self,
        origin_city_name: str,
        destination_city_name: str,
        weight_in_kilograms: float,
        volume_in_liters: float,
    ) -> ShippingQuote:
        origin_name, origin_state = parse_city_name(origin_city_name or "")
        destination_name, destination_state = parse_city_name(destination_city_name or "")
        if not origin_name or not destination_name:
            raise ShippingValidationError()
        if not _positive(weight_in_kilograms) or not _positive(volume_in_liters):
            raise ShippingValidationError()

        origin = await self._resolve(origin_name, origin_state)
        destination = await self._resolve(destination_name, destination_state)
        distance = await asyncio.to_thread(
            self._locations.calculate_distance_between_cities, origin.id, destination.id
        )

        cost: int | None = None
        if not _same_state(origin, destination):
            cost = self.cost_in_cents(distance.kilometers, weight_in_kilograms, volume_in_liters)
        logger.info(
            "quoted %s -> %s: %.1f km, %s cents",
            origin_city_name, destination_city_name, distance.kilometers, cost,
        )
        return ShippingQuote(distance_in_kilometers=distance.kilometers, cost_in_cents=cost)

    def cost_in_cents(self, kilometers: float, weight_in_kilograms: float, volume_in_liters: float) -> int:
        billable = max(weight_in_kilograms, volume_in_liters * VOLUMETRIC_FACTOR_KG_PER_L)
        return int(round(self._base_fee + kilometers * billable * self._rate))

    async def _resolve(self, name: str, state_code: str | None) -> LocationCity:
        cities = await asyncio.to_thread(self._locations.search_cities, name)
        for city in cities:
            if (city.name or "").casefold() != name.casefold():
                continue
            if state_code and (city.state_code or "").upper() != state_code:
                continue
            return city
        logger.info("no city matched %r (state=%s) among %d results", name, state_code, len(cities))
        raise CityNotFound()


def _same_state(origin: LocationCity, destination: LocationCity) -> bool:
    """Deliveries within one state carry no quoted cost."""
    if not origin.state_code or not destination.state_code:
        return False
    return origin.state_code.upper() == destination.state_code.upper()


def _positive(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0
