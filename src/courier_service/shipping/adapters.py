import requests

from .errors import LocationUnavailable
from .models import LocationCity, LocationDistance


class LocationClient:
    """Blocking client for the location API (city search and distances)."""

    def __init__(self, base_url: str, *, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self._base = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def search_cities(self, query: str) -> list[LocationCity]:
        if not query:
            raise ValueError("Validation error: query is required")
        data = self._get("/cities", {"query": query})
        if not isinstance(data, list):
            raise LocationUnavailable("location API returned a malformed city list")
        try:
            return [LocationCity.from_payload(item) for item in data]
        except (KeyError, TypeError, AttributeError) as e:
            raise LocationUnavailable(f"location API returned a malformed city: {e}") from e

    def calculate_distance_between_cities(self, origin_city_id: str, destination_city_id: str) -> LocationDistance:
        if not origin_city_id or not destination_city_id:
            raise ValueError("Validation error: both city IDs are required")
        data = self._get(
            "/cities/distances",
            {"originCityId": origin_city_id, "destinationCityId": destination_city_id},
        )
        try:
            return LocationDistance(kilometers=float(data["kilometers"]))  # type: ignore[index]
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable(f"location API returned a malformed distance: {e}") from e

    def close(self) -> None:
        self._session.close()

    def _get(self, path: str, params: dict[str, str]) -> object:
        try:
            resp = self._session.get(f"{self._base}{path}", params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise LocationUnavailable(f"GET {path} failed: {e}") from e
        if resp.status_code >= 400:
            raise LocationUnavailable(f"GET {path} returned {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise LocationUnavailable(f"GET {path} returned invalid JSON") from e
