from dataclasses import dataclass


@dataclass(frozen=True)
class LocationCity:
    id: str
    name: str | None = None
    state_name: str | None = None
    state_code: str | None = None
    country_name: str | None = None
    country_code: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "LocationCity":
        def opt(key: str) -> str | None:
            value = payload.get(key)
            return None if value is None else str(value)

        return cls(
            id=str(payload["id"]),
            name=opt("name"),
            state_name=opt("stateName"),
            state_code=opt("stateCode"),
            country_name=opt("countryName"),
            country_code=opt("countryCode"),
        )


@dataclass(frozen=True)
class LocationDistance:
    kilometers: float


@dataclass(frozen=True)
class ShippingQuote:
    distance_in_kilometers: float
    cost_in_cents: int | None

    def to_dict(self) -> dict[str, object]:
        return {
            "distanceInKilometers": self.distance_in_kilometers,
            "costInCents": self.cost_in_cents,
        }
