class ShippingError(Exception):
    message = "Shipping error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class ShippingValidationError(ShippingError):
    message = "Validation error"


class CityNotFound(ShippingError):
    message = "City not found"


class LocationUnavailable(ShippingError):
    """The location API could not be reached or answered with an error."""

    message = "Internal server error"
