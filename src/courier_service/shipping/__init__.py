from .adapters import LocationClient
from .errors import CityNotFound, LocationUnavailable, ShippingError, ShippingValidationError
from .models import LocationCity, LocationDistance, ShippingQuote
from .service import ShippingQuoter
