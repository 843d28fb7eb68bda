"""Exception hierarchy for geocoding, storage, and upstream failures."""


class ForecastServiceError(Exception):
    """Base exception for forecast service failures."""
    pass


class CityNotFoundError(ForecastServiceError):
    """Raised when the geocoding API returns no results for a name."""
    pass


class ExternalAPIError(ForecastServiceError):
    """Raised when an upstream API fails or returns an unusable payload."""
    pass


class ProviderUnavailableError(ExternalAPIError):
    """Raised when the geocoding API cannot be reached or misbehaves."""
    pass


class WeatherUnavailableError(ExternalAPIError):
    """Raised when the forecast API cannot be reached or misbehaves."""
    pass


class StoreUnavailableError(ForecastServiceError):
    """Raised when the coordinate store cannot be read."""
    pass


class StoreWriteError(ForecastServiceError):
    """Raised when inserting into the coordinate store fails."""
    pass


class DuplicateCityError(StoreWriteError):
    """Raised when a city row already exists for the name being inserted."""
    pass
