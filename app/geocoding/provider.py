"""Open-Meteo geocoding client."""

from app.config import (
    BREAKER_FAILURE_THRESHOLD,
    BREAKER_RESET_TIMEOUT_S,
    GEOCODING_URL,
    UPSTREAM_TIMEOUT_S,
)
from app.errors import ProviderUnavailableError
from app.logging_config import logger
from app.models.coordinate import Coordinate
from app.upstream.circuit_breaker import CircuitBreaker, CircuitOpenError
from app.upstream.retry import request_with_retry


class OpenMeteoGeocodingProvider:
    """Stateless lookup of city names against the geocoding search API."""

    def __init__(
        self,
        url: str = GEOCODING_URL,
        timeout: float = UPSTREAM_TIMEOUT_S,
        breaker: CircuitBreaker | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.breaker = breaker or CircuitBreaker(
            "geocoding",
            failure_threshold=BREAKER_FAILURE_THRESHOLD,
            reset_timeout_s=BREAKER_RESET_TIMEOUT_S,
        )

    def lookup(self, city_name: str) -> list[Coordinate]:
        """Return coordinate candidates for a city name, best match first.

        Args:
            city_name: City name to look up.

        Returns:
            A possibly empty list of coordinates. Empty means no match.

        Raises:
            ProviderUnavailableError: If the API fails, times out, or returns
                an invalid payload.
        """
        try:
            response = self.breaker.call(
                request_with_retry,
                url=self.url,
                params={
                    "name": city_name,
                    "count": 1,
                    "language": "en",
                    "format": "json",
                },
                timeout=self.timeout,
                event_prefix="CITY_LOOKUP",
                log_context={"city": city_name},
                error_message="City lookup failed",
                error_cls=ProviderUnavailableError,
            )
        except CircuitOpenError as exc:
            logger.warning("CITY_LOOKUP_CIRCUIT_OPEN", city=city_name)
            raise ProviderUnavailableError("City lookup unavailable") from exc

        try:
            results = response.json().get("results") or []
            return [
                Coordinate(latitude=data["latitude"], longitude=data["longitude"])
                for data in results
            ]
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            logger.error("CITY_LOOKUP_BAD_PAYLOAD", city=city_name, error=str(exc))
            raise ProviderUnavailableError("City lookup failed") from exc


geocoding_provider = OpenMeteoGeocodingProvider()
