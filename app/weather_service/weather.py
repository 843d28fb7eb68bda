"""Hourly forecast retrieval for resolved cities."""

from pydantic import ValidationError

from app.config import (
    BREAKER_FAILURE_THRESHOLD,
    BREAKER_RESET_TIMEOUT_S,
    FORECAST_URL,
    UPSTREAM_TIMEOUT_S,
)
from app.errors import WeatherUnavailableError
from app.geocoding.resolver import resolve_city
from app.logging_config import logger
from app.models.coordinate import Coordinate
from app.models.weather import WeatherDisplay, WeatherResponse
from app.upstream.circuit_breaker import CircuitBreaker, CircuitOpenError
from app.upstream.retry import request_with_retry

forecast_breaker = CircuitBreaker(
    "forecast",
    failure_threshold=BREAKER_FAILURE_THRESHOLD,
    reset_timeout_s=BREAKER_RESET_TIMEOUT_S,
)


def get_forecast(coordinate: Coordinate) -> WeatherResponse:
    """Fetch the hourly temperature forecast for a coordinate.

    Args:
        coordinate: Latitude/longitude to forecast.

    Returns:
        Parsed forecast payload.

    Raises:
        WeatherUnavailableError: If the API fails or the payload is invalid.
    """
    log_context = {"latitude": coordinate.latitude, "longitude": coordinate.longitude}
    try:
        response = forecast_breaker.call(
            request_with_retry,
            url=FORECAST_URL,
            params={
                "latitude": coordinate.latitude,
                "longitude": coordinate.longitude,
                "hourly": "temperature_2m",
            },
            timeout=UPSTREAM_TIMEOUT_S,
            event_prefix="WEATHER",
            log_context=log_context,
            error_message="Weather lookup failed",
            error_cls=WeatherUnavailableError,
        )
    except CircuitOpenError as exc:
        logger.warning("WEATHER_CIRCUIT_OPEN", **log_context)
        raise WeatherUnavailableError("Weather lookup unavailable") from exc

    try:
        return WeatherResponse.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        logger.error("WEATHER_BAD_PAYLOAD", **log_context, error=str(exc))
        raise WeatherUnavailableError("Weather lookup failed") from exc


def get_weather(city_name: str, *, store, provider) -> WeatherDisplay:
    """Return the hourly forecast display for a city.

    Args:
        city_name: City name to look up.
        store: Coordinate store used as the geocoding cache.
        provider: Geocoding provider consulted on a cache miss.

    Returns:
        Forecast rows for the city.
    """
    coordinate = resolve_city(city_name, store=store, provider=provider)
    return WeatherDisplay.from_api_response(city_name, get_forecast(coordinate))
