"""Health checks for the database and the external forecast API."""

import httpx

from app.config import FORECAST_URL
from app.geocoding.store import coordinate_store
from app.logging_config import logger
from app.models.health import ServiceStatus


def is_database_available() -> ServiceStatus:
    """Check database connectivity.

    Returns:
        ServiceStatus.available when the database responds, else not_available.
    """
    if coordinate_store().ping():
        return ServiceStatus.available
    logger.error("DATABASE_UNAVAILABLE")
    return ServiceStatus.not_available


async def is_weather_api_available() -> bool:
    """Check the external forecast API for availability.

    Returns:
        True if the API responds with hourly forecast data.
    """
    try:
        async with httpx.AsyncClient(timeout=5) as client:
            response = await client.get(
                FORECAST_URL,
                params={"latitude": 51.5, "longitude": 0.12, "hourly": "temperature_2m"},
            )
            return response.status_code == 200 and "hourly" in response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("WEATHER_API_UNAVAILABLE", error=str(exc))
        return False
