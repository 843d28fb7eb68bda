"""Cache-aside resolution of city names to coordinates."""

from prometheus_client import Counter

from app.errors import CityNotFoundError, DuplicateCityError, StoreWriteError
from app.logging_config import logger
from app.models.coordinate import Coordinate

CACHE_HITS = Counter("geocode_cache_hits_total", "City lookups served from the store")
CACHE_MISSES = Counter(
    "geocode_cache_misses_total", "City lookups that required the geocoding API"
)
STORE_WRITE_FAILURES = Counter(
    "geocode_store_write_failures_total",
    "Resolved cities that could not be written back to the store",
)


def resolve_city(city_name: str, *, store, provider) -> Coordinate:
    """Return coordinates for a city, consulting the store before the API.

    A miss is looked up with the provider and written back to the store. A
    failed write is logged and counted but never fails the resolution, so the
    next request for the same city simply misses again. A duplicate-key
    conflict means a concurrent request cached the city first and is ignored.

    Args:
        city_name: City name to resolve, used verbatim as the cache key.
        store: Object with ``get(name)`` and ``put(name, coordinate)``.
        provider: Object with ``lookup(name) -> list[Coordinate]``.

    Returns:
        The cached or freshly resolved coordinate.

    Raises:
        StoreUnavailableError: If the store lookup fails. The provider is
            not called.
        ProviderUnavailableError: If the geocoding API fails.
        CityNotFoundError: If the geocoding API has no match.
    """
    if (coordinate := store.get(city_name)) is not None:
        logger.info("CACHED_CITY_HIT", city=city_name)
        CACHE_HITS.inc()
        return coordinate

    logger.info("CACHE_CITY_MISS", city=city_name)
    CACHE_MISSES.inc()
    candidates = provider.lookup(city_name)
    if not candidates:
        logger.info("CITY_NOT_FOUND", city=city_name)
        raise CityNotFoundError(f"City not found: {city_name}")
    coordinate = candidates[0]

    try:
        store.put(city_name, coordinate)
    except DuplicateCityError:
        logger.info("CITY_ALREADY_CACHED", city=city_name)
    except StoreWriteError as exc:
        logger.error("CITY_CACHE_WRITE_FAILED", city=city_name, error=str(exc))
        STORE_WRITE_FAILURES.inc()
    return coordinate
