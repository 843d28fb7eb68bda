"""Coordinate model for geocoding results."""

from pydantic import BaseModel, ConfigDict


class Coordinate(BaseModel):
    """Latitude/longitude pair returned by the geocoding API."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
