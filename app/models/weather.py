"""Forecast payload and display models."""

from pydantic import BaseModel


class Hourly(BaseModel):
    """Parallel arrays of timestamps and temperatures."""

    time: list[str]
    temperature_2m: list[float]


class WeatherResponse(BaseModel):
    """Hourly forecast payload returned by the forecast API."""

    latitude: float
    longitude: float
    timezone: str
    hourly: Hourly


class Forecast(BaseModel):
    """One hourly temperature reading."""

    date: str
    temperature: str


class WeatherDisplay(BaseModel):
    """Forecast rows rendered on the weather page."""

    city: str
    forecasts: list[Forecast]

    @classmethod
    def from_api_response(cls, city: str, response: WeatherResponse) -> "WeatherDisplay":
        """Pair each hourly timestamp with its temperature.

        Args:
            city: City name as typed by the user.
            response: Parsed forecast payload.

        Returns:
            A populated WeatherDisplay model.
        """
        return cls(
            city=city,
            forecasts=[
                Forecast(date=date, temperature=str(temperature))
                for date, temperature in zip(
                    response.hourly.time, response.hourly.temperature_2m
                )
            ],
        )
