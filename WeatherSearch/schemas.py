"""Pydantic schemas for OpenWeather payloads.

Only the fields the app reads are declared; anything else in the payload is
ignored. Validation runs once, at the fetch boundary.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr, ValidationError

from weather_data import City, ForecastEntry, WeatherSnapshot
from weather_provider import InvalidResponseFormat, SchemaValidationError


class Condition(BaseModel):
    description: StrictStr
    icon: StrictStr


class MainReadings(BaseModel):
    temp: StrictFloat
    feels_like: StrictFloat
    humidity: StrictFloat


class Wind(BaseModel):
    speed: StrictFloat


class WeatherResponse(BaseModel):
    name: StrictStr
    weather: List[Condition] = Field(min_length=1)
    main: MainReadings
    wind: Wind

    def to_snapshot(self) -> WeatherSnapshot:
        condition = self.weather[0]
        return WeatherSnapshot(
            location_name=self.name,
            description=condition.description,
            icon_code=condition.icon,
            temperature_c=self.main.temp,
            feels_like_c=self.main.feels_like,
            humidity_pct=int(round(self.main.humidity)),
            wind_speed_ms=self.wind.speed,
        )


class ForecastTemp(BaseModel):
    temp: StrictFloat


class ForecastItem(BaseModel):
    dt: StrictInt
    main: ForecastTemp
    weather: List[Condition] = Field(min_length=1)

    def to_entry(self) -> ForecastEntry:
        return ForecastEntry(
            timestamp_unix=self.dt,
            temperature_c=self.main.temp,
            description=self.weather[0].description,
            icon_code=self.weather[0].icon,
        )


class ForecastResponse(BaseModel):
    list: List[ForecastItem]

    def to_entries(self) -> List[ForecastEntry]:
        return [item.to_entry() for item in self.list]


class GeocodeItem(BaseModel):
    name: StrictStr
    lat: StrictFloat
    lon: StrictFloat
    country: StrictStr = ""
    state: Optional[StrictStr] = None

    def to_city(self) -> City:
        return City(name=self.name, lat=self.lat, country=self.country, lon=self.lon, state=self.state)


def parse_weather(data) -> WeatherSnapshot:
    """Validate a current-weather payload and map it to a snapshot."""
    try:
        return WeatherResponse.model_validate(data).to_snapshot()
    except ValidationError as e:
        raise SchemaValidationError(
            f"Invalid weather data format received from API: {e.error_count()} error(s)",
            errors=e.errors(),
        ) from e


def parse_forecast(data) -> List[ForecastEntry]:
    """Validate a forecast payload and map it to entries, keeping feed order."""
    try:
        return ForecastResponse.model_validate(data).to_entries()
    except ValidationError as e:
        raise SchemaValidationError(
            f"Invalid forecast data format received from API: {e.error_count()} error(s)",
            errors=e.errors(),
        ) from e


def parse_geocode(data) -> List[City]:
    """Validate a geocoding payload. It must be a list of places."""
    if not isinstance(data, list):
        raise InvalidResponseFormat("Invalid response format from geocoding API")
    try:
        return [GeocodeItem.model_validate(item).to_city() for item in data]
    except ValidationError as e:
        raise InvalidResponseFormat(f"Invalid place in geocoding response: {e}") from e
