"""Weather and forecast fetching with response caching."""
import dataclasses
import logging
import math
from typing import List, Optional, Tuple, Union

from api_cache import TimeBoundedCache
from schemas import parse_forecast, parse_weather
from weather_data import ForecastEntry, WeatherSnapshot, daily_forecast
from weather_provider import InvalidParameters, WeatherProviderBase

Coordinate = Union[str, float]


def validate_coordinates(lat: Optional[Coordinate], lon: Optional[Coordinate]) -> Tuple[str, str]:
    """
    Check that both coordinates are present and numeric.

    Returns:
        The coordinates as text, unchanged apart from surrounding whitespace

    Raises:
        InvalidParameters: If either coordinate is missing or not a finite number
    """
    if lat is None or lon is None or str(lat).strip() == "" or str(lon).strip() == "":
        raise InvalidParameters("Missing or invalid coordinates")
    lat_text, lon_text = str(lat).strip(), str(lon).strip()
    try:
        values = (float(lat_text), float(lon_text))
    except ValueError as e:
        raise InvalidParameters(f"Invalid coordinate values: {lat!r}, {lon!r}") from e
    if not all(math.isfinite(v) for v in values):
        raise InvalidParameters(f"Invalid coordinate values: {lat!r}, {lon!r}")
    return lat_text, lon_text


class WeatherFetcher:
    """
    Fetches current weather and forecasts, caching results per coordinate pair.

    A cached response is returned until the cache window elapses; after that
    the next call goes to the provider again. Failures are not retried.
    """

    def __init__(self, provider: WeatherProviderBase, cache: TimeBoundedCache):
        self.provider = provider
        self.cache = cache

    async def current_weather(
        self,
        lat: Coordinate,
        lon: Coordinate,
        display_name: Optional[str] = None
    ) -> WeatherSnapshot:
        """
        Get current conditions for a location.

        Args:
            lat: Latitude, as text or a number
            lon: Longitude, as text or a number
            display_name: Name the user picked; replaces the API's place name

        Raises:
            InvalidParameters: If the coordinates are missing or not numeric
            SchemaValidationError: If the API response has an unexpected shape
            UpstreamError: If the API request fails
        """
        lat, lon = validate_coordinates(lat, lon)
        cache_key = f"weather-{lat}-{lon}"

        snapshot = self.cache.get(cache_key)
        if snapshot is not None:
            logging.debug(f"Using cached weather data for {lat},{lon}")
        else:
            logging.info(f"Fetching weather data for {lat},{lon}...")
            snapshot = parse_weather(await self.provider.current_weather(lat, lon))
            logging.info(f"Weather fetch successful: {snapshot.temperature_c}°C, {snapshot.description}")
            self.cache.set(cache_key, snapshot)

        if display_name:
            return dataclasses.replace(snapshot, location_name=display_name)
        return snapshot

    async def forecast(self, lat: Coordinate, lon: Coordinate) -> List[ForecastEntry]:
        """Get the full 3-hourly forecast feed for a location."""
        lat, lon = validate_coordinates(lat, lon)
        cache_key = f"forecast-{lat}-{lon}"

        entries = self.cache.get(cache_key)
        if entries is not None:
            logging.debug(f"Using cached forecast data for {lat},{lon}")
            return list(entries)

        logging.info(f"Fetching forecast data for {lat},{lon}...")
        entries = parse_forecast(await self.provider.forecast(lat, lon))
        logging.info(f"Forecast fetch successful: {len(entries)} entries")
        self.cache.set(cache_key, entries)
        return list(entries)

    async def daily_forecast(self, lat: Coordinate, lon: Coordinate) -> List[ForecastEntry]:
        """Get one forecast entry per day for the next five days."""
        return daily_forecast(await self.forecast(lat, lon))
