"""OpenWeather geocoding, current weather and forecast provider."""
import asyncio
import logging
import requests
from typing import Any, Dict
from weather_provider import WeatherProviderBase, UpstreamError


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the free OpenWeather 2.5 and Geocoding 1.0 APIs.

    Requests are made with `requests` on a worker thread so callers on the
    event loop are not blocked while a response is in flight.
    """

    WEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
    GEO_BASE_URL = "https://api.openweathermap.org/geo/1.0"
    # Snapshot and forecast fields are Celsius and m/s
    UNITS = "metric"

    def __init__(
        self,
        api_key: str,
        weather_base_url: str = WEATHER_BASE_URL,
        geo_base_url: str = GEO_BASE_URL,
        timeout: int = 10
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            weather_base_url: Base URL of the weather/forecast endpoints
            geo_base_url: Base URL of the geocoding endpoint
            timeout: HTTP request timeout in seconds
        """
        self.api_key = api_key
        self.weather_base_url = weather_base_url.rstrip("/")
        self.geo_base_url = geo_base_url.rstrip("/")
        self.timeout = timeout

    async def geocode(self, query: str, limit: int) -> Any:
        params = {"q": query, "limit": limit, "appid": self.api_key}
        return await self._fetch(f"{self.geo_base_url}/direct", params)

    async def current_weather(self, lat: str, lon: str) -> Any:
        params = {"lat": lat, "lon": lon, "appid": self.api_key, "units": self.UNITS}
        return await self._fetch(f"{self.weather_base_url}/weather", params)

    async def forecast(self, lat: str, lon: str) -> Any:
        params = {"lat": lat, "lon": lon, "appid": self.api_key, "units": self.UNITS}
        return await self._fetch(f"{self.weather_base_url}/forecast", params)

    async def _fetch(self, url: str, params: Dict[str, Any]) -> Any:
        return await asyncio.to_thread(self._get_json, url, params)

    def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        """
        GET a JSON document.

        Raises:
            UpstreamError: On a non-2xx status, a network failure, or a body
                that is not JSON
        """
        try:
            logging.info(f"Making OpenWeather API request: {url}")
            logging.debug(
                "Request parameters: %s",
                {k: v for k, v in params.items() if k != "appid"},
            )

            response = requests.get(url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")
            return data

        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise UpstreamError(f"Network error: {str(e)}") from e
        except ValueError as e:
            logging.error(f"Failed to decode API response: {e}")
            raise UpstreamError(f"Failed to decode response: {str(e)}") from e

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from OpenWeather error response."""
        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            message = response.text[:200] or response.reason or f"API error: {response.status_code}"
            raise UpstreamError(message, status=response.status_code)

        logging.error(f"OpenWeather API error response: {error_data}")
        message = None
        if isinstance(error_data, dict):
            message = error_data.get("message")
        raise UpstreamError(
            message or f"API error: {response.status_code} {response.reason or ''}".strip(),
            status=response.status_code,
        )
