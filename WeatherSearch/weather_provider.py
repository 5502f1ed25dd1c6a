"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from typing import Any, Optional


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers.

    Providers return decoded JSON exactly as the upstream API sent it.
    Validation and caching happen in the layers above.
    """

    @abstractmethod
    async def geocode(self, query: str, limit: int) -> Any:
        """
        Look up places matching a free-text name.

        Raises:
            UpstreamError: If the provider fails to fetch data
        """
        pass

    @abstractmethod
    async def current_weather(self, lat: str, lon: str) -> Any:
        """Fetch current conditions for a coordinate pair."""
        pass

    @abstractmethod
    async def forecast(self, lat: str, lon: str) -> Any:
        """Fetch the 3-hourly forecast feed for a coordinate pair."""
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    pass


class InvalidParameters(WeatherProviderError):
    """Coordinates are missing or not numeric."""
    pass


class SchemaValidationError(WeatherProviderError):
    """Upstream payload does not match the expected shape."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []


class InvalidResponseFormat(WeatherProviderError):
    """Geocoding response is not a list of places."""
    pass


class UpstreamError(WeatherProviderError):
    """The provider answered with a non-2xx status, or could not be reached."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"HTTP {self.status}: {self.message}"
