"""Shared fixtures: a scripted provider, a controllable clock, sample payloads."""
import pytest

from api_cache import TimeBoundedCache
from weather_provider import WeatherProviderBase


class FakeClock:
    """Clock the tests move by hand."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider(WeatherProviderBase):
    """Provider returning canned payloads and recording every call."""

    def __init__(self):
        self.geocode_results = {}
        self.weather_payload = None
        self.forecast_payload = None
        self.raise_error = None
        self.calls = []

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)

    async def geocode(self, query, limit):
        self.calls.append(("geocode", query, limit))
        if self.raise_error:
            raise self.raise_error
        return self.geocode_results.get(query.lower().strip(), [])

    async def current_weather(self, lat, lon):
        self.calls.append(("weather", lat, lon))
        if self.raise_error:
            raise self.raise_error
        return self.weather_payload

    async def forecast(self, lat, lon):
        self.calls.append(("forecast", lat, lon))
        if self.raise_error:
            raise self.raise_error
        return self.forecast_payload


def make_forecast_payload(count: int = 40, start: int = 1_700_000_000) -> dict:
    return {
        "cod": "200",
        "cnt": count,
        "list": [
            {
                "dt": start + i * 3 * 3600,
                "main": {"temp": float(i), "humidity": 70},
                "weather": [{"id": 500, "main": "Rain", "description": f"step {i}", "icon": "10d"}],
            }
            for i in range(count)
        ],
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TimeBoundedCache(duration_minutes=10, clock=clock)


@pytest.fixture
def weather_payload():
    """Sample OpenWeather current weather response."""
    return {
        "coord": {"lon": -0.12, "lat": 51.5},
        "weather": [
            {
                "id": 803,
                "main": "Clouds",
                "description": "broken clouds",
                "icon": "04d"
            }
        ],
        "main": {
            "temp": 14.2,
            "feels_like": 13.6,
            "pressure": 1014,
            "humidity": 81
        },
        "wind": {"speed": 4.6, "deg": 240},
        "dt": 1700000000,
        "timezone": 0,
        "name": "London",
    }


@pytest.fixture
def forecast_payload():
    return make_forecast_payload()


@pytest.fixture
def london_results():
    return [
        {"name": "London", "lat": 51.5, "lon": -0.12, "country": "GB", "state": "England"},
        {"name": "London", "lat": 51.5073, "lon": -0.1276, "country": "GB", "state": "England"},
        {"name": "London", "lat": 42.98, "lon": -81.24, "country": "CA", "state": "Ontario"},
    ]


@pytest.fixture
def provider(weather_payload, forecast_payload, london_results):
    fake = FakeProvider()
    fake.weather_payload = weather_payload
    fake.forecast_payload = forecast_payload
    fake.geocode_results = {
        "london": london_results,
        "lond": [{"name": "London", "lat": 51.5, "lon": -0.12, "country": "GB", "state": ""}],
        "paris": [
            {"name": "Paris", "lat": 48.8589, "lon": 2.32, "country": "FR", "state": "Île-de-France"},
            {"name": "Paris", "lat": 33.66, "lon": -95.55, "country": "US", "state": "Texas"},
        ],
    }
    return fake
