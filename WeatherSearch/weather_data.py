"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Tuple

# The forecast feed is 3-hourly, so every 8th entry is one day apart
FORECAST_STEPS_PER_DAY = 8
FORECAST_DAYS = 5


@dataclass(frozen=True)
class City:
    """A geocoded place."""
    name: str
    lat: float
    country: str
    lon: float
    state: Optional[str] = None

    @property
    def identity(self) -> Tuple[str, str, str]:
        """Deduplication key. Coordinates are ignored on purpose: repeated
        geocode calls can return the same place with slightly different
        coordinates."""
        return (self.name, self.state or "", self.country)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "City":
        return cls(
            name=data["name"],
            lat=float(data["lat"]),
            country=data.get("country", ""),
            lon=float(data["lon"]),
            state=data.get("state"),
        )


@dataclass(frozen=True)
class WeatherSnapshot:
    """Current conditions for one location."""
    location_name: str
    description: str  # e.g., "broken clouds"
    icon_code: str  # e.g., "04d"
    temperature_c: float
    feels_like_c: float
    humidity_pct: int
    wind_speed_ms: float


@dataclass(frozen=True)
class ForecastEntry:
    """One step of the 3-hourly forecast feed."""
    timestamp_unix: int
    temperature_c: float
    description: str
    icon_code: str


def format_city_name(city: City) -> str:
    """Format a city as "Name, State, Country", skipping empty parts."""
    formatted = city.name
    if city.state:
        formatted += f", {city.state}"
    if city.country:
        formatted += f", {city.country}"
    return formatted


def deduplicate_cities(cities: Iterable[City]) -> List[City]:
    """Drop cities whose (name, state, country) was already seen, keeping order."""
    seen = set()
    unique = []
    for city in cities:
        if city.identity in seen:
            continue
        seen.add(city.identity)
        unique.append(city)
    return unique


def daily_forecast(entries: List[ForecastEntry]) -> List[ForecastEntry]:
    """Sample one entry per day from the 3-hourly feed, at most five days."""
    return entries[::FORECAST_STEPS_PER_DAY][:FORECAST_DAYS]
