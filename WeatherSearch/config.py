"""Application settings, read from the environment (and a .env file)."""
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from api_cache import DEFAULT_CACHE_DURATION_MINUTES
from geocode_resolver import DEFAULT_RESULTS_LIMIT
from openweather_provider import OpenWeatherProvider

DEFAULT_ICON_URL = "https://openweathermap.org/img/wn"
DEFAULT_RECENT_SEARCHES_PATH = "~/.weather_search.json"


@dataclass
class Settings:
    api_key: str
    weather_base_url: str = OpenWeatherProvider.WEATHER_BASE_URL
    geo_base_url: str = OpenWeatherProvider.GEO_BASE_URL
    icon_url: str = DEFAULT_ICON_URL
    cache_duration_minutes: float = DEFAULT_CACHE_DURATION_MINUTES
    geo_results_limit: int = DEFAULT_RESULTS_LIMIT
    timeout: int = 10
    recent_searches_path: str = DEFAULT_RECENT_SEARCHES_PATH


def _number(name: str, default, cast):
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise SystemExit(f"Invalid {name}: {exc}") from exc
    if value <= 0:
        raise SystemExit(f"Invalid {name}: must be positive, got {raw}")
    return value


def load_settings() -> Settings:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    settings = Settings(
        api_key=api_key,
        weather_base_url=os.getenv("WEATHER_BASE_URL") or OpenWeatherProvider.WEATHER_BASE_URL,
        geo_base_url=os.getenv("GEO_BASE_URL") or OpenWeatherProvider.GEO_BASE_URL,
        icon_url=os.getenv("WEATHER_ICON_URL") or DEFAULT_ICON_URL,
        cache_duration_minutes=_number("CACHE_DURATION_MINUTES", DEFAULT_CACHE_DURATION_MINUTES, float),
        geo_results_limit=_number("GEO_RESULTS_LIMIT", DEFAULT_RESULTS_LIMIT, int),
        timeout=_number("WEATHER_TIMEOUT", 10, int),
        recent_searches_path=os.getenv("RECENT_SEARCHES_PATH") or DEFAULT_RECENT_SEARCHES_PATH,
    )
    logging.info(
        "Configuration loaded: cache=%smin geo_limit=%s",
        settings.cache_duration_minutes,
        settings.geo_results_limit,
    )
    return settings
