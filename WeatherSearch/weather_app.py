"""Entry point for UI code: one cache, one resolver, one fetcher per app."""
import logging
from typing import List, Optional

from api_cache import TimeBoundedCache
from config import DEFAULT_ICON_URL, Settings
from geocode_resolver import DEFAULT_RESULTS_LIMIT, GeocodeResolver
from openweather_provider import OpenWeatherProvider
from recent_searches import JsonFileStore, KeyValueStore, RecentSearchList
from weather_data import City, ForecastEntry, WeatherSnapshot
from weather_provider import WeatherProviderBase
from weather_service import Coordinate, WeatherFetcher


class WeatherApp:
    """
    The operations a weather UI needs.

    The cache is created here and shared by the resolver and the fetcher, so
    clear_cache() drops geocode and weather results together.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        store: KeyValueStore,
        cache: Optional[TimeBoundedCache] = None,
        geo_results_limit: int = DEFAULT_RESULTS_LIMIT,
        icon_url: str = DEFAULT_ICON_URL
    ):
        self.cache = cache if cache is not None else TimeBoundedCache()
        self.resolver = GeocodeResolver(provider, self.cache, results_limit=geo_results_limit)
        self.fetcher = WeatherFetcher(provider, self.cache)
        self.recent_searches = RecentSearchList(store)
        self.icon_url = icon_url.rstrip("/")

    async def resolve_city(self, query: str, force_refresh: bool = False) -> List[City]:
        return await self.resolver.resolve(query, force_refresh=force_refresh)

    async def get_current_weather(
        self,
        lat: Coordinate,
        lon: Coordinate,
        display_name: Optional[str] = None
    ) -> WeatherSnapshot:
        return await self.fetcher.current_weather(lat, lon, display_name=display_name)

    async def get_forecast(self, lat: Coordinate, lon: Coordinate) -> List[ForecastEntry]:
        return await self.fetcher.forecast(lat, lon)

    async def get_daily_forecast(self, lat: Coordinate, lon: Coordinate) -> List[ForecastEntry]:
        return await self.fetcher.daily_forecast(lat, lon)

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_recent_searches(self) -> List[City]:
        return self.recent_searches.items()

    def record_search(self, city: City) -> None:
        self.recent_searches.record(city)

    def weather_icon_url(self, code: str) -> str:
        return f"{self.icon_url}/{code}@2x.png"


def build_weather_app(settings: Settings) -> WeatherApp:
    provider = OpenWeatherProvider(
        api_key=settings.api_key,
        weather_base_url=settings.weather_base_url,
        geo_base_url=settings.geo_base_url,
        timeout=settings.timeout,
    )
    app = WeatherApp(
        provider=provider,
        store=JsonFileStore(settings.recent_searches_path),
        cache=TimeBoundedCache(duration_minutes=settings.cache_duration_minutes),
        geo_results_limit=settings.geo_results_limit,
        icon_url=settings.icon_url,
    )
    logging.info("Weather app ready (cache ttl=%smin)", settings.cache_duration_minutes)
    return app
