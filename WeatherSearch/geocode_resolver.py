"""City search against the geocoding API, backed by the shared response cache."""
import logging
from typing import List, Optional

from api_cache import TimeBoundedCache
from schemas import parse_geocode
from weather_data import City, deduplicate_cities, format_city_name
from weather_provider import WeatherProviderBase

GEOCODE_KEY_PREFIX = "geocode-"
DEFAULT_RESULTS_LIMIT = 5


def normalize_query(query: str) -> str:
    return query.lower().strip()


def _find_formatted(cities: Optional[List[City]], formatted_query: str) -> Optional[City]:
    for city in cities or []:
        if format_city_name(city).lower() == formatted_query:
            return city
    return None


class GeocodeResolver:
    """
    Resolve free-text place names to cities.

    The search box shows the formatted name of the city the user picked
    ("Paris, Île-de-France, FR") and that text gets searched again when the
    field is refocused. Such queries are answered from cities already in the
    cache instead of going back to the network. A match found this way can be
    older than what a live lookup would return now; that is accepted.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        cache: TimeBoundedCache,
        results_limit: int = DEFAULT_RESULTS_LIMIT
    ):
        self.provider = provider
        self.cache = cache
        self.results_limit = results_limit

    async def resolve(self, query: str, force_refresh: bool = False) -> List[City]:
        """
        Find cities matching query.

        Args:
            query: Place name, or a formatted "City, State, Country" string
            force_refresh: Skip every cache lookup and ask the API

        Returns:
            Deduplicated cities, in the order the API ranked them

        Raises:
            InvalidResponseFormat: If the API did not return a list of places
            UpstreamError: If the API request fails
        """
        normalized = normalize_query(query)
        cache_key = GEOCODE_KEY_PREFIX + normalized

        if "," in normalized and not force_refresh:
            match = self._resolve_formatted(normalized)
            if match is not None:
                return match

        if not force_refresh:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logging.debug(f"Using cached geocode results for '{normalized}'")
                return list(cached)

        logging.info(f"Geocoding '{query}' (force_refresh={force_refresh})")
        data = await self.provider.geocode(query, self.results_limit)
        cities = deduplicate_cities(parse_geocode(data))
        logging.debug(f"Geocode returned {len(cities)} unique place(s) for '{query}'")

        self.cache.set(cache_key, cities)
        return list(cities)

    def _resolve_formatted(self, normalized: str) -> Optional[List[City]]:
        """Answer a formatted "City, State, Country" query from the cache."""
        exact_key = GEOCODE_KEY_PREFIX + normalized
        exact = self.cache.get(exact_key)
        if exact is not None:
            logging.debug(f"Exact cache hit for formatted name '{normalized}'")
            return list(exact)

        for key in self.cache.keys_matching(GEOCODE_KEY_PREFIX):
            city = _find_formatted(self.cache.get(key), normalized)
            if city is not None:
                logging.debug(f"Found '{normalized}' in cached results under '{key}'")
                result = [city]
                self.cache.set(exact_key, result)
                return list(result)

        name_only = normalized.split(",")[0].strip()
        if name_only != normalized:
            city = _find_formatted(self.cache.get(GEOCODE_KEY_PREFIX + name_only), normalized)
            if city is not None:
                logging.debug(f"Found '{normalized}' in cached results for '{name_only}'")
                return [city]

        return None
