"""Search box behaviour: debounced lookups, dropdown state, keyboard handling."""
import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

from geocode_resolver import GeocodeResolver
from recent_searches import RecentSearchList
from weather_data import City, format_city_name
from weather_provider import WeatherProviderError

DEBOUNCE_DELAY_SECONDS = 0.3
MIN_QUERY_LENGTH = 2


class SearchState(Enum):
    IDLE = "idle"
    TYPING = "typing"
    DEBOUNCING = "debouncing"
    SHOWING_RESULTS = "showing_results"
    SHOWING_RECENTS = "showing_recents"
    CLOSED = "closed"


class SearchInteractionController:
    """
    Drives a city search field.

    Keystrokes restart a single debounce task; when the input pauses the
    query is geocoded and the results shown. Picking a city (from results,
    recents, or Enter) reports it through on_search and records it in the
    recent searches.

    Must be used from a running event loop: input_changed schedules the
    debounce task on it.
    """

    def __init__(
        self,
        resolver: GeocodeResolver,
        recent_searches: RecentSearchList,
        on_search: Callable[[str, str, str], None],
        on_notice: Optional[Callable[[str, str], None]] = None,
        debounce_seconds: float = DEBOUNCE_DELAY_SECONDS
    ):
        """
        Args:
            resolver: Geocoder used for lookups
            recent_searches: Where picked cities are remembered
            on_search: Called with (lat, lon, formatted name) when a city is picked
            on_notice: Called with (title, message) for user-visible notices
            debounce_seconds: Pause required before a lookup is made
        """
        self.resolver = resolver
        self.recent_searches = recent_searches
        self.on_search = on_search
        self.on_notice = on_notice
        self.debounce_seconds = debounce_seconds

        self.state = SearchState.IDLE
        self.value = ""
        self.cities: List[City] = []
        self.selected_city: Optional[City] = None
        self.focused = False
        self.highlighted: Optional[int] = None
        self.is_searching = False
        self._pending: Optional[asyncio.Task] = None

    @property
    def is_open(self) -> bool:
        return self.state in (SearchState.SHOWING_RESULTS, SearchState.SHOWING_RECENTS)

    @property
    def visible_items(self) -> List[City]:
        if self.state == SearchState.SHOWING_RESULTS:
            return list(self.cities)
        if self.state == SearchState.SHOWING_RECENTS:
            return self.recent_searches.items()
        return []

    def focus(self) -> None:
        self.focused = True
        if not self.value and len(self.recent_searches) > 0:
            self.state = SearchState.SHOWING_RECENTS

    def click_outside(self) -> None:
        self.close()

    def close(self) -> None:
        self.state = SearchState.CLOSED
        self.highlighted = None

    def input_changed(self, text: str) -> None:
        """Handle a keystroke: the field now contains text."""
        self.value = text
        if self.selected_city and format_city_name(self.selected_city) != text:
            self.selected_city = None

        self._cancel_pending()
        self.highlighted = None
        self.state = SearchState.TYPING

        if len(text) < MIN_QUERY_LENGTH:
            # nothing to look up yet, so the dropdown only offers recents
            self.cities = []
            if not text and self.focused and len(self.recent_searches) > 0:
                self.state = SearchState.SHOWING_RECENTS
            else:
                self.state = SearchState.CLOSED
            return

        self.state = SearchState.DEBOUNCING
        self._pending = asyncio.get_running_loop().create_task(self._debounced_resolve(text))

    async def wait_for_pending(self) -> None:
        """Wait until the scheduled lookup, if any, has finished."""
        task = self._pending
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def handle_key(self, key: str) -> None:
        if key == "Enter":
            await self.submit()
        elif key == "Escape":
            self.close()
        elif key == "ArrowDown":
            self._move_highlight(1)
        elif key == "ArrowUp":
            self._move_highlight(-1)

    def select(self, city: City) -> None:
        """Commit city as the search: report it, remember it, close the dropdown."""
        if self.is_searching:
            return
        self._cancel_pending()
        self.selected_city = city
        name = format_city_name(city)
        self.value = name
        logging.info(f"Selected city '{name}' ({city.lat}, {city.lon})")
        self.on_search(str(city.lat), str(city.lon), name)
        self.recent_searches.record(city)
        self.close()

    async def submit(self) -> None:
        """Enter key / search button."""
        if self.is_searching:
            return

        items = self.visible_items
        if self.highlighted is not None and self.highlighted < len(items):
            self.select(items[self.highlighted])
        elif self.selected_city is not None:
            self.select(self.selected_city)
        elif self.state == SearchState.SHOWING_RESULTS and self.cities:
            self.select(self.cities[0])
        elif len(self.value) >= MIN_QUERY_LENGTH:
            await self._forced_search()

    async def _forced_search(self) -> None:
        # The pending debounce would only repeat this lookup
        self._cancel_pending()
        query = self.value
        self.is_searching = True
        try:
            cities = await self.resolver.resolve(query, force_refresh=True)
        except WeatherProviderError as e:
            logging.error(f"Search error for '{query}': {e}")
            self._notify("Error", "Failed to search cities. Please try again.")
            return
        finally:
            self.is_searching = False

        if cities:
            self.select(cities[0])
        else:
            self._notify("No results", f'No locations found for "{query}"')

    async def _debounced_resolve(self, query: str) -> None:
        await asyncio.sleep(self.debounce_seconds)

        if "," in query:
            # Formatted names come from a previous selection, not from typing
            self.close()
            return

        try:
            cities = await self.resolver.resolve(query)
        except WeatherProviderError as e:
            logging.error(f"Search error for '{query}': {e}")
            if self.value == query:
                self.cities = []
                self.close()
                self._notify("Error", "Failed to search cities. Please try again.")
            return

        if self.value != query:
            logging.debug(f"Discarding results for '{query}', input is now '{self.value}'")
            return

        self.cities = cities
        self.highlighted = None
        self.state = SearchState.SHOWING_RESULTS if cities else SearchState.CLOSED

    def _move_highlight(self, step: int) -> None:
        items = self.visible_items
        if not items:
            return
        if self.highlighted is None:
            self.highlighted = 0 if step > 0 else len(items) - 1
        else:
            self.highlighted = (self.highlighted + step) % len(items)

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def _notify(self, title: str, message: str) -> None:
        logging.info(f"{title}: {message}")
        if self.on_notice:
            self.on_notice(title, message)
