"""Tests for the search box controller."""
import asyncio

import pytest

from geocode_resolver import GeocodeResolver
from recent_searches import MemoryStore, RecentSearchList
from search_controller import SearchInteractionController, SearchState
from weather_data import City
from weather_provider import UpstreamError

LONDON_GB = City(name="London", lat=51.5, country="GB", lon=-0.12, state="")


@pytest.fixture
def committed():
    return []


@pytest.fixture
def notices():
    return []


@pytest.fixture
def recents():
    return RecentSearchList(MemoryStore())


@pytest.fixture
def controller(provider, cache, recents, committed, notices):
    return SearchInteractionController(
        GeocodeResolver(provider, cache),
        recents,
        on_search=lambda lat, lon, name: committed.append((lat, lon, name)),
        on_notice=lambda title, message: notices.append((title, message)),
        debounce_seconds=0.01,
    )


async def type_and_wait(controller, text):
    controller.input_changed(text)
    await controller.wait_for_pending()


@pytest.mark.asyncio
async def test_typing_shows_results_after_debounce(controller, provider):
    controller.focus()
    controller.input_changed("Lond")
    assert controller.state == SearchState.DEBOUNCING
    assert provider.count("geocode") == 0

    await controller.wait_for_pending()

    assert controller.state == SearchState.SHOWING_RESULTS
    assert controller.is_open
    assert controller.visible_items == [LONDON_GB]


@pytest.mark.asyncio
async def test_new_keystroke_cancels_pending_lookup(controller, provider):
    for text in ["Lo", "Lon", "Lond"]:
        controller.input_changed(text)
    await controller.wait_for_pending()
    await asyncio.sleep(0.03)

    assert provider.calls == [("geocode", "Lond", 5)]


@pytest.mark.asyncio
async def test_short_query_does_not_search(controller, provider):
    await type_and_wait(controller, "L")
    await asyncio.sleep(0.03)
    assert controller.state == SearchState.CLOSED
    assert not controller.is_open
    assert provider.calls == []


@pytest.mark.asyncio
async def test_shortening_query_closes_results(controller, provider):
    controller.focus()
    await type_and_wait(controller, "Lond")
    assert controller.is_open

    controller.input_changed("L")
    assert controller.state == SearchState.CLOSED
    assert controller.visible_items == []
    assert provider.count("geocode") == 1


@pytest.mark.asyncio
async def test_no_results_closes_dropdown(controller):
    await type_and_wait(controller, "Qwzx")
    assert controller.state == SearchState.CLOSED
    assert controller.visible_items == []


@pytest.mark.asyncio
async def test_empty_field_shows_recents_when_focused(controller, recents):
    recents.record(LONDON_GB)
    controller.focus()
    assert controller.state == SearchState.SHOWING_RECENTS

    await type_and_wait(controller, "Pa")
    controller.input_changed("")
    assert controller.state == SearchState.SHOWING_RECENTS
    assert controller.visible_items == [LONDON_GB]


@pytest.mark.asyncio
async def test_empty_field_without_focus_stays_closed(controller, recents):
    recents.record(LONDON_GB)
    controller.input_changed("")
    assert controller.state == SearchState.CLOSED
    assert controller.visible_items == []


@pytest.mark.asyncio
async def test_select_commits_city(controller, committed, recents):
    await type_and_wait(controller, "Lond")
    controller.select(controller.visible_items[0])

    assert committed == [("51.5", "-0.12", "London, GB")]
    assert controller.value == "London, GB"
    assert controller.selected_city == LONDON_GB
    assert controller.state == SearchState.CLOSED
    assert recents.items() == [LONDON_GB]


@pytest.mark.asyncio
async def test_formatted_text_is_not_searched_again(controller, provider):
    await type_and_wait(controller, "Lond")
    controller.select(controller.visible_items[0])
    provider.calls.clear()

    await type_and_wait(controller, "London, GB")
    await asyncio.sleep(0.03)

    assert provider.calls == []
    assert controller.selected_city == LONDON_GB


@pytest.mark.asyncio
async def test_editing_text_clears_selection(controller):
    await type_and_wait(controller, "Lond")
    controller.select(controller.visible_items[0])
    controller.input_changed("London, G")
    assert controller.selected_city is None


@pytest.mark.asyncio
async def test_escape_and_click_outside_close(controller):
    await type_and_wait(controller, "Lond")
    await controller.handle_key("Escape")
    assert controller.state == SearchState.CLOSED

    await type_and_wait(controller, "London")
    assert controller.is_open
    controller.click_outside()
    assert controller.state == SearchState.CLOSED


@pytest.mark.asyncio
async def test_enter_selects_first_visible_result(controller, provider, committed):
    await type_and_wait(controller, "London")
    await controller.handle_key("Enter")

    assert committed == [("51.5", "-0.12", "London, England, GB")]
    assert provider.count("geocode") == 1


@pytest.mark.asyncio
async def test_arrow_keys_move_highlight(controller, committed):
    await type_and_wait(controller, "London")
    await controller.handle_key("ArrowDown")
    assert controller.highlighted == 0
    await controller.handle_key("ArrowDown")
    assert controller.highlighted == 1
    await controller.handle_key("ArrowDown")
    assert controller.highlighted == 0
    await controller.handle_key("ArrowUp")
    assert controller.highlighted == 1

    await controller.handle_key("Enter")
    assert committed == [("42.98", "-81.24", "London, Ontario, CA")]


@pytest.mark.asyncio
async def test_arrow_keys_on_recents(controller, recents, committed):
    recents.record(LONDON_GB)
    controller.focus()
    await controller.handle_key("ArrowDown")
    await controller.handle_key("Enter")
    assert committed == [("51.5", "-0.12", "London, GB")]


@pytest.mark.asyncio
async def test_enter_without_results_forces_refresh(controller, provider, committed):
    await type_and_wait(controller, "Lond")  # cached now
    controller.input_changed("Lond ")
    await controller.handle_key("Enter")

    assert [call for call in provider.calls if call[0] == "geocode"] == [
        ("geocode", "Lond", 5),
        ("geocode", "Lond ", 5),
    ]
    assert committed == [("51.5", "-0.12", "London, GB")]
    assert controller.state == SearchState.CLOSED


@pytest.mark.asyncio
async def test_enter_cancels_pending_debounce(controller, provider):
    controller.input_changed("Paris")
    await controller.handle_key("Enter")
    await asyncio.sleep(0.03)
    assert provider.count("geocode") == 1
    assert controller.state == SearchState.CLOSED


@pytest.mark.asyncio
async def test_enter_with_no_results_reports_notice(controller, notices, committed):
    controller.input_changed("Qwzx")
    await controller.handle_key("Enter")
    assert committed == []
    assert notices == [("No results", 'No locations found for "Qwzx"')]


@pytest.mark.asyncio
async def test_enter_on_short_query_does_nothing(controller, provider, notices):
    controller.input_changed("Q")
    await controller.handle_key("Enter")
    assert provider.calls == []
    assert notices == []


@pytest.mark.asyncio
async def test_forced_search_error_reports_notice(controller, provider, notices):
    provider.raise_error = UpstreamError("Invalid API key", status=401)
    controller.input_changed("Paris")
    await controller.handle_key("Enter")
    assert notices == [("Error", "Failed to search cities. Please try again.")]
    assert controller.is_searching is False


@pytest.mark.asyncio
async def test_debounced_search_error_closes_dropdown(controller, provider, notices):
    provider.raise_error = UpstreamError("Network error: timed out")
    await type_and_wait(controller, "Paris")
    assert controller.state == SearchState.CLOSED
    assert notices == [("Error", "Failed to search cities. Please try again.")]


@pytest.mark.asyncio
async def test_busy_flag_suppresses_duplicate_submits(controller, provider, committed):
    gate = asyncio.Event()
    original = provider.geocode

    async def slow_geocode(query, limit):
        await gate.wait()
        return await original(query, limit)

    provider.geocode = slow_geocode
    controller.input_changed("Paris")

    first = asyncio.ensure_future(controller.submit())
    await asyncio.sleep(0)
    assert controller.is_searching
    await controller.submit()  # ignored while the first lookup is in flight
    gate.set()
    await first

    assert provider.count("geocode") == 1
    assert len(committed) == 1
    assert committed[0][2] == "Paris, Île-de-France, FR"
