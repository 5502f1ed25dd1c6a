"""Command-line weather lookup: search a city, print conditions and forecast."""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Tuple

from config import load_settings
from layout import render_report
from search_controller import SearchInteractionController
from weather_app import WeatherApp, build_weather_app
from weather_data import format_city_name
from weather_provider import WeatherProviderError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Weather search")
    parser.add_argument("query", nargs="?", help="City to search for, e.g. 'Lond' or 'Paris, FR'")
    parser.add_argument("--pick", type=int, default=None, help="Index of the search result to use")
    parser.add_argument("--recent", action="store_true", help="List recent searches and exit")
    parser.add_argument("--clear-recent", action="store_true", help="Forget recent searches")
    parser.add_argument("--timeout", type=int, default=None, help="HTTP timeout in seconds")
    parser.add_argument("--cache-ttl", type=float, default=None, help="Cache window in minutes")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


async def search_city(app: WeatherApp, query: str, pick: Optional[int] = None) -> Optional[Tuple[str, str, str]]:
    """
    Run query through the search box logic and return the committed
    (lat, lon, display name), or None if nothing was found.
    """
    committed: List[Tuple[str, str, str]] = []

    def on_notice(title: str, message: str) -> None:
        print(f"{title}: {message}", file=sys.stderr)

    controller = SearchInteractionController(
        app.resolver,
        app.recent_searches,
        on_search=lambda lat, lon, name: committed.append((lat, lon, name)),
        on_notice=on_notice,
    )
    controller.focus()
    controller.input_changed(query)
    await controller.wait_for_pending()

    results = controller.visible_items
    if pick is not None and results:
        if not 0 <= pick < len(results):
            print(f"No result #{pick}; choose one of:", file=sys.stderr)
            for i, city in enumerate(results):
                print(f"  [{i}] {format_city_name(city)}", file=sys.stderr)
            return None
        controller.select(results[pick])
    else:
        await controller.handle_key("Enter")

    return committed[-1] if committed else None


async def run(args: argparse.Namespace) -> int:
    settings = load_settings()
    if args.timeout:
        settings.timeout = args.timeout
    if args.cache_ttl:
        settings.cache_duration_minutes = args.cache_ttl

    app = build_weather_app(settings)

    if args.clear_recent:
        app.recent_searches.clear()
        logging.info("Recent searches cleared")

    if args.recent:
        for city in app.get_recent_searches():
            print(format_city_name(city))
        return 0

    if not args.query:
        if args.clear_recent:
            return 0
        print("Nothing to search for; pass a city name", file=sys.stderr)
        return 2

    try:
        selection = await search_city(app, args.query, args.pick)
        if selection is None:
            return 1
        lat, lon, name = selection
        weather = await app.get_current_weather(lat, lon, display_name=name)
        days = await app.get_daily_forecast(lat, lon)
    except WeatherProviderError as err:
        logging.error("Weather lookup failed: %s", err)
        print(f"Error: {err}", file=sys.stderr)
        return 1

    for line in render_report(weather, days):
        print(line)
    return 0


def main() -> None:
    args = parse_args()
    setup_logging(args.log_file, args.verbose)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
