"""Text layout for weather output - pure functions for testability."""
from datetime import datetime, tzinfo
from typing import List, Optional, Tuple

from weather_data import ForecastEntry, WeatherSnapshot


def format_temperature(temp_c: float) -> str:
    return f"{round(temp_c)}°C"


def format_weather_lines(weather: WeatherSnapshot) -> Tuple[str, str, str]:
    """
    Lay out current conditions as three lines.

    Returns:
        (location, "temperature  description", "feels like / humidity / wind")
    """
    headline = f"{format_temperature(weather.temperature_c)}  {weather.description.capitalize()}"
    feels = f"Feels like {format_temperature(weather.feels_like_c)}"
    humidity = f"Humidity {weather.humidity_pct}%"
    wind = f"Wind {round(weather.wind_speed_ms)} m/s"
    return weather.location_name, headline, f"{feels}  {humidity}  {wind}"


def format_forecast_day(entry: ForecastEntry, tz: Optional[tzinfo] = None) -> str:
    """One forecast line, e.g. "Mon  18°C  light rain". tz defaults to local time."""
    day = datetime.fromtimestamp(entry.timestamp_unix, tz=tz).strftime("%a")
    return f"{day}  {format_temperature(entry.temperature_c):>5}  {entry.description}"


def render_report(
    weather: WeatherSnapshot,
    days: List[ForecastEntry],
    tz: Optional[tzinfo] = None
) -> List[str]:
    """Full text report: current conditions, a blank line, then one line per day."""
    lines = list(format_weather_lines(weather))
    if days:
        lines.append("")
        lines.append("5-day forecast")
        lines.extend(format_forecast_day(entry, tz) for entry in days)
    return lines
