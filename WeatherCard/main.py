"""Command-line weather card: fetch the configured location once and print it."""
import argparse
import logging
import os
import sys
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from derived_metrics import round_half_away
from openweather_provider import DEFAULT_BASE_URL, OpenWeatherProvider
from view_state import Failed, Idle, Loading, Ready, ViewState, WeatherViewModel
from weather_data import DerivedSet, WeatherReading

DEFAULT_LOCATION = "Port-au-Prince"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Current weather card")
    parser.add_argument("--location", default=None, help="Location name (overrides WEATHER_LOCATION)")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds (default: none)")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def load_config(location_override: Optional[str] = None) -> Tuple[str, str, str]:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY", "").strip()
    base_url = os.getenv("WEATHER_BASE_URL", DEFAULT_BASE_URL).strip()
    location = (location_override or os.getenv("WEATHER_LOCATION", DEFAULT_LOCATION)).strip()

    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")
    if not base_url:
        raise SystemExit("WEATHER_BASE_URL must not be empty")
    if not location:
        raise SystemExit("Location must not be empty")

    logging.info("Configuration loaded: location=%s base_url=%s", location, base_url)
    return api_key, base_url, location


def build_view_model(api_key: str, base_url: str, location: str, args: argparse.Namespace) -> WeatherViewModel:
    provider = OpenWeatherProvider(
        api_key=api_key,
        base_url=base_url,
        timeout=args.timeout,
    )
    view_model = WeatherViewModel(provider=provider, location_query=location)
    logging.info("Weather view model ready for %s", location)
    return view_model


def format_report(reading: WeatherReading, derived: DerivedSet) -> List[str]:
    condition = reading.primary_condition
    return [
        reading.location_name,
        f"{round_half_away(reading.temperature)}° {condition.description.capitalize()}",
        f"Day {round_half_away(reading.temp_max)}° • Night {round_half_away(reading.temp_min)}°",
        f"Feels Like {round_half_away(reading.feels_like)}°",
        f"Sunrise {derived.sunrise_local}  Sunset {derived.sunset_local}",
        f"Wind {round_half_away(reading.wind_speed)} km/h from {reading.wind_direction}°",
        f"Humidity {reading.humidity}%",
        f"Dew Point {derived.dew_point_celsius}°",
        f"Pressure {reading.pressure} hPa",
        f"Visibility {derived.visibility_km} km",
        f"Cloud Cover {reading.cloud_cover_percent}%",
    ]


def format_status(state: ViewState) -> str:
    if isinstance(state, Idle):
        return "No data available"
    if isinstance(state, Loading):
        return "Loading..."
    if isinstance(state, Failed):
        return state.message
    raise ValueError(f"No status line for {type(state).__name__}")


def render(state: ViewState) -> str:
    if isinstance(state, Ready):
        return "\n".join(format_report(state.reading, state.derived))
    return format_status(state)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    api_key, base_url, location = load_config(args.location)

    view_model = build_view_model(api_key, base_url, location, args)
    view_model.subscribe(lambda state: logging.debug("State changed: %s", type(state).__name__))

    state = view_model.load()
    print(render(state))
    return 1 if isinstance(state, Failed) else 0


if __name__ == "__main__":
    sys.exit(main())
