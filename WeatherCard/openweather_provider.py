"""OpenWeather Current Weather API provider implementation."""
import logging
import math
import requests
from typing import Any, Mapping, Optional
from weather_provider import WeatherProviderBase, NetworkError, FormatError
from weather_data import Condition, WeatherReading


DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"


def _block(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise FormatError(f"Response missing '{key}' block")
    return value


def _number(block: Mapping[str, Any], key: str, path: str) -> float:
    value = block.get(key)
    # bool is an int subclass but never a valid measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatError(f"Field '{path}' must be a number, got {value!r}")
    # requests decodes NaN and Infinity literals
    if not math.isfinite(value):
        raise FormatError(f"Field '{path}' must be finite, got {value!r}")
    return float(value)


def _integer(block: Mapping[str, Any], key: str, path: str) -> int:
    value = block.get(key)
    if isinstance(value, bool):
        raise FormatError(f"Field '{path}' must be an integer, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise FormatError(f"Field '{path}' must be an integer, got {value!r}")
        return int(value)
    if not isinstance(value, int):
        raise FormatError(f"Field '{path}' must be an integer, got {value!r}")
    return value


def _string(block: Mapping[str, Any], key: str, path: str) -> str:
    value = block.get(key)
    if not isinstance(value, str):
        raise FormatError(f"Field '{path}' must be a string, got {value!r}")
    return value


def parse_reading(data: Any) -> WeatherReading:
    """
    Map a Current Weather API payload to a WeatherReading.

    Args:
        data: Decoded JSON body

    Returns:
        WeatherReading: Validated reading

    Raises:
        FormatError: If a required field is missing, has the wrong type,
            or the resulting reading violates an invariant
    """
    if not isinstance(data, dict):
        raise FormatError(f"Response body must be a JSON object, got {type(data).__name__}")

    main_data = _block(data, "main")
    wind_data = _block(data, "wind")
    clouds_data = _block(data, "clouds")
    sys_data = _block(data, "sys")

    weather_array = data.get("weather")
    if not isinstance(weather_array, list) or not weather_array:
        raise FormatError("Response missing 'weather' array")

    conditions = []
    for index, entry in enumerate(weather_array):
        if not isinstance(entry, dict):
            raise FormatError(f"Entry weather[{index}] must be an object")
        conditions.append(Condition(
            code=_integer(entry, "id", f"weather[{index}].id"),
            group=_string(entry, "main", f"weather[{index}].main"),
            description=_string(entry, "description", f"weather[{index}].description"),
        ))

    return WeatherReading(
        temperature=_number(main_data, "temp", "main.temp"),
        feels_like=_number(main_data, "feels_like", "main.feels_like"),
        temp_min=_number(main_data, "temp_min", "main.temp_min"),
        temp_max=_number(main_data, "temp_max", "main.temp_max"),
        pressure=_integer(main_data, "pressure", "main.pressure"),
        humidity=_integer(main_data, "humidity", "main.humidity"),
        conditions=tuple(conditions),
        wind_speed=_number(wind_data, "speed", "wind.speed"),
        wind_direction=_integer(wind_data, "deg", "wind.deg"),
        cloud_cover_percent=_integer(clouds_data, "all", "clouds.all"),
        visibility_meters=_integer(data, "visibility", "visibility"),
        sunrise_epoch_seconds=_integer(sys_data, "sunrise", "sys.sunrise"),
        sunset_epoch_seconds=_integer(sys_data, "sunset", "sys.sunset"),
        utc_offset_seconds=_integer(data, "timezone", "timezone"),
        location_name=_string(data, "name", "name"),
    )


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using OpenWeather Current Weather API.

    Uses the free Current Weather API: https://openweathermap.org/current
    and queries it by location name with metric units.
    """

    UNITS = "metric"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            base_url: Current weather endpoint
            timeout: HTTP request timeout in seconds (None waits indefinitely)
        """
        if not isinstance(api_key, str) or not api_key.strip():
            raise ValueError("api_key must be a non-empty string")
        if not isinstance(base_url, str) or not base_url.strip():
            raise ValueError("base_url must be a non-empty string")
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    def fetch_reading(self, location_query: str) -> WeatherReading:
        """
        Fetch current weather from OpenWeather Current Weather API.

        Args:
            location_query: City name, e.g. "Port-au-Prince"

        Returns:
            WeatherReading: Current weather information

        Raises:
            NetworkError: If the request fails or returns a non-2xx status
            FormatError: If the response body is not a valid reading
        """
        params = {
            "q": location_query,
            "appid": self.api_key,
            "units": self.UNITS,
        }

        try:
            logging.info(f"Making OpenWeather API request: {self.base_url}")
            logging.debug(f"Request parameters: q={location_query}, units={self.UNITS}")

            response = requests.get(self.base_url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise NetworkError(f"Network error: {str(e)}") from e

        logging.info(f"API response status: {response.status_code}")

        if not response.ok:
            logging.error(f"API request failed with status {response.status_code}")
            self._handle_error_response(response)

        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Response body is not valid JSON: {e}")
            raise FormatError(f"Failed to parse response: {str(e)}") from e

        logging.debug(f"API response (truncated): {str(data)[:500]}...")

        try:
            reading = parse_reading(data)
        except FormatError as e:
            logging.error(f"Response does not describe a valid reading: {e}")
            raise
        except (KeyError, ValueError, TypeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise FormatError(f"Failed to parse response: {str(e)}") from e

        logging.info(
            f"Successfully parsed weather data: {reading.location_name} "
            f"{reading.temperature}°C, {reading.primary_condition.group}"
        )
        return reading

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from OpenWeather error response."""
        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise NetworkError(
                f"HTTP {response.status_code}: {response.text[:200]}"
            )

        logging.error(f"OpenWeather API error response: {error_data}")
        if not isinstance(error_data, dict):
            raise NetworkError(f"HTTP {response.status_code}: {error_data}")

        cod = error_data.get("cod", response.status_code)
        message = error_data.get("message", "Unknown error")
        raise NetworkError(f"OpenWeather API error {cod}: {message}")
