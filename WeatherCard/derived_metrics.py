"""Quantities derived locally from a reading: dew point, local times, visibility."""
import math
from decimal import Decimal, ROUND_HALF_UP

from weather_data import DerivedSet, WeatherReading
from weather_errors import FormatError

# Magnus-Tetens coefficients
MAGNUS_A = 17.27
MAGNUS_B = 237.7

SECONDS_PER_DAY = 86400


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def dew_point(temperature: float, humidity: float) -> int:
    """
    Dew point in °C using the Magnus-Tetens approximation.

    Args:
        temperature: Air temperature in °C
        humidity: Relative humidity in percent, 0 < humidity <= 100

    Returns:
        int: Dew point rounded to the nearest degree

    Raises:
        FormatError: If humidity is outside (0, 100]; the logarithm is
            undefined at zero humidity. Also when the temperature is not
            finite or the formula has no finite result (T = -237.7)
    """
    if not 0 < humidity <= 100:
        raise FormatError(f"dew point undefined for humidity {humidity}")
    if not math.isfinite(temperature) or MAGNUS_B + temperature == 0:
        raise FormatError(f"dew point undefined for temperature {temperature}")
    alpha = (MAGNUS_A * temperature) / (MAGNUS_B + temperature) + math.log(humidity / 100)
    if MAGNUS_A == alpha:
        raise FormatError(f"dew point undefined for temperature {temperature}, humidity {humidity}")
    result = (MAGNUS_B * alpha) / (MAGNUS_A - alpha)
    if not math.isfinite(result):
        raise FormatError(f"dew point undefined for temperature {temperature}, humidity {humidity}")
    return round_half_away(result)


def format_local_time(timestamp: int, utc_offset_seconds: int) -> str:
    """
    Format a UTC timestamp as a 12-hour local clock time, e.g. "3:05 pm".

    The offset is added arithmetically and the result read as UTC; no
    timezone database or daylight-saving rules are involved.
    """
    seconds_of_day = (timestamp + utc_offset_seconds) % SECONDS_PER_DAY
    hour, remainder = divmod(seconds_of_day, 3600)
    minute = remainder // 60
    suffix = "pm" if hour >= 12 else "am"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


def visibility_km(visibility_meters: int) -> str:
    """Visibility in kilometres with exactly one decimal digit ("1.2" for 1234 m)."""
    km = Decimal(visibility_meters) / Decimal(1000)
    return str(km.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def compute_derived(reading: WeatherReading) -> DerivedSet:
    """
    Compute every derived value for a reading.

    Dew point is computed from the feels-like temperature, matching the
    values the weather card has always displayed.
    """
    # TODO: switch the dew point input to reading.temperature once the
    # displayed values are allowed to change; feels-like is not the air temperature.
    return DerivedSet(
        dew_point_celsius=dew_point(reading.feels_like, reading.humidity),
        sunrise_local=format_local_time(reading.sunrise_epoch_seconds, reading.utc_offset_seconds),
        sunset_local=format_local_time(reading.sunset_epoch_seconds, reading.utc_offset_seconds),
        visibility_km=visibility_km(reading.visibility_meters),
    )
