"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass
from typing import Tuple

from weather_errors import FormatError


@dataclass(frozen=True)
class Condition:
    """One entry of the provider's condition list."""
    code: int  # e.g., 803
    group: str  # e.g., "Clouds", "Rain", "Clear"
    description: str  # e.g., "broken clouds", "light rain"


@dataclass(frozen=True)
class WeatherReading:
    """
    One weather snapshot for the configured location.

    Temperatures are in °C and timestamps are UNIX seconds (UTC). Wind
    speed is the provider value as returned with metric units (m/s for
    OpenWeather); the weather card labels it km/h as it always has.
    Construction fails with FormatError when an invariant does not hold,
    so every instance is a valid reading.
    """
    temperature: float
    feels_like: float
    temp_min: float
    temp_max: float
    pressure: int  # hPa
    humidity: int  # percentage
    conditions: Tuple[Condition, ...]
    wind_speed: float  # provider units, m/s for OpenWeather metric
    wind_direction: int  # degrees
    cloud_cover_percent: int
    visibility_meters: int
    sunrise_epoch_seconds: int
    sunset_epoch_seconds: int
    utc_offset_seconds: int
    location_name: str

    def __post_init__(self):
        if not 0 <= self.humidity <= 100:
            raise FormatError(f"humidity out of range: {self.humidity}")
        if not self.conditions:
            raise FormatError("conditions must not be empty")
        if not 0 <= self.wind_direction < 360:
            raise FormatError(f"wind direction out of range: {self.wind_direction}")
        if not 0 <= self.cloud_cover_percent <= 100:
            raise FormatError(f"cloud cover out of range: {self.cloud_cover_percent}")
        if self.visibility_meters < 0:
            raise FormatError(f"visibility must be non-negative: {self.visibility_meters}")
        if self.sunrise_epoch_seconds >= self.sunset_epoch_seconds:
            raise FormatError(
                f"sunrise ({self.sunrise_epoch_seconds}) must precede sunset ({self.sunset_epoch_seconds})"
            )
        if not self.location_name:
            raise FormatError("location name must not be empty")

    @property
    def primary_condition(self) -> Condition:
        """The first (most significant) condition reported."""
        return self.conditions[0]


@dataclass(frozen=True)
class DerivedSet:
    """Values computed locally from a reading, never returned by the provider."""
    dew_point_celsius: int
    sunrise_local: str  # e.g., "6:12 am"
    sunset_local: str  # e.g., "5:48 pm"
    visibility_km: str  # one decimal place, e.g., "10.0"
