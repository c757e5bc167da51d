"""Tests for derived metrics."""
import pytest
from derived_metrics import (
    compute_derived,
    dew_point,
    format_local_time,
    round_half_away,
    visibility_km,
)
from test_weather_data import make_reading
from weather_errors import FormatError


def test_dew_point_reference_value():
    """T=25°C, H=60% gives 16.68°C which rounds to 17."""
    assert dew_point(25, 60) == 17


def test_dew_point_is_deterministic():
    assert {dew_point(25, 60) for _ in range(10)} == {17}


def test_dew_point_saturated_air_equals_temperature():
    assert dew_point(20, 100) == 20


def test_dew_point_below_freezing():
    # alpha = -0.3711 - 0.2231, dew point = -7.9
    assert dew_point(-5, 80) == -8


@pytest.mark.parametrize("humidity", [0, -5, 101])
def test_dew_point_undefined_humidity(humidity):
    with pytest.raises(FormatError):
        dew_point(25, humidity)


@pytest.mark.parametrize("value,expected", [
    (2.5, 3),
    (-2.5, -3),
    (2.4, 2),
    (-0.4, 0),
    (0.5, 1),
])
def test_round_half_away(value, expected):
    assert round_half_away(value) == expected


def test_format_local_time_epoch_is_midnight():
    assert format_local_time(0, 0) == "12:00 am"


def test_format_local_time_afternoon():
    assert format_local_time(13 * 3600, 0) == "1:00 pm"


def test_format_local_time_noon():
    assert format_local_time(12 * 3600, 0) == "12:00 pm"


def test_format_local_time_pads_minutes():
    assert format_local_time(15 * 3600 + 5 * 60, 0) == "3:05 pm"


def test_format_local_time_applies_offset():
    # 03:30 UTC at UTC-5 is 22:30 the previous day
    assert format_local_time(3 * 3600 + 30 * 60, -18000) == "10:30 pm"


def test_format_local_time_positive_offset():
    # 2023-11-15 10:52:00 UTC at UTC+5:30
    assert format_local_time(1700045520, 19800) == "4:22 pm"


@pytest.mark.parametrize("meters,expected", [
    (10000, "10.0"),
    (1234, "1.2"),
    (1250, "1.3"),
    (0, "0.0"),
    (950, "1.0"),
])
def test_visibility_km(meters, expected):
    assert visibility_km(meters) == expected


def test_compute_derived_uses_feels_like_for_dew_point():
    reading = make_reading(temperature=20.0, feels_like=25.0, humidity=60)
    
    derived = compute_derived(reading)
    
    assert derived.dew_point_celsius == dew_point(25.0, 60)
    assert derived.dew_point_celsius != dew_point(20.0, 60)


def test_compute_derived_full_set():
    reading = make_reading(
        feels_like=25.0,
        humidity=60,
        sunrise_epoch_seconds=6 * 3600 + 5 * 60,
        sunset_epoch_seconds=18 * 3600 + 45 * 60,
        utc_offset_seconds=0,
        visibility_meters=1234,
    )
    
    derived = compute_derived(reading)
    
    assert derived.dew_point_celsius == 17
    assert derived.sunrise_local == "6:05 am"
    assert derived.sunset_local == "6:45 pm"
    assert derived.visibility_km == "1.2"


def test_compute_derived_zero_humidity_is_format_error():
    with pytest.raises(FormatError):
        compute_derived(make_reading(humidity=0))


@pytest.mark.parametrize("temperature", [-237.7, float("nan"), float("inf")])
def test_dew_point_undefined_temperature(temperature):
    with pytest.raises(FormatError):
        dew_point(temperature, 60)
