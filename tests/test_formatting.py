import pytest

from formatting import (
    air_quality_placeholder,
    format_clock,
    format_humidity,
    format_temperature,
    humidity_level,
    parse_month_year,
    parse_timestamp,
    recent_averages,
    temperature_level,
)
from models import Reading


def test_format_clock_naive_and_utc():
    assert format_clock("2025-03-04T07:05:59") == "07:05"
    dt = parse_timestamp("2025-03-04T07:05:00Z")
    assert dt is not None and dt.tzinfo is not None
    assert format_clock("garbage") == "--:--"


def test_units():
    assert format_temperature(23.456) == "23.5°C"
    assert format_humidity(60) == "60.0%"


@pytest.mark.parametrize(
    "value, level",
    [(36, "critical"), (35, "critical"), (31, "high"), (25, "warm"), (24.9, "normal")],
)
def test_temperature_level(value, level):
    assert temperature_level(value) == level


def test_humidity_level():
    assert humidity_level(85) == "very_humid"
    assert humidity_level(60) == "humid"
    assert humidity_level(40) == "normal"


def test_parse_month_year():
    assert parse_month_year("11-2024") == "Noviembre 2024"
    assert parse_month_year("01-2025") == "Enero 2025"
    assert parse_month_year("13-2025") == "13-2025"
    assert parse_month_year("nope") == "nope"


def test_air_quality_is_derived_from_humidity():
    assert air_quality_placeholder(60) == 51
    assert air_quality_placeholder(0) == 45


def test_recent_averages():
    readings = [
        Reading(temperature=20, humidity=50, light=10, timestamp="t"),
        Reading(temperature=30, humidity=70, light=30, timestamp="t"),
    ]
    averages = recent_averages(readings)
    assert averages.temperature == 25
    assert averages.humidity == 60
    assert averages.light == 20
    assert averages.count == 2
    assert recent_averages([]) is None
