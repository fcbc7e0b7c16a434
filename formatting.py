# formatting.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence
import statistics as stats

from models import Reading

MONTH_NAMES = [
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]


def parse_timestamp(timestamp: str) -> Optional[datetime]:
    """ISO8601 -> datetime en hora local. None si no se puede interpretar."""
    text = (timestamp or "").strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt


def format_clock(timestamp: str) -> str:
    dt = parse_timestamp(timestamp)
    return dt.strftime("%H:%M") if dt else "--:--"


def format_timestamp(timestamp: str) -> str:
    dt = parse_timestamp(timestamp)
    return dt.strftime("%d %b %Y %H:%M:%S") if dt else timestamp


def format_temperature(value: float) -> str:
    return f"{value:.1f}°C"


def format_humidity(value: float) -> str:
    return f"{value:.1f}%"


# ====== NIVELES DE COLOR ======
def temperature_level(value: float) -> str:
    if value >= 35:
        return "critical"
    if value >= 30:
        return "high"
    if value >= 25:
        return "warm"
    return "normal"


def humidity_level(value: float) -> str:
    if value >= 80:
        return "very_humid"
    if value >= 60:
        return "humid"
    return "normal"


LEVEL_COLORS = {
    "critical": "#dc2626",
    "high": "#ea580c",
    "warm": "#ca8a04",
    "normal": "#16a34a",
    "very_humid": "#2563eb",
    "humid": "#0891b2",
}


def parse_month_year(month_year: str) -> str:
    """'11-2024' -> 'Noviembre 2024'."""
    try:
        month, year = month_year.split("-")
        return f"{MONTH_NAMES[int(month) - 1]} {year}"
    except (ValueError, IndexError):
        return month_year


def air_quality_placeholder(humidity: float) -> int:
    # No es una medida: índice derivado de la humedad a falta de sensor de aire
    return round(45 + humidity / 10)


@dataclass(frozen=True)
class RecentAverages:
    temperature: float
    humidity: float
    light: float
    count: int


def recent_averages(readings: Sequence[Reading]) -> Optional[RecentAverages]:
    if not readings:
        return None
    return RecentAverages(
        temperature=stats.fmean(r.temperature for r in readings),
        humidity=stats.fmean(r.humidity for r in readings),
        light=stats.fmean(r.light for r in readings),
        count=len(readings),
    )
