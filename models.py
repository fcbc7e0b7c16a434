# models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Tuple


def _pick(data: Mapping[str, Any], *names: str) -> Any:
    # El backend usa nombres distintos según el endpoint (suhu/kelembapan/humid...)
    for name in names:
        if name in data and data[name] is not None:
            return data[name]
    raise KeyError(names[0])


class PumpState(str, Enum):
    ON = "ON"
    OFF = "OFF"

    def opposite(self) -> "PumpState":
        return PumpState.OFF if self is PumpState.ON else PumpState.ON


@dataclass(frozen=True)
class Reading:
    temperature: float
    humidity: float
    light: float  # valor del sensor de luz tal cual lo envía el ESP32
    timestamp: str  # ISO8601

    @classmethod
    def from_backend(cls, data: Mapping[str, Any]) -> "Reading":
        return cls(
            temperature=float(_pick(data, "suhu", "temperature")),
            humidity=float(_pick(data, "kelembapan", "humid", "humidity")),
            light=float(_pick(data, "cahaya", "kecerahan", "light")),
            timestamp=str(_pick(data, "timestamp")),
        )


@dataclass(frozen=True)
class RecordReading(Reading):
    id: int = 0

    @classmethod
    def from_backend(cls, data: Mapping[str, Any]) -> "RecordReading":
        base = Reading.from_backend(data)
        return cls(
            temperature=base.temperature,
            humidity=base.humidity,
            light=base.light,
            timestamp=base.timestamp,
            id=int(_pick(data, "idx", "id")),
        )


@dataclass(frozen=True)
class RecentReadings:
    count: int
    items: Tuple[RecordReading, ...] = ()

    @classmethod
    def from_backend(cls, data: Mapping[str, Any]) -> "RecentReadings":
        items = tuple(RecordReading.from_backend(row) for row in data.get("data") or [])
        return cls(count=int(data.get("count", len(items))), items=items)


@dataclass(frozen=True)
class HistoricalSummary:
    max_temp: float
    min_temp: float
    avg_temp: float
    max_humidity: float
    top_records: Tuple[RecordReading, ...] = ()
    month_year_buckets: Tuple[str, ...] = ()

    @classmethod
    def from_backend(cls, data: Mapping[str, Any]) -> "HistoricalSummary":
        records = _pick(data, "nilai_suhu_max_humid_max", "top_records")
        buckets = _pick(data, "month_year_max", "month_year_buckets")
        return cls(
            max_temp=float(_pick(data, "suhumax", "max_temp")),
            min_temp=float(_pick(data, "suhumin", "min_temp")),
            avg_temp=float(_pick(data, "suhurata", "avg_temp")),
            max_humidity=float(_pick(data, "humidmax", "max_humidity")),
            top_records=tuple(RecordReading.from_backend(r) for r in records),
            month_year_buckets=tuple(_month_year(b) for b in buckets),
        )


def _month_year(bucket: Any) -> str:
    if isinstance(bucket, Mapping):
        return str(bucket["month_year"])
    return str(bucket)


@dataclass(frozen=True)
class ChartPoint:
    timestamp: str
    value: float


def project(readings: Iterable[Reading], channel: str = "temperature") -> Tuple[ChartPoint, ...]:
    """Proyecta un canal numérico de cada lectura a puntos de gráfica."""
    return tuple(ChartPoint(timestamp=r.timestamp, value=float(getattr(r, channel))) for r in readings)


@dataclass
class PumpAck:
    state: PumpState
    payload: Dict[str, Any] = field(default_factory=dict)
