# timeseries.py
from __future__ import annotations
from typing import Tuple

from models import ChartPoint
from settings import WINDOW_CAPACITY

TimeSeriesWindow = Tuple[ChartPoint, ...]

EMPTY_WINDOW: TimeSeriesWindow = ()


def append(
    window: TimeSeriesWindow,
    point: ChartPoint,
    capacity: int = WINDOW_CAPACITY,
) -> TimeSeriesWindow:
    """
    Devuelve una ventana nueva con `point` al final, recortada a las últimas
    `capacity` muestras. No reordena ni elimina timestamps repetidos.
    """
    if capacity <= 0:
        return EMPTY_WINDOW
    return (tuple(window) + (point,))[-capacity:]
