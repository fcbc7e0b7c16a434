# chart_renderer.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from formatting import format_clock
from models import ChartPoint

RGBA = Tuple[int, int, int, int]
Point = Tuple[float, float]


@dataclass(frozen=True)
class Padding:
    top: float = 20
    right: float = 20
    bottom: float = 40
    left: float = 50


PADDING = Padding()
GRID_LINES = 6
TIME_LABELS = 6
LINE_WIDTH = 3
LABEL_SIZE_PX = 12

GRID_COLOR: RGBA = (0xE5, 0xE7, 0xEB, 0xFF)
LABEL_COLOR: RGBA = (0x6B, 0x72, 0x80, 0xFF)
FILL_TOP_ALPHA = 0x40
FILL_BOTTOM_ALPHA = 0x05


class Surface(Protocol):
    """
    Superficie de dibujo 2D en coordenadas lógicas (sin escalar).

    `begin` prepara el lienzo al tamaño lógico * device_pixel_ratio y aplica
    la escala; `end` termina el dibujo.
    """

    def logical_size(self) -> Tuple[float, float]: ...

    def device_pixel_ratio(self) -> float: ...

    def begin(self) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, color: RGBA, width: float) -> None: ...

    def fill_vertical_gradient(
        self, polygon: Sequence[Point], y_top: float, y_bottom: float, top: RGBA, bottom: RGBA
    ) -> None: ...

    def polyline(self, points: Sequence[Point], color: RGBA, width: float) -> None: ...

    def text(self, x: float, y: float, text: str, color: RGBA, align: str, size_px: float) -> None: ...

    def end(self) -> None: ...


@dataclass(frozen=True)
class ChartLayout:
    left: float
    top: float
    right: float
    bottom: float
    min_value: float
    max_value: float
    value_range: float
    points: List[Point]
    gridlines: List[float]
    value_ticks: List[Tuple[float, str]]
    time_ticks: List[Tuple[float, str]]

    @property
    def chart_width(self) -> float:
        return self.right - self.left

    @property
    def chart_height(self) -> float:
        return self.bottom - self.top


def parse_hex_color(color_hex: str, alpha: int = 0xFF) -> RGBA:
    value = color_hex.strip().lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    if len(value) != 6:
        raise ValueError(f"Color no válido: {color_hex!r}")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return r, g, b, alpha


def compute_layout(
    width: float,
    height: float,
    window: Sequence[ChartPoint],
    padding: Padding = PADDING,
) -> Optional[ChartLayout]:
    """Geometría de la gráfica. None si la ventana está vacía."""
    n = len(window)
    if n == 0:
        return None

    left = padding.left
    top = padding.top
    right = max(left, width - padding.right)
    bottom = max(top, height - padding.bottom)
    chart_width = right - left
    chart_height = bottom - top

    values = [p.value for p in window]
    min_value = min(values)
    max_value = max(values)
    # todos iguales -> rango 1 para no dividir por cero
    value_range = (max_value - min_value) or 1.0

    def x_at(index: int) -> float:
        # un único punto va al centro horizontal
        if n == 1:
            return left + chart_width / 2
        return left + (chart_width / (n - 1)) * index

    points: List[Point] = []
    for i, p in enumerate(window):
        normalized = (p.value - min_value) / value_range
        points.append((x_at(i), bottom - normalized * chart_height))

    steps = GRID_LINES - 1
    gridlines = [top + (chart_height / steps) * i for i in range(GRID_LINES)]
    value_ticks = [
        (y, f"{min_value + (value_range / steps) * (steps - i):.1f}")
        for i, y in enumerate(gridlines)
    ]

    label_every = max(1, n // TIME_LABELS)
    time_ticks = [
        (x_at(i), format_clock(p.timestamp))
        for i, p in enumerate(window)
        if i % label_every == 0 or i == n - 1
    ]

    return ChartLayout(
        left=left,
        top=top,
        right=right,
        bottom=bottom,
        min_value=min_value,
        max_value=max_value,
        value_range=value_range,
        points=points,
        gridlines=gridlines,
        value_ticks=value_ticks,
        time_ticks=time_ticks,
    )


def render(surface: Surface, window: Sequence[ChartPoint], color_hex: str = "#3b82f6") -> Optional[ChartLayout]:
    """
    Dibuja la ventana en la superficie: rejilla, área con degradado, línea y
    etiquetas. Con la ventana vacía no dibuja nada (el llamador muestra un
    texto de espera).
    """
    width, height = surface.logical_size()
    layout = compute_layout(width, height, window)
    if layout is None:
        return None

    surface.begin()
    try:
        for y in layout.gridlines:
            surface.line(layout.left, y, layout.right, y, GRID_COLOR, 1)

        first_x = layout.points[0][0]
        last_x = layout.points[-1][0]
        polygon = list(layout.points) + [(last_x, layout.bottom), (first_x, layout.bottom)]
        surface.fill_vertical_gradient(
            polygon,
            layout.top,
            layout.bottom,
            parse_hex_color(color_hex, FILL_TOP_ALPHA),
            parse_hex_color(color_hex, FILL_BOTTOM_ALPHA),
        )

        surface.polyline(layout.points, parse_hex_color(color_hex), LINE_WIDTH)

        for x, label in layout.time_ticks:
            surface.text(x, layout.bottom + 20, label, LABEL_COLOR, "center", LABEL_SIZE_PX)
        for y, label in layout.value_ticks:
            surface.text(layout.left - 10, y + 4, label, LABEL_COLOR, "right", LABEL_SIZE_PX)
    finally:
        surface.end()

    return layout
