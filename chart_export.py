# chart_export.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple

import numpy as np
from matplotlib.figure import Figure
from matplotlib.patches import Polygon

from chart_renderer import RGBA, Point, render
from models import ChartPoint

PX_TO_PT = 72 / 100  # la figura usa 100 dpi por píxel lógico


def _mpl_color(color: RGBA) -> Tuple[float, float, float, float]:
    return tuple(c / 255 for c in color)  # type: ignore[return-value]


class MatplotlibSurface:
    """
    La misma gráfica sobre una figura de matplotlib, para guardarla como PNG.
    Los ejes se invierten para usar coordenadas de píxel (y hacia abajo).
    """

    BASE_DPI = 100

    def __init__(self, width: float, height: float, dpr: float = 1.0) -> None:
        self.width = width
        self.height = height
        self.dpr = dpr or 1.0
        self.figure: Optional[Figure] = None
        self.ax = None

    def logical_size(self) -> Tuple[float, float]:
        return self.width, self.height

    def device_pixel_ratio(self) -> float:
        return self.dpr

    def begin(self) -> None:
        self.figure = Figure(
            figsize=(self.width / self.BASE_DPI, self.height / self.BASE_DPI),
            dpi=self.BASE_DPI * self.dpr,
        )
        self.figure.patch.set_facecolor("white")
        self.ax = self.figure.add_axes([0, 0, 1, 1])
        self.ax.axis("off")
        self._fix_limits()

    def _fix_limits(self) -> None:
        self.ax.set_xlim(0, self.width)
        self.ax.set_ylim(self.height, 0)
        self.ax.set_autoscale_on(False)

    def line(self, x1: float, y1: float, x2: float, y2: float, color: RGBA, width: float) -> None:
        self.ax.plot([x1, x2], [y1, y2], color=_mpl_color(color), linewidth=width * PX_TO_PT)

    def fill_vertical_gradient(
        self, polygon: Sequence[Point], y_top: float, y_bottom: float, top: RGBA, bottom: RGBA
    ) -> None:
        t = np.linspace(0.0, 1.0, 256)[:, None]
        start = np.array(_mpl_color(top))
        stop = np.array(_mpl_color(bottom))
        gradient = (start + (stop - start) * t)[:, None, :]

        xs = [p[0] for p in polygon]
        image = self.ax.imshow(
            gradient,
            extent=(min(xs), max(xs), y_bottom, y_top),
            origin="upper",
            aspect="auto",
            interpolation="bilinear",
        )
        clip = Polygon(list(polygon), closed=True, facecolor="none", edgecolor="none")
        self.ax.add_patch(clip)
        image.set_clip_path(clip)

    def polyline(self, points: Sequence[Point], color: RGBA, width: float) -> None:
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        self.ax.plot(
            xs,
            ys,
            color=_mpl_color(color),
            linewidth=width * PX_TO_PT,
            solid_capstyle="round",
            solid_joinstyle="round",
            marker="o" if len(points) == 1 else None,
            markersize=width * PX_TO_PT,
        )

    def text(self, x: float, y: float, text: str, color: RGBA, align: str, size_px: float) -> None:
        self.ax.text(x, y, text, color=_mpl_color(color), ha=align, va="baseline", fontsize=size_px * PX_TO_PT)

    def end(self) -> None:
        # imshow puede tocar los límites
        self._fix_limits()

    def save(self, output_file: Path) -> None:
        if self.figure is None:
            raise RuntimeError("No hay nada dibujado todavía")
        self.figure.savefig(output_file, dpi=self.figure.dpi)


def export_chart_png(
    window: Sequence[ChartPoint],
    output_file: Path,
    color_hex: str = "#3b82f6",
    width: float = 800,
    height: float = 320,
    dpr: float = 2.0,
) -> bool:
    """Guarda la ventana actual como PNG. Devuelve False si no hay datos."""
    surface = MatplotlibSurface(width, height, dpr)
    if render(surface, window, color_hex) is None:
        return False
    surface.save(Path(output_file))
    return True
