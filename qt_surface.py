# qt_surface.py
from __future__ import annotations

from typing import Optional, Sequence, Tuple

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import (
    QBrush,
    QColor,
    QFontMetricsF,
    QImage,
    QLinearGradient,
    QPainter,
    QPainterPath,
    QPen,
)

from chart_renderer import RGBA, Point


# ===================== QPAINTER (WIDGET) =====================
class QtSurface:
    """Dibuja sobre un QImage escalado por el device pixel ratio."""

    def __init__(self, width: float, height: float, dpr: float = 1.0) -> None:
        self.width = width
        self.height = height
        self.dpr = dpr or 1.0
        self.image: Optional[QImage] = None
        self._painter: Optional[QPainter] = None

    def logical_size(self) -> Tuple[float, float]:
        return self.width, self.height

    def device_pixel_ratio(self) -> float:
        return self.dpr

    def begin(self) -> None:
        self.image = QImage(
            max(1, int(round(self.width * self.dpr))),
            max(1, int(round(self.height * self.dpr))),
            QImage.Format_ARGB32_Premultiplied,
        )
        # con el ratio fijado, el painter trabaja en coordenadas lógicas
        self.image.setDevicePixelRatio(self.dpr)
        self.image.fill(Qt.transparent)
        self._painter = QPainter(self.image)
        self._painter.setRenderHint(QPainter.Antialiasing, True)

    def line(self, x1: float, y1: float, x2: float, y2: float, color: RGBA, width: float) -> None:
        pen = QPen(QColor(*color))
        pen.setWidthF(width)
        self._painter.setPen(pen)
        self._painter.drawLine(QPointF(x1, y1), QPointF(x2, y2))

    def fill_vertical_gradient(
        self, polygon: Sequence[Point], y_top: float, y_bottom: float, top: RGBA, bottom: RGBA
    ) -> None:
        gradient = QLinearGradient(0, y_top, 0, y_bottom)
        gradient.setColorAt(0.0, QColor(*top))
        gradient.setColorAt(1.0, QColor(*bottom))
        self._painter.fillPath(_path(polygon, close=True), QBrush(gradient))

    def polyline(self, points: Sequence[Point], color: RGBA, width: float) -> None:
        pen = QPen(QColor(*color))
        pen.setWidthF(width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        self._painter.setPen(pen)
        self._painter.setBrush(Qt.NoBrush)
        if len(points) == 1:
            self._painter.drawPoint(QPointF(*points[0]))
        else:
            self._painter.drawPath(_path(points))

    def text(self, x: float, y: float, text: str, color: RGBA, align: str, size_px: float) -> None:
        font = self._painter.font()
        font.setPixelSize(int(size_px))
        self._painter.setFont(font)
        advance = QFontMetricsF(font).horizontalAdvance(text)
        if align == "center":
            x -= advance / 2
        elif align == "right":
            x -= advance
        self._painter.setPen(QColor(*color))
        # y es la línea base, como en un canvas
        self._painter.drawText(QPointF(x, y), text)

    def end(self) -> None:
        if self._painter is not None:
            self._painter.end()
            self._painter = None


def _path(points: Sequence[Point], close: bool = False) -> QPainterPath:
    path = QPainterPath()
    path.moveTo(QPointF(*points[0]))
    for x, y in points[1:]:
        path.lineTo(QPointF(x, y))
    if close:
        path.closeSubpath()
    return path
