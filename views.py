# views.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMessageBox,
    QPushButton,
    QSizePolicy,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from chart_renderer import render
from chart_export import export_chart_png
from controllers import LiveMonitorController, RecentRecordsController, SummaryController
from export import export_to_excel
from formatting import (
    LEVEL_COLORS,
    air_quality_placeholder,
    format_timestamp,
    humidity_level,
    parse_month_year,
    recent_averages,
    temperature_level,
)
from models import PumpState, RecordReading
from qt_surface import QtSurface
from settings import RECENT_LIMITS
from state import LiveState, RecentState, SummaryState

CHART_COLOR = "#3b82f6"

BANNER_STYLES = {
    "waiting": "background-color: #fef9c3; color: #854d0e; border: 2px solid #fde047; border-radius: 8px; padding: 8px;",
    "error": "background-color: #fee2e2; color: #991b1b; border: 2px solid #fca5a5; border-radius: 8px; padding: 8px;",
    "stale": "color: #b45309; padding: 2px;",
}


def _banner(label: QLabel, kind: Optional[str], text: str = "") -> None:
    if kind is None:
        label.hide()
        return
    label.setText(text)
    label.setStyleSheet(BANNER_STYLES[kind])
    label.show()


def _section_title(text: str) -> QLabel:
    lbl = QLabel(text)
    lbl.setStyleSheet("font-size: 16px; font-weight: 700;")
    return lbl


# ===================== GRÁFICA =====================
class ChartWidget(QWidget):
    """Gráfica de la ventana de temperaturas, dibujada con chart_renderer."""

    def __init__(self, color: str = CHART_COLOR, parent=None) -> None:
        super().__init__(parent)
        self.color = color
        self._points = ()
        self.setMinimumHeight(320)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

    def set_points(self, points) -> None:
        if points is self._points:
            return
        self._points = points
        self.update()

    def paintEvent(self, _e) -> None:  # noqa: N802
        painter = QPainter(self)
        try:
            if not self._points:
                painter.setPen(QColor("#9ca3af"))
                painter.drawText(self.rect(), Qt.AlignCenter, "Esperando datos del sensor...")
                return
            surface = QtSurface(self.width(), self.height(), self.devicePixelRatioF())
            render(surface, self._points, self.color)
            painter.drawImage(0, 0, surface.image)
        finally:
            painter.end()


class MetricCard(QFrame):
    def __init__(self, title: str, unit: str, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("metricCard")
        self.setFrameShape(QFrame.StyledPanel)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)

        self.title = QLabel(title)
        self.title.setStyleSheet("font-size: 12px; color: gray;")
        self.value = QLabel("—")
        self.value.setStyleSheet("font-size: 26px; font-weight: 700;")
        self.unit = QLabel(unit)
        self.unit.setStyleSheet("color: gray;")

        layout.addWidget(self.title)
        layout.addWidget(self.value)
        layout.addWidget(self.unit)

    def set_value(self, text: str, color: Optional[str] = None) -> None:
        self.value.setText(text)
        style = "font-size: 26px; font-weight: 700;"
        if color:
            style += f" color: {color};"
        self.value.setStyleSheet(style)


# ===================== MONITOR EN TIEMPO REAL =====================
class LiveMonitorView(QWidget):
    def __init__(self, controller: LiveMonitorController, parent=None) -> None:
        super().__init__(parent)
        self.controller = controller

        layout = QVBoxLayout(self)
        layout.setSpacing(8)

        self.banner = QLabel()
        self.banner.setWordWrap(True)
        self.banner.hide()
        layout.addWidget(self.banner)

        # --------- TARJETAS ----------
        cards = QHBoxLayout()
        self.card_temp = MetricCard("Temperatura", "°C")
        self.card_hum = MetricCard("Humedad", "%")
        self.card_light = MetricCard("Luz", "%")
        # índice derivado de la humedad, no es una medida real
        self.card_aqi = MetricCard("Calidad del aire (estimada)", "AQI")
        for card in (self.card_temp, self.card_hum, self.card_light, self.card_aqi):
            cards.addWidget(card)
        layout.addLayout(cards)

        # --------- GRÁFICA ----------
        header = QHBoxLayout()
        header.addWidget(_section_title("Lecturas en tiempo real"))
        live = QLabel("● En vivo")
        live.setStyleSheet("color: #16a34a; font-weight: 600;")
        header.addWidget(live)
        header.addStretch()
        self.btn_export_chart = QPushButton("🖼 Exportar gráfica")
        self.btn_export_chart.clicked.connect(self.export_chart)
        header.addWidget(self.btn_export_chart)
        layout.addLayout(header)

        self.chart = ChartWidget(CHART_COLOR)
        layout.addWidget(self.chart)

        # --------- BOMBA ----------
        pump_frame = QFrame()
        pump_frame.setObjectName("pumpFrame")
        pump_frame.setFrameShape(QFrame.StyledPanel)
        pump_layout = QHBoxLayout(pump_frame)
        pump_title = QLabel("💧 Control de la bomba de agua")
        pump_title.setStyleSheet("font-size: 14px; font-weight: 600;")
        self.lbl_pump = QLabel()
        self.btn_pump = QPushButton()
        self.btn_pump.setCursor(Qt.PointingHandCursor)
        self.btn_pump.setMinimumHeight(34)
        self.btn_pump.clicked.connect(lambda: self.controller.toggle_pump())
        pump_layout.addWidget(pump_title)
        pump_layout.addWidget(self.lbl_pump)
        pump_layout.addStretch()
        pump_layout.addWidget(self.btn_pump)
        layout.addWidget(pump_frame)

        self._last_pump_error: Optional[str] = None
        self.controller.store.subscribe(self._render)
        self._render(self.controller.store.state)

    def showEvent(self, event) -> None:  # noqa: N802
        super().showEvent(event)
        self.controller.mount()

    def hideEvent(self, event) -> None:  # noqa: N802
        self.controller.unmount()
        super().hideEvent(event)

    def _render(self, state: LiveState) -> None:
        status = state.status
        if status == "waiting":
            _banner(self.banner, "waiting", "Esperando datos del sensor (ESP32)...")
        elif status == "error":
            _banner(self.banner, "error", f"Error: {state.error}")
        elif status == "data" and state.error:
            _banner(self.banner, "stale", f"⚠ Datos sin actualizar: {state.error}")
        else:
            _banner(self.banner, None)

        reading = state.reading
        if reading is not None:
            self.card_temp.set_value(f"{reading.temperature:.0f}", LEVEL_COLORS[temperature_level(reading.temperature)])
            self.card_hum.set_value(f"{reading.humidity:.0f}", LEVEL_COLORS[humidity_level(reading.humidity)])
            self.card_light.set_value(f"{reading.light:.0f}")
            self.card_aqi.set_value(str(air_quality_placeholder(reading.humidity)))

        self.chart.set_points(state.window)
        self._render_pump(state)

    def _render_pump(self, state: LiveState) -> None:
        running = state.pump is PumpState.ON
        self.lbl_pump.setText("Estado: En marcha" if running else "Estado: Detenida")
        self.lbl_pump.setStyleSheet(f"font-weight: 600; color: {'#16a34a' if running else '#4b5563'};")

        self.btn_pump.setEnabled(not state.pump_busy)
        if state.pump_busy:
            self.btn_pump.setText("⏳ Procesando...")
        else:
            self.btn_pump.setText("⏹ Apagar" if running else "▶ Encender")

        if state.pump_error and state.pump_error != self._last_pump_error:
            # el diálogo modal se abre fuera del dispatch del store
            QTimer.singleShot(0, lambda message=state.pump_error: self._warn_pump(message))
        self._last_pump_error = state.pump_error

    def _warn_pump(self, message: str) -> None:
        QMessageBox.warning(self, "Bomba", f"No se pudo controlar la bomba:\n{message}")

    def export_chart(self) -> None:
        points = self.controller.store.state.window
        if not points:
            QMessageBox.information(self, "Exportar", "Todavía no hay datos en la gráfica.")
            return
        output_str, _ = QFileDialog.getSaveFileName(self, "Exportar gráfica", "temperatura.png", "PNG (*.png)")
        if not output_str:
            return
        try:
            export_chart_png(points, Path(output_str), CHART_COLOR)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"No se pudo exportar la gráfica:\n{e}")


# ===================== ÚLTIMOS REGISTROS =====================
class RecentRecordsView(QWidget):
    HEADERS = ["ID", "Temperatura", "Humedad", "Luz", "Fecha"]

    def __init__(self, controller: RecentRecordsController, parent=None) -> None:
        super().__init__(parent)
        self.controller = controller

        layout = QVBoxLayout(self)

        top = QHBoxLayout()
        title_box = QVBoxLayout()
        title_box.addWidget(_section_title("Últimas lecturas"))
        self.lbl_subtitle = QLabel()
        self.lbl_subtitle.setStyleSheet("color: gray;")
        title_box.addWidget(self.lbl_subtitle)
        top.addLayout(title_box)
        top.addStretch()

        self.combo_limit = QComboBox()
        for limit in RECENT_LIMITS:
            self.combo_limit.addItem(f"Últimas {limit}", limit)
        self.combo_limit.setCurrentIndex(RECENT_LIMITS.index(controller.store.state.limit))
        self.combo_limit.currentIndexChanged.connect(self._limit_changed)

        self.btn_refresh = QPushButton("🔄 Actualizar")
        self.btn_refresh.clicked.connect(lambda: self.controller.refresh())
        self.btn_export = QPushButton("📤 Exportar a Excel")
        self.btn_export.clicked.connect(self.export_excel)

        top.addWidget(self.combo_limit)
        top.addWidget(self.btn_refresh)
        top.addWidget(self.btn_export)
        layout.addLayout(top)

        self.banner = QLabel()
        self.banner.setWordWrap(True)
        self.banner.hide()
        layout.addWidget(self.banner)

        self.table = QTableWidget(0, len(self.HEADERS))
        self.table.setHorizontalHeaderLabels(self.HEADERS)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setMinimumHeight(260)
        layout.addWidget(self.table)

        self.lbl_averages = QLabel()
        self.lbl_averages.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.lbl_averages)

        self.controller.store.subscribe(self._render)
        self._render(self.controller.store.state)

    def showEvent(self, event) -> None:  # noqa: N802
        super().showEvent(event)
        self.controller.mount()

    def hideEvent(self, event) -> None:  # noqa: N802
        self.controller.unmount()
        super().hideEvent(event)

    def _limit_changed(self, index: int) -> None:
        self.controller.set_limit(self.combo_limit.itemData(index))

    def _render(self, state: RecentState) -> None:
        self.btn_refresh.setText("Actualizando..." if state.loading else "🔄 Actualizar")
        self.btn_refresh.setEnabled(not state.loading)

        status = state.status
        records = state.records
        if status == "error":
            _banner(self.banner, "error", f"Error: {state.error}")
        elif status == "data" and state.error:
            _banner(self.banner, "stale", f"⚠ Datos sin actualizar: {state.error}")
        elif status == "data" and records.count == 0:
            _banner(self.banner, "waiting", "No hay datos todavía. Esperando lecturas del sensor...")
        else:
            _banner(self.banner, None)

        if records is None:
            return

        self.lbl_subtitle.setText(
            f"Mostrando {records.count} registros recientes • actualización cada 10 s"
        )
        self._fill_table(list(records.items))

        averages = recent_averages(records.items)
        if averages is None:
            self.lbl_averages.setText("")
        else:
            self.lbl_averages.setText(
                f"T media: {averages.temperature:.1f} °C   "
                f"H media: {averages.humidity:.1f} %   "
                f"Luz media: {averages.light:.1f} %   "
                f"Total: {averages.count}"
            )

    def _fill_table(self, items: List[RecordReading]) -> None:
        self.table.setRowCount(len(items))
        for row, r in enumerate(items):
            id_text = f"{r.id}  (última)" if row == 0 else str(r.id)
            values = [id_text, f"{r.temperature}°C", f"{r.humidity}%", f"{r.light}%", format_timestamp(r.timestamp)]
            for col, text in enumerate(values):
                item = QTableWidgetItem(text)
                if row == 0:
                    item.setBackground(QColor("#dcfce7"))
                self.table.setItem(row, col, item)

    def export_excel(self) -> None:
        records = self.controller.store.state.records
        if records is None or not records.items:
            QMessageBox.information(self, "Exportar", "No hay registros para exportar.")
            return
        output_str, _ = QFileDialog.getSaveFileName(
            self,
            "Exportar lecturas",
            "sensor_data.xlsx",
            "Excel (*.xlsx);;CSV (*.csv)",
        )
        if not output_str:
            return

        try:
            export_to_excel(records.items, Path(output_str))
            QMessageBox.information(
                self,
                "Exportación",
                f"Datos exportados correctamente a:\n{output_str}",
            )
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"No se pudo exportar:\n{e}")


# ===================== RESUMEN HISTÓRICO =====================
class SummaryView(QWidget):
    HEADERS = ["ID", "Temperatura (°C)", "Humedad (%)", "Brillo (lux)", "Fecha"]

    def __init__(self, controller: SummaryController, parent=None) -> None:
        super().__init__(parent)
        self.controller = controller

        layout = QVBoxLayout(self)

        top = QHBoxLayout()
        top.addWidget(_section_title("Resumen histórico"))
        top.addStretch()
        self.btn_refresh = QPushButton("🔄 Actualizar")
        self.btn_refresh.clicked.connect(lambda: self.controller.refresh())
        top.addWidget(self.btn_refresh)
        layout.addLayout(top)

        self.banner = QLabel()
        self.banner.setWordWrap(True)
        self.banner.hide()
        layout.addWidget(self.banner)

        stats = QGridLayout()
        self.card_max = MetricCard("Temperatura máxima", "°C")
        self.card_min = MetricCard("Temperatura mínima", "°C")
        self.card_avg = MetricCard("Temperatura media", "°C")
        self.card_hum = MetricCard("Humedad máxima", "%")
        for i, card in enumerate((self.card_max, self.card_min, self.card_avg, self.card_hum)):
            stats.addWidget(card, 0, i)
        layout.addLayout(stats)

        layout.addWidget(QLabel("Registros de temperatura y humedad máximas"))
        self.table = QTableWidget(0, len(self.HEADERS))
        self.table.setHorizontalHeaderLabels(self.HEADERS)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setMinimumHeight(160)
        layout.addWidget(self.table)

        layout.addWidget(QLabel("Meses con registros máximos"))
        self.chips = QHBoxLayout()
        self.chips.setSpacing(6)
        chips_box = QWidget()
        chips_box.setLayout(self.chips)
        layout.addWidget(chips_box)

        self.controller.store.subscribe(self._render)
        self._render(self.controller.store.state)

    def showEvent(self, event) -> None:  # noqa: N802
        super().showEvent(event)
        self.controller.mount()

    def hideEvent(self, event) -> None:  # noqa: N802
        self.controller.unmount()
        super().hideEvent(event)

    def _render(self, state: SummaryState) -> None:
        self.btn_refresh.setText("Actualizando..." if state.loading else "🔄 Actualizar")
        self.btn_refresh.setEnabled(not state.loading)

        status = state.status
        if status == "error":
            _banner(self.banner, "error", f"Error: {state.error}  (pulsa Actualizar para reintentar)")
        elif status == "data" and state.error:
            _banner(self.banner, "stale", f"⚠ Datos sin actualizar: {state.error}")
        else:
            _banner(self.banner, None)

        summary = state.summary
        if summary is None:
            return

        self.card_max.set_value(f"{summary.max_temp}")
        self.card_min.set_value(f"{summary.min_temp}")
        self.card_avg.set_value(f"{summary.avg_temp}")
        self.card_hum.set_value(f"{summary.max_humidity}")

        self.table.setRowCount(len(summary.top_records))
        for row, r in enumerate(summary.top_records):
            values = [str(r.id), f"{r.temperature}°C", f"{r.humidity}%", f"{r.light}", format_timestamp(r.timestamp)]
            for col, text in enumerate(values):
                item = QTableWidgetItem(text)
                # resaltar los valores que coinciden con los máximos
                if col == 1 and r.temperature == summary.max_temp:
                    item.setForeground(QColor("#dc2626"))
                elif col == 2 and r.humidity == summary.max_humidity:
                    item.setForeground(QColor("#9333ea"))
                self.table.setItem(row, col, item)

        while self.chips.count():
            child = self.chips.takeAt(0).widget()
            if child is not None:
                child.deleteLater()
        for bucket in summary.month_year_buckets:
            chip = QLabel(parse_month_year(bucket))
            chip.setStyleSheet(
                "background-color: #eef2ff; color: #4338ca; border-radius: 10px; padding: 4px 10px; font-weight: 600;"
            )
            self.chips.addWidget(chip)
        self.chips.addStretch()
