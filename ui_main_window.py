# ui_main_window.py
from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QScrollArea,
    QStatusBar,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from controllers import LiveMonitorController, RecentRecordsController, SummaryController
from gateway_client import GatewayClient
from scheduler import PollingScheduler
from settings import SettingsManager
from views import LiveMonitorView, RecentRecordsView, SummaryView
from workers import QtExecutor

PLACEHOLDER_TABS = {
    "Dispositivos": "Gestión de dispositivos próximamente...",
    "Alertas": "Configuración de alertas próximamente...",
    "Ajustes": "Ajustes del sistema próximamente...",
}


class MainWindow(QMainWindow):
    def __init__(self, client: GatewayClient, settings: SettingsManager, parent=None) -> None:
        super().__init__(parent)
        self.client = client
        self.settings = settings

        self.setWindowTitle("Smart IoT · Riego y sensores")

        # Cada vista tiene su propio sondeo y su propio estado
        self.scheduler = PollingScheduler(self)
        self.executor = QtExecutor()
        self.live = LiveMonitorController(client, self.scheduler, self.executor)
        self.recent = RecentRecordsController(
            client, self.scheduler, self.executor, limit=settings.recent_limit()
        )
        self.summary = SummaryController(client, self.scheduler, self.executor)
        self.recent.store.subscribe(lambda state: self.settings.set("recent_limit", state.limit))

        # ===================== LAYOUT PRINCIPAL =====================
        central = QWidget(self)
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(6, 6, 6, 6)
        main_layout.setSpacing(8)

        # --------- BARRA SUPERIOR ----------
        top_layout = QHBoxLayout()
        self.lbl_backend = QLabel(f"Backend: {client.base_url}")
        self.lbl_backend.setStyleSheet("color: gray;")
        self.dark_mode_check = QCheckBox("🌙 Modo oscuro")
        self.dark_mode_check.stateChanged.connect(self.toggle_dark_mode)
        top_layout.addWidget(self.lbl_backend)
        top_layout.addStretch()
        top_layout.addWidget(self.dark_mode_check)
        main_layout.addLayout(top_layout)

        # --------- PESTAÑAS ----------
        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_dashboard(), "Dashboard")
        for title, text in PLACEHOLDER_TABS.items():
            self.tabs.addTab(self._placeholder(title, text), title)
        main_layout.addWidget(self.tabs)

        status = QStatusBar()
        self.setStatusBar(status)
        self.live.store.subscribe(self._live_status)

        # Tema inicial
        if self.settings.get("dark_mode", False):
            self.dark_mode_check.setChecked(True)
            self._apply_dark_palette()
        else:
            self._apply_light_palette()

        self.tabs.setCurrentIndex(int(self.settings.get("last_tab", 0) or 0))
        self.tabs.currentChanged.connect(lambda index: self.settings.set("last_tab", index))

    def _build_dashboard(self) -> QWidget:
        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setSpacing(16)
        layout.addWidget(LiveMonitorView(self.live))
        layout.addWidget(RecentRecordsView(self.recent))
        layout.addWidget(SummaryView(self.summary))
        layout.addStretch()

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(content)
        return scroll

    def _placeholder(self, title: str, text: str) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        lbl_title = QLabel(title)
        lbl_title.setAlignment(Qt.AlignCenter)
        lbl_title.setStyleSheet("font-size: 20px; font-weight: 700;")
        lbl_text = QLabel(text)
        lbl_text.setAlignment(Qt.AlignCenter)
        lbl_text.setStyleSheet("color: gray;")
        layout.addStretch()
        layout.addWidget(lbl_title)
        layout.addWidget(lbl_text)
        layout.addStretch()
        return page

    def _live_status(self, state) -> None:
        if state.reading is not None and not state.error:
            r = state.reading
            self.statusBar().showMessage(
                f"Última lectura: T={r.temperature:.1f}°C  H={r.humidity:.1f}%  L={r.light:.1f}"
            )

    def closeEvent(self, event) -> None:  # noqa: N802
        for controller in (self.live, self.recent, self.summary):
            controller.unmount()
        super().closeEvent(event)

    # ===================== MODO OSCURO / CLARO =====================
    def toggle_dark_mode(self, state: int) -> None:
        enabled = state == Qt.Checked.value
        self.settings.set("dark_mode", enabled)
        if enabled:
            self._apply_dark_palette()
        else:
            self._apply_light_palette()

    def _apply_dark_palette(self) -> None:
        dark_style = """
        QMainWindow {
            background-color: #1e1e1e;
            color: #ffffff;
        }
        QWidget {
            background-color: #2b2b2b;
            color: #ffffff;
        }
        QPushButton {
            background-color: #3a3a3a;
            color: #ffffff;
            border: 1px solid #555;
            border-radius: 4px;
            padding: 4px 10px;
        }
        QPushButton:hover {
            background-color: #505050;
        }
        QPushButton:disabled {
            background-color: #2b2b2b;
            color: #777777;
        }
        QComboBox {
            background-color: #3a3a3a;
            color: #ffffff;
            border: 1px solid #666;
            border-radius: 4px;
            padding: 2px 6px;
        }
        QCheckBox {
            color: #ffffff;
        }
        #metricCard, #pumpFrame {
            background-color: #3a3a3a;
            border-radius: 6px;
        }
        """
        self.setStyleSheet(dark_style)

    def _apply_light_palette(self) -> None:
        light_style = """
        QMainWindow {
            background-color: #e3e0dc;
            color: #000000;
        }
        QWidget {
            background-color: #ffffff;
            color: #000000;
        }
        QPushButton {
            background-color: #ffffff;
            color: #000000;
            border: 1px solid #aaa;
            border-radius: 4px;
            padding: 4px 10px;
        }
        QPushButton:hover {
            background-color: #f0f0f0;
        }
        QPushButton:disabled {
            background-color: #dddddd;
            color: #888888;
        }
        QComboBox {
            background-color: #ffffff;
            color: #000000;
            border: 1px solid #888;
            border-radius: 4px;
            padding: 2px 6px;
        }
        QCheckBox {
            color: #000000;
        }
        #metricCard, #pumpFrame {
            background-color: #f9fafb;
            border-radius: 6px;
        }
        """
        self.setStyleSheet(light_style)
