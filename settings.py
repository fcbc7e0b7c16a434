# settings.py
import json
import os
from pathlib import Path
from typing import Any, Dict

SETTINGS_FILE = Path("settings.json")

# ==================== BACKEND ====================
BACKEND_URL_ENV = "SENSOR_BACKEND_URL"
DEFAULT_BACKEND_URL = "http://localhost:3000"
DEFAULT_HTTP_TIMEOUT = 5.0  # segundos

# ==================== INTERVALOS DE SONDEO (ms) ====================
LIVE_INTERVAL_MS = 2000
RECENT_INTERVAL_MS = 10000
SUMMARY_INTERVAL_MS = 30000

WINDOW_CAPACITY = 50
RECENT_LIMITS = (20, 50, 100, 200)
DEFAULT_RECENT_LIMIT = 50


def backend_url() -> str:
    url = os.getenv(BACKEND_URL_ENV, "").strip() or DEFAULT_BACKEND_URL
    return url.rstrip("/")


def http_timeout() -> float:
    try:
        return float(os.getenv("SENSOR_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT))
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT


def log_level() -> str:
    return os.getenv("SENSOR_LOG_LEVEL", "INFO").upper()


def log_file() -> str:
    return os.getenv("SENSOR_LOG_FILE", "")


def proxy_address() -> tuple:
    host = os.getenv("PROXY_HOST", "127.0.0.1")
    try:
        port = int(os.getenv("PROXY_PORT", "8000"))
    except ValueError:
        port = 8000
    return host, port


class SettingsManager:
    """Preferencias de la interfaz (modo oscuro, pestaña, límite) en settings.json."""

    def __init__(self, path: Path = SETTINGS_FILE) -> None:
        self.path = path
        self._data: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if self.path.exists():
            try:
                self._data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError:
                self._data = {}
        else:
            self._data = {}

    def save(self) -> None:
        self.path.write_text(json.dumps(self._data, indent=4), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def recent_limit(self) -> int:
        value = self.get("recent_limit", DEFAULT_RECENT_LIMIT)
        return value if value in RECENT_LIMITS else DEFAULT_RECENT_LIMIT
