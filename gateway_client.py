# gateway_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from errors import NoDataError, UpstreamError, ValidationError
from models import HistoricalSummary, PumpAck, PumpState, Reading, RecentReadings
import settings

logger = logging.getLogger(__name__)

LATEST_PATH = "/api/sensor/latest"
RECENT_PATH = "/api/sensor/all"
SUMMARY_PATH = "/api/sensor/summary"
PUMP_PATH = "/api/pompa"

# Cada llamada debe ver el estado actual del backend
NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class GatewayClient:
    """
    Cliente HTTP del backend de sensores.

    Cada operación hace exactamente una petición, sin reintentos. Los fallos
    se lanzan como ValidationError, NoDataError o UpstreamError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or settings.backend_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout()
        self.session = session or requests.Session()

    # ===================== PETICIÓN GENÉRICA =====================
    def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        no_data_on_404: bool = False,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=NO_CACHE_HEADERS,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("%s %s falló: %s", method, url, e)
            raise UpstreamError(f"Backend no disponible: {e}") from e

        if no_data_on_404 and response.status_code == 404:
            raise NoDataError("No sensor data available yet")

        if not 200 <= response.status_code < 300:
            logger.error("%s %s devolvió HTTP %s", method, url, response.status_code)
            raise UpstreamError(f"El backend devolvió HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s devolvió un cuerpo no-JSON", method, url)
            raise UpstreamError("Respuesta del backend no es JSON") from e

    # ===================== LECTURAS =====================
    def fetch_latest_reading(self) -> Reading:
        data = self.request_json("GET", LATEST_PATH, no_data_on_404=True)
        return _parse(Reading.from_backend, data)

    def fetch_recent_readings(self, limit: int = settings.DEFAULT_RECENT_LIMIT) -> RecentReadings:
        validate_limit(limit)
        data = self.request_json("GET", RECENT_PATH, params={"limit": limit})
        return _parse(RecentReadings.from_backend, data)

    def fetch_summary(self) -> HistoricalSummary:
        data = self.request_json("GET", SUMMARY_PATH)
        return _parse(HistoricalSummary.from_backend, data)

    # ===================== BOMBA =====================
    def set_pump_state(self, state: Any) -> PumpAck:
        pump_state = validate_pump_state(state)
        data = self.request_json("POST", PUMP_PATH, json={"status": pump_state.value})
        logger.info("Bomba -> %s", pump_state.value)
        return PumpAck(state=pump_state, payload=data if isinstance(data, dict) else {})


def validate_pump_state(state: Any) -> PumpState:
    if isinstance(state, PumpState):
        return state
    if state in ("ON", "OFF"):
        return PumpState(state)
    raise ValidationError("Invalid status. Use ON or OFF")


def validate_limit(limit: Any) -> int:
    # bool es subclase de int, pero no es un límite válido
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValidationError("limit must be a positive integer")
    return limit


def _parse(factory, data: Any):
    if not isinstance(data, dict):
        raise UpstreamError("Respuesta del backend con formato inesperado")
    try:
        return factory(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.error("Respuesta del backend incompleta: %r", e)
        raise UpstreamError("Respuesta del backend con formato inesperado") from e
