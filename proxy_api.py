# proxy_api.py
from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS

from errors import GatewayError, NoDataError, ValidationError
from gateway_client import (
    LATEST_PATH,
    PUMP_PATH,
    RECENT_PATH,
    SUMMARY_PATH,
    GatewayClient,
    validate_pump_state,
)
from logger import setup_logging
import settings

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)


def _client() -> GatewayClient:
    return current_app.extensions["gateway_client"]


def _upstream_failure(key: str, message: str):
    return jsonify({key: message}), 500


# ===================== RUTAS =====================
@api.route("/pompa", methods=["POST"])
def control_pump():
    body = request.get_json(silent=True)
    status = body.get("status") if isinstance(body, dict) else None
    try:
        state = validate_pump_state(status)
    except ValidationError as e:
        return jsonify({"error": e.message}), 400
    try:
        data = _client().request_json("POST", PUMP_PATH, json={"status": state.value})
    except GatewayError as e:
        logger.error("Error controlando la bomba: %s", e)
        return _upstream_failure("error", "Failed to control pump")
    return jsonify(data)


@api.route("/sensor/all", methods=["GET"])
def all_readings():
    raw_limit = request.args.get("limit", str(settings.DEFAULT_RECENT_LIMIT))
    try:
        limit = int(raw_limit)
    except ValueError:
        limit = 0
    if limit <= 0:
        return jsonify({"message": "limit must be a positive integer"}), 400
    try:
        data = _client().request_json("GET", RECENT_PATH, params={"limit": limit})
    except GatewayError as e:
        logger.error("Error obteniendo todas las lecturas: %s", e)
        return _upstream_failure("message", "Failed to fetch sensor data")
    return jsonify(data)


@api.route("/sensor/latest", methods=["GET"])
def latest_reading():
    try:
        data = _client().request_json("GET", LATEST_PATH, no_data_on_404=True)
    except NoDataError:
        return jsonify({"message": "No sensor data available yet"}), 404
    except GatewayError as e:
        logger.error("Error obteniendo la última lectura: %s", e)
        return _upstream_failure("error", "Failed to fetch sensor data")
    return jsonify(data)


@api.route("/sensor", methods=["GET"])
def summary():
    try:
        data = _client().request_json("GET", SUMMARY_PATH)
    except GatewayError as e:
        logger.error("Error obteniendo el resumen: %s", e)
        return _upstream_failure("error", "Failed to fetch sensor data")
    return jsonify(data)


@api.route("/healthz", methods=["GET"])
def healthz():
    return jsonify({"status": "ok", "backend": _client().base_url})


# ===================== APP =====================
def create_app(client: Optional[GatewayClient] = None) -> Flask:
    app = Flask(__name__)
    CORS(app)
    app.extensions["gateway_client"] = client or GatewayClient()
    app.register_blueprint(api, url_prefix="/api")
    return app


def main() -> None:
    load_dotenv()
    setup_logging(settings.log_level(), settings.log_file() or None)
    host, port = settings.proxy_address()
    app = create_app()
    logger.info("Proxy escuchando en %s:%s -> %s", host, port, app.extensions["gateway_client"].base_url)
    app.run(host=host, port=port)


if __name__ == "__main__":
    main()
