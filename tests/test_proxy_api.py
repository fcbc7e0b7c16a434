import pytest
import requests

from proxy_api import create_app

LATEST = {"suhu": 24.5, "kelembapan": 61.0, "cahaya": 80.0, "timestamp": "2025-01-01T10:00:00"}


@pytest.fixture
def make_app(make_client):
    def factory(*responses, error=None):
        client = make_client(*responses, error=error)
        app = create_app(client)
        app.testing = True
        return app.test_client(), client.session

    return factory


def test_latest_passthrough(make_app, json_response):
    http, session = make_app(json_response(200, LATEST))
    resp = http.get("/api/sensor/latest")
    assert resp.status_code == 200
    assert resp.get_json() == LATEST
    assert session.calls[0]["url"] == "http://backend.test/api/sensor/latest"


def test_latest_no_data(make_app, json_response):
    http, _ = make_app(json_response(404, {}))
    resp = http.get("/api/sensor/latest")
    assert resp.status_code == 404
    assert resp.get_json() == {"message": "No sensor data available yet"}


def test_latest_upstream_failure(make_app):
    http, _ = make_app(error=requests.ConnectionError("refused"))
    resp = http.get("/api/sensor/latest")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to fetch sensor data"}


def test_summary_route(make_app, json_response):
    http, session = make_app(json_response(200, {"suhumax": 30}))
    resp = http.get("/api/sensor")
    assert resp.status_code == 200
    assert resp.get_json() == {"suhumax": 30}
    assert session.calls[0]["url"] == "http://backend.test/api/sensor/summary"

    http, _ = make_app(json_response(502, {}))
    resp = http.get("/api/sensor")
    assert resp.status_code == 500
    assert "error" in resp.get_json()


def test_all_default_limit(make_app, json_response):
    http, session = make_app(json_response(200, {"count": 0, "data": []}))
    resp = http.get("/api/sensor/all")
    assert resp.status_code == 200
    assert session.calls[0]["params"] == {"limit": 50}

    http.get("/api/sensor/all?limit=200")
    assert session.calls[1]["params"] == {"limit": 200}


@pytest.mark.parametrize("limit", ["0", "-1", "abc"])
def test_all_rejects_bad_limit(make_app, json_response, limit):
    http, session = make_app(json_response(200, {}))
    resp = http.get(f"/api/sensor/all?limit={limit}")
    assert resp.status_code == 400
    assert "message" in resp.get_json()
    assert session.calls == []


def test_all_upstream_failure(make_app, json_response):
    http, _ = make_app(json_response(500, {}))
    resp = http.get("/api/sensor/all")
    assert resp.status_code == 500
    assert resp.get_json() == {"message": "Failed to fetch sensor data"}


def test_pump_passthrough(make_app, json_response):
    http, session = make_app(json_response(200, {"status": "ON", "success": True}))
    resp = http.post("/api/pompa", json={"status": "ON"})
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ON", "success": True}
    assert session.calls[0]["json"] == {"status": "ON"}


@pytest.mark.parametrize("body", [{"status": "MAYBE"}, {}, None])
def test_pump_invalid_status(make_app, json_response, body):
    http, session = make_app(json_response(200, {}))
    resp = http.post("/api/pompa", json=body) if body is not None else http.post("/api/pompa", data="x")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid status. Use ON or OFF"}
    assert session.calls == []


def test_pump_upstream_failure(make_app, json_response):
    http, _ = make_app(json_response(500, {}))
    resp = http.post("/api/pompa", json={"status": "OFF"})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to control pump"}


def test_cors_header(make_app, json_response):
    http, _ = make_app(json_response(200, LATEST))
    resp = http.get("/api/sensor/latest", headers={"Origin": "http://example.com"})
    assert resp.headers.get("Access-Control-Allow-Origin") in ("*", "http://example.com")


@pytest.mark.parametrize("body", [["ON"], "ON", 5])
def test_pump_body_must_be_an_object(make_app, json_response, body):
    http, session = make_app(json_response(200, {}))
    resp = http.post("/api/pompa", json=body)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid status. Use ON or OFF"}
    assert session.calls == []
