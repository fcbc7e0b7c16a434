import pytest
import requests

from errors import NoDataError, UpstreamError, ValidationError
from gateway_client import NO_CACHE_HEADERS, GatewayClient
from models import PumpState

LATEST = {"suhu": 24.5, "kelembapan": 61.0, "cahaya": 80.0, "timestamp": "2025-01-01T10:00:00"}
ALL = {
    "count": 2,
    "data": [
        {"idx": 7, "suhu": 25.0, "humid": 60.0, "kecerahan": 70.0, "timestamp": "2025-01-01T10:01:00"},
        {"idx": 6, "suhu": 24.0, "humid": 59.0, "kecerahan": 69.0, "timestamp": "2025-01-01T10:00:00"},
    ],
}
SUMMARY = {
    "suhumax": 33.0,
    "suhumin": 19.5,
    "suhurata": 26.2,
    "humidmax": 88.0,
    "nilai_suhu_max_humid_max": [
        {"idx": 3, "suhu": 33.0, "humid": 88.0, "kecerahan": 50.0, "timestamp": "2024-11-02T12:00:00"},
    ],
    "month_year_max": [{"month_year": "11-2024"}],
}


def test_latest_reading_success(make_client, json_response):
    client = make_client(json_response(200, LATEST))
    reading = client.fetch_latest_reading()
    assert reading.temperature == 24.5
    assert reading.humidity == 61.0
    assert reading.light == 80.0
    assert reading.timestamp == "2025-01-01T10:00:00"

    call = client.session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://backend.test/api/sensor/latest"
    assert call["headers"] == NO_CACHE_HEADERS


def test_latest_reading_404_is_no_data(make_client, json_response):
    client = make_client(json_response(404, {"message": "none"}))
    with pytest.raises(NoDataError):
        client.fetch_latest_reading()


def test_latest_reading_500_is_upstream(make_client, json_response):
    client = make_client(json_response(500, {"error": "boom"}))
    with pytest.raises(UpstreamError) as excinfo:
        client.fetch_latest_reading()
    assert not isinstance(excinfo.value, NoDataError)


def test_network_failure_is_upstream(make_client):
    client = make_client(error=requests.ConnectionError("refused"))
    with pytest.raises(UpstreamError):
        client.fetch_latest_reading()


def test_malformed_body_is_upstream(make_client, json_response, invalid_json):
    with pytest.raises(UpstreamError):
        make_client(json_response(200, {"suhu": 20})).fetch_latest_reading()
    with pytest.raises(UpstreamError):
        make_client(json_response(200, invalid_json)).fetch_latest_reading()


def test_404_on_other_endpoints_is_upstream(make_client, json_response):
    client = make_client(json_response(404, {}))
    with pytest.raises(UpstreamError) as excinfo:
        client.fetch_summary()
    assert not isinstance(excinfo.value, NoDataError)


def test_recent_readings(make_client, json_response):
    client = make_client(json_response(200, ALL))
    recent = client.fetch_recent_readings(20)
    assert recent.count == 2
    assert [r.id for r in recent.items] == [7, 6]
    assert recent.items[0].light == 70.0
    assert client.session.calls[0]["params"] == {"limit": 20}


@pytest.mark.parametrize("limit", [0, -5, 2.5, "10", True])
def test_recent_readings_rejects_bad_limit_before_request(make_client, json_response, limit):
    client = make_client(json_response(200, ALL))
    with pytest.raises(ValidationError):
        client.fetch_recent_readings(limit)
    assert client.session.calls == []


def test_summary(make_client, json_response):
    summary = make_client(json_response(200, SUMMARY)).fetch_summary()
    assert summary.max_temp == 33.0
    assert summary.min_temp == 19.5
    assert summary.avg_temp == 26.2
    assert summary.max_humidity == 88.0
    assert summary.top_records[0].id == 3
    assert summary.month_year_buckets == ("11-2024",)


def test_set_pump_state_posts_status(make_client, json_response):
    client = make_client(json_response(200, {"status": "ON", "ok": True}))
    ack = client.set_pump_state(PumpState.ON)
    assert ack.state is PumpState.ON
    assert ack.payload == {"status": "ON", "ok": True}
    call = client.session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://backend.test/api/pompa"
    assert call["json"] == {"status": "ON"}


def test_set_pump_state_accepts_plain_strings(make_client, json_response):
    client = make_client(json_response(200, {}))
    assert client.set_pump_state("OFF").state is PumpState.OFF


def test_set_pump_state_invalid_status_never_hits_network(make_client, json_response):
    client = make_client(json_response(200, {}))
    with pytest.raises(ValidationError):
        client.set_pump_state("MAYBE")
    assert client.session.calls == []


def test_set_pump_state_upstream_failure(make_client, json_response):
    client = make_client(json_response(503, {}))
    with pytest.raises(UpstreamError):
        client.set_pump_state(PumpState.OFF)


def test_base_url_from_environment(monkeypatch):
    monkeypatch.setenv("SENSOR_BACKEND_URL", "http://pi.local:3000/")
    assert GatewayClient().base_url == "http://pi.local:3000"
    monkeypatch.delenv("SENSOR_BACKEND_URL")
    assert GatewayClient().base_url == "http://localhost:3000"
