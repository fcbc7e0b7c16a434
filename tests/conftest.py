# conftest.py
from __future__ import annotations

from typing import Any, Callable, List, Optional

import pytest

from gateway_client import GatewayClient
from scheduler import PollingScheduler

_INVALID_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if self._payload is _INVALID_JSON:
            raise ValueError("no JSON")
        return self._payload


class FakeSession:
    """Sustituye a requests.Session: devuelve respuestas en orden y guarda las llamadas."""

    def __init__(self, *responses: FakeResponse, error: Optional[Exception] = None) -> None:
        self.responses = list(responses)
        self.error = error
        self.calls: List[dict] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    def close(self) -> None:
        pass


class _FakeSignal:
    def __init__(self) -> None:
        self._slots: List[Callable[[], None]] = []

    def connect(self, slot: Callable[[], None]) -> None:
        self._slots.append(slot)

    def emit(self) -> None:
        for slot in list(self._slots):
            slot()


class FakeTimer:
    def __init__(self) -> None:
        self.timeout = _FakeSignal()
        self.interval: Optional[int] = None
        self.running = False
        self.deleted = False

    def setInterval(self, ms: int) -> None:  # noqa: N802
        self.interval = ms

    def start(self) -> None:
        self.running = True

    def stop(self) -> None:
        self.running = False

    def deleteLater(self) -> None:  # noqa: N802
        self.deleted = True

    def fire(self) -> None:
        if self.running:
            self.timeout.emit()


class SyncExecutor:
    def __init__(self) -> None:
        self.submitted = 0

    def submit(self, fn, on_success, on_error) -> None:
        self.submitted += 1
        try:
            result = fn()
        except Exception as e:
            on_error(e)
        else:
            on_success(result)


class DeferredExecutor:
    """Guarda los trabajos para completarlos en el orden que decida el test."""

    def __init__(self) -> None:
        self.jobs: List[tuple] = []

    def submit(self, fn, on_success, on_error) -> None:
        self.jobs.append((fn, on_success, on_error))

    def complete(self, index: int) -> None:
        fn, on_success, on_error = self.jobs[index]
        try:
            result = fn()
        except Exception as e:
            on_error(e)
        else:
            on_success(result)


@pytest.fixture
def json_response():
    return FakeResponse


@pytest.fixture
def invalid_json():
    return _INVALID_JSON


@pytest.fixture
def make_client():
    def factory(*responses: FakeResponse, error: Optional[Exception] = None) -> GatewayClient:
        return GatewayClient("http://backend.test", timeout=1, session=FakeSession(*responses, error=error))

    return factory


@pytest.fixture
def timers() -> List[FakeTimer]:
    return []


@pytest.fixture
def scheduler(timers) -> PollingScheduler:
    def factory() -> FakeTimer:
        timer = FakeTimer()
        timers.append(timer)
        return timer

    return PollingScheduler(timer_factory=factory)


@pytest.fixture
def sync_executor() -> SyncExecutor:
    return SyncExecutor()


@pytest.fixture
def deferred_executor() -> DeferredExecutor:
    return DeferredExecutor()
