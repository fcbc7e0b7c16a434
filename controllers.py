# controllers.py
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from errors import GatewayError
from gateway_client import GatewayClient, validate_limit
from pump_control import PumpController
from scheduler import PollHandle, PollingScheduler
import settings
from state import (
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    LimitChanged,
    LiveState,
    Mounted,
    PumpConfirmed,
    PumpFailed,
    PumpRequested,
    RecentState,
    Store,
    SummaryState,
    live_reducer,
    recent_reducer,
    summary_reducer,
)

logger = logging.getLogger(__name__)


def _failure(ticket: int, error: Exception) -> FetchFailed:
    if isinstance(error, GatewayError):
        return FetchFailed(ticket=ticket, message=error.message, kind=error.kind)
    logger.exception("Error inesperado en el sondeo", exc_info=error)
    return FetchFailed(ticket=ticket, message=str(error) or "Error inesperado", kind="upstream")


class PolledController(ABC):
    """
    Base de las vistas con sondeo: un único sondeo activo entre mount() y
    unmount(). Las respuestas que llegan tras desmontar se descartan.
    """

    name = "poll"

    def __init__(self, scheduler: PollingScheduler, executor, store: Store, interval_ms: int) -> None:
        self.scheduler = scheduler
        self.executor = executor
        self.store = store
        self.interval_ms = interval_ms
        self._handle: Optional[PollHandle] = None

    @property
    def mounted(self) -> bool:
        return self._handle is not None and self._handle.active

    @abstractmethod
    def fetch(self) -> Any:
        """Llamada bloqueante al backend; se ejecuta en el executor."""

    def mount(self) -> None:
        if self.mounted:
            return
        self.store.dispatch(Mounted())
        # el handle debe existir antes del primer tick
        self._handle = self.scheduler.start(self.name, self.interval_ms, self._tick, immediate=False)
        self._handle.fire()

    def unmount(self) -> None:
        PollingScheduler.cancel(self._handle)
        self._handle = None

    def refresh(self) -> None:
        """Recarga manual (botón 'Actualizar')."""
        if self.mounted:
            self.store.dispatch(FetchStarted())
            self._tick()

    def _tick(self) -> None:
        handle = self._handle
        if handle is None or not handle.active:
            return
        ticket = handle.next_ticket()

        def on_success(payload: Any) -> None:
            if handle.active:
                self.store.dispatch(FetchSucceeded(ticket=ticket, payload=payload))

        def on_error(error: Exception) -> None:
            if handle.active:
                self.store.dispatch(_failure(ticket, error))

        self.executor.submit(self.fetch, on_success, on_error)


class LiveMonitorController(PolledController):
    name = "live"

    def __init__(
        self,
        client: GatewayClient,
        scheduler: PollingScheduler,
        executor,
        interval_ms: int = settings.LIVE_INTERVAL_MS,
    ) -> None:
        super().__init__(scheduler, executor, Store(live_reducer, LiveState()), interval_ms)
        self.client = client
        self.pump = PumpController(client)

    def fetch(self):
        return self.client.fetch_latest_reading()

    def toggle_pump(self) -> None:
        state: LiveState = self.store.state
        if state.pump_busy:
            return
        current = state.pump
        self.store.dispatch(PumpRequested())

        def on_error(error: Exception) -> None:
            message = error.message if isinstance(error, GatewayError) else str(error)
            logger.error("No se pudo controlar la bomba: %s", message)
            self.store.dispatch(PumpFailed(message=message))

        self.executor.submit(
            lambda: self.pump.toggle(current),
            lambda new_state: self.store.dispatch(PumpConfirmed(state=new_state)),
            on_error,
        )


class RecentRecordsController(PolledController):
    name = "recent"

    def __init__(
        self,
        client: GatewayClient,
        scheduler: PollingScheduler,
        executor,
        limit: int = settings.DEFAULT_RECENT_LIMIT,
        interval_ms: int = settings.RECENT_INTERVAL_MS,
    ) -> None:
        super().__init__(
            scheduler, executor, Store(recent_reducer, RecentState(limit=validate_limit(limit))), interval_ms
        )
        self.client = client

    def fetch(self):
        return self.client.fetch_recent_readings(self.store.state.limit)

    def set_limit(self, limit: int) -> None:
        validate_limit(limit)
        if limit == self.store.state.limit:
            return
        self.store.dispatch(LimitChanged(limit=limit))
        # el sondeo se reinicia con el nuevo límite
        if self.mounted:
            self.unmount()
            self.mount()


class SummaryController(PolledController):
    name = "summary"

    def __init__(
        self,
        client: GatewayClient,
        scheduler: PollingScheduler,
        executor,
        interval_ms: int = settings.SUMMARY_INTERVAL_MS,
    ) -> None:
        super().__init__(scheduler, executor, Store(summary_reducer, SummaryState()), interval_ms)
        self.client = client

    def fetch(self):
        return self.client.fetch_summary()
