# scheduler.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)

TimerFactory = Callable[[], QTimer]


class PollHandle:
    """
    Un sondeo periódico activo. Cada tick recibe un ticket creciente; la
    vista descarta las respuestas de tickets antiguos o llegadas tras cancelar.
    """

    def __init__(self, name: str, interval_ms: int, on_tick: Callable[[], None], timer) -> None:
        self.name = name
        self.interval_ms = interval_ms
        self._on_tick = on_tick
        self._timer = timer
        self._cancelled = False
        self._last_ticket = 0
        self.ticks = 0

    @property
    def active(self) -> bool:
        return not self._cancelled

    def next_ticket(self) -> int:
        self._last_ticket += 1
        return self._last_ticket

    def fire(self) -> None:
        if self._cancelled:
            return
        self.ticks += 1
        self._on_tick()

    def cancel(self) -> None:
        # idempotente
        if self._cancelled:
            return
        self._cancelled = True
        self._timer.stop()
        self._timer.deleteLater()
        logger.debug("Sondeo '%s' cancelado tras %d ticks", self.name, self.ticks)


class PollingScheduler:
    """Crea sondeos periódicos con QTimer. No coalesce ni aplica backoff."""

    def __init__(self, parent: Optional[QObject] = None, timer_factory: Optional[TimerFactory] = None) -> None:
        self._parent = parent
        self._timer_factory = timer_factory or self._qt_timer

    def _qt_timer(self) -> QTimer:
        return QTimer(self._parent)

    def start(
        self,
        name: str,
        interval_ms: int,
        on_tick: Callable[[], None],
        immediate: bool = True,
    ) -> PollHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms debe ser positivo")
        timer = self._timer_factory()
        timer.setInterval(interval_ms)
        handle = PollHandle(name, interval_ms, on_tick, timer)
        timer.timeout.connect(handle.fire)
        timer.start()
        logger.debug("Sondeo '%s' iniciado cada %d ms", name, interval_ms)
        if immediate:
            handle.fire()
        return handle

    @staticmethod
    def cancel(handle: Optional[PollHandle]) -> None:
        if handle is not None:
            handle.cancel()
