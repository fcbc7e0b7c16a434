# workers.py
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Set

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

logger = logging.getLogger(__name__)


class _TaskSignals(QObject):
    succeeded = Signal(object)
    failed = Signal(object)


class _Task(QRunnable):
    def __init__(self, fn: Callable[[], Any]) -> None:
        super().__init__()
        self.fn = fn
        self.signals = _TaskSignals()

    def run(self) -> None:
        try:
            result = self.fn()
        except Exception as e:  # se entrega al hilo de la interfaz
            self.signals.failed.emit(e)
        else:
            self.signals.succeeded.emit(result)


class QtExecutor:
    """
    Ejecuta peticiones de red en el QThreadPool y entrega el resultado en el
    hilo de la interfaz (las señales cruzan de hilo en modo encolado).
    """

    def __init__(self, pool: Optional[QThreadPool] = None) -> None:
        self.pool = pool or QThreadPool.globalInstance()
        self._pending: Set[_Task] = set()

    def submit(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        task = _Task(fn)
        task.setAutoDelete(False)
        self._pending.add(task)

        def done_ok(result: Any) -> None:
            self._pending.discard(task)
            on_success(result)

        def done_error(error: Exception) -> None:
            self._pending.discard(task)
            on_error(error)

        task.signals.succeeded.connect(done_ok)
        task.signals.failed.connect(done_error)
        self.pool.start(task)

    @property
    def in_flight(self) -> int:
        return len(self._pending)
