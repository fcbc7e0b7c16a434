# state.py
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, List, Optional, TypeVar

from models import HistoricalSummary, PumpState, Reading, RecentReadings, project
from settings import DEFAULT_RECENT_LIMIT
from timeseries import EMPTY_WINDOW, TimeSeriesWindow, append

logger = logging.getLogger(__name__)

S = TypeVar("S")
Reducer = Callable[[S, Any], S]
Listener = Callable[[S], None]


# ===================== ACCIONES =====================
@dataclass(frozen=True)
class Mounted:
    pass


@dataclass(frozen=True)
class FetchStarted:
    pass


@dataclass(frozen=True)
class FetchSucceeded:
    ticket: int
    payload: Any


@dataclass(frozen=True)
class FetchFailed:
    ticket: int
    message: str
    kind: str = "upstream"


@dataclass(frozen=True)
class LimitChanged:
    limit: int


@dataclass(frozen=True)
class PumpRequested:
    pass


@dataclass(frozen=True)
class PumpConfirmed:
    state: PumpState


@dataclass(frozen=True)
class PumpFailed:
    message: str


# ===================== ESTADOS =====================
@dataclass(frozen=True)
class _FetchState:
    loading: bool = True
    error: Optional[str] = None
    error_kind: Optional[str] = None
    applied_ticket: int = 0

    def has_data(self) -> bool:
        return False

    @property
    def status(self) -> str:
        """'data', 'loading', 'waiting' (sin datos aún) o 'error'."""
        if self.has_data():
            return "data"
        if self.error_kind == "no_data":
            return "waiting"
        if self.error:
            return "error"
        return "loading"


@dataclass(frozen=True)
class LiveState(_FetchState):
    reading: Optional[Reading] = None
    window: TimeSeriesWindow = EMPTY_WINDOW
    pump: PumpState = PumpState.OFF
    pump_busy: bool = False
    pump_error: Optional[str] = None

    def has_data(self) -> bool:
        return self.reading is not None


@dataclass(frozen=True)
class RecentState(_FetchState):
    records: Optional[RecentReadings] = None
    limit: int = DEFAULT_RECENT_LIMIT

    def has_data(self) -> bool:
        return self.records is not None


@dataclass(frozen=True)
class SummaryState(_FetchState):
    summary: Optional[HistoricalSummary] = None

    def has_data(self) -> bool:
        return self.summary is not None


# ===================== REDUCTORES =====================
def _reduce_fetch(state, action, apply: Callable[[Any, Any], dict]):
    if isinstance(action, Mounted):
        return replace(state, applied_ticket=0)
    if isinstance(action, FetchStarted):
        return replace(state, loading=True)
    if isinstance(action, (FetchSucceeded, FetchFailed)):
        if action.ticket < state.applied_ticket:
            logger.debug("Respuesta obsoleta descartada (ticket %d < %d)", action.ticket, state.applied_ticket)
            return state
        if isinstance(action, FetchSucceeded):
            return replace(
                state,
                loading=False,
                error=None,
                error_kind=None,
                applied_ticket=action.ticket,
                **apply(state, action.payload),
            )
        # los datos anteriores se mantienen visibles
        return replace(
            state,
            loading=False,
            error=action.message,
            error_kind=action.kind,
            applied_ticket=action.ticket,
        )
    return state


def live_reducer(state: LiveState, action: Any) -> LiveState:
    if isinstance(action, PumpRequested):
        return replace(state, pump_busy=True, pump_error=None)
    if isinstance(action, PumpConfirmed):
        return replace(state, pump=action.state, pump_busy=False, pump_error=None)
    if isinstance(action, PumpFailed):
        return replace(state, pump_busy=False, pump_error=action.message)

    def apply(current: LiveState, reading: Reading) -> dict:
        (point,) = project([reading], "temperature")
        return {"reading": reading, "window": append(current.window, point)}

    return _reduce_fetch(state, action, apply)


def recent_reducer(state: RecentState, action: Any) -> RecentState:
    if isinstance(action, LimitChanged):
        return replace(state, limit=action.limit, loading=True)
    return _reduce_fetch(state, action, lambda current, records: {"records": records})


def summary_reducer(state: SummaryState, action: Any) -> SummaryState:
    return _reduce_fetch(state, action, lambda current, summary: {"summary": summary})


# ===================== STORE =====================
class Store(Generic[S]):
    """Contenedor de estado por vista con actualizaciones unidireccionales."""

    def __init__(self, reducer: Reducer, initial: S) -> None:
        self._reducer = reducer
        self._state = initial
        self._listeners: List[Listener] = []

    @property
    def state(self) -> S:
        return self._state

    def dispatch(self, action: Any) -> S:
        new_state = self._reducer(self._state, action)
        if new_state is not self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
