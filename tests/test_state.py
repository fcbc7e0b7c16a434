from models import PumpState, Reading
from state import (
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    LiveState,
    Mounted,
    PumpConfirmed,
    PumpFailed,
    PumpRequested,
    Store,
    SummaryState,
    live_reducer,
    _FetchState,
    summary_reducer,
)


def _reading(temp: float, minute: int = 0) -> Reading:
    return Reading(temperature=temp, humidity=55.0, light=70.0, timestamp=f"2025-01-01T10:{minute:02d}:00")


def test_initial_state_is_loading():
    assert LiveState().status == "loading"
    assert SummaryState().status == "loading"


def test_success_updates_reading_and_window():
    state = live_reducer(LiveState(), FetchSucceeded(ticket=1, payload=_reading(21.0)))
    assert state.status == "data"
    assert state.reading.temperature == 21.0
    assert [p.value for p in state.window] == [21.0]
    assert state.applied_ticket == 1


def test_no_data_shows_waiting_state():
    state = live_reducer(LiveState(), FetchFailed(ticket=1, message="none", kind="no_data"))
    assert state.status == "waiting"


def test_error_without_data_shows_error():
    state = live_reducer(LiveState(), FetchFailed(ticket=1, message="boom", kind="upstream"))
    assert state.status == "error"
    assert state.error == "boom"


def test_error_after_data_keeps_stale_data_visible():
    state = live_reducer(LiveState(), FetchSucceeded(ticket=1, payload=_reading(21.0)))
    state = live_reducer(state, FetchFailed(ticket=2, message="boom"))
    assert state.status == "data"
    assert state.reading.temperature == 21.0
    assert state.error == "boom"
    assert len(state.window) == 1


def test_stale_response_is_dropped():
    state = live_reducer(LiveState(), FetchSucceeded(ticket=2, payload=_reading(22.0, 2)))
    dropped = live_reducer(state, FetchSucceeded(ticket=1, payload=_reading(21.0, 1)))
    assert dropped is state


def test_mounted_resets_sequence():
    state = live_reducer(LiveState(), FetchSucceeded(ticket=9, payload=_reading(22.0)))
    state = live_reducer(state, Mounted())
    state = live_reducer(state, FetchSucceeded(ticket=1, payload=_reading(23.0)))
    assert state.reading.temperature == 23.0
    assert len(state.window) == 2


def test_pump_flow():
    state = live_reducer(LiveState(), PumpRequested())
    assert state.pump_busy
    state = live_reducer(state, PumpConfirmed(PumpState.ON))
    assert state.pump is PumpState.ON
    assert not state.pump_busy

    state = live_reducer(state, PumpRequested())
    state = live_reducer(state, PumpFailed("Failed to control pump"))
    assert state.pump is PumpState.ON
    assert not state.pump_busy
    assert state.pump_error == "Failed to control pump"


def test_fetch_started_marks_loading():
    state = summary_reducer(SummaryState(loading=False), FetchStarted())
    assert state.loading


def test_store_notifies_only_on_change():
    store = Store(live_reducer, LiveState())
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.dispatch(FetchSucceeded(ticket=2, payload=_reading(22.0)))
    store.dispatch(FetchSucceeded(ticket=1, payload=_reading(21.0)))  # obsoleta
    assert len(seen) == 1

    unsubscribe()
    store.dispatch(FetchSucceeded(ticket=3, payload=_reading(23.0)))
    assert len(seen) == 1
    assert store.state.reading.temperature == 23.0


def test_base_fetch_state_has_no_data():
    state = _FetchState()
    assert not state.has_data()
    assert state.status == "loading"
