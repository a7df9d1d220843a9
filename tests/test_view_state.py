from lumina.state import view_state


def test_load_runs_loader_once_per_key():
    state = {}
    calls = []

    def loader():
        calls.append(1)
        return {"tasks": ["a"]}

    first = view_state.load("day", ("2026-03-11", 0), loader, state=state)
    second = view_state.load("day", ("2026-03-11", 0), loader, state=state)

    assert first["status"] == view_state.READY
    assert second is first
    assert len(calls) == 1
    assert view_state.get_value("day", "tasks", state=state) == ["a"]


def test_new_key_reloads():
    state = {}
    view_state.load("day", ("2026-03-11", 0), lambda: {"n": 1}, state=state)

    payload = view_state.load("day", ("2026-03-11", 1), lambda: {"n": 2}, state=state)

    assert payload["data"] == {"n": 2}


def test_loader_error_then_retry():
    state = {}

    def broken():
        raise RuntimeError("backend exploded")

    payload = view_state.load("week", "k", broken, state=state)
    assert payload["status"] == view_state.ERROR
    assert payload["error"] == "backend exploded"

    view_state.retry("week", state=state)
    payload = view_state.load("week", "k", lambda: {"tasks": []}, state=state)
    assert payload["status"] == view_state.READY
    assert payload["error"] is None


def test_clear_slice_forces_reload():
    state = {}
    view_state.load("month", "k", lambda: {"n": 1}, state=state)
    view_state.set_value("month", "n", 5, state=state)

    view_state.clear_slice("month", state=state)
    payload = view_state.load("month", "k", lambda: {"n": 1}, state=state)

    assert payload["data"] == {"n": 1}


def test_mark_stale_spares_the_current_view():
    state = {"ui.theme": "dark"}
    view_state.load("day", "k", lambda: {"n": 1}, state=state)
    view_state.load("dashboard", "k", lambda: {"n": 1}, state=state)

    view_state.mark_stale(except_view="day", state=state)

    assert view_state.get_slice("day", state=state)["status"] == view_state.READY
    assert view_state.get_slice("dashboard", state=state)["status"] == view_state.LOADING
    assert state["ui.theme"] == "dark"
