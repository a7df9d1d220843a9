from datetime import date
from unittest.mock import Mock

import pytest
import streamlit

from lumina.constants import LOCAL_TASKS_KEY
from lumina.context import AppContext
from lumina.navigation import ACTIVE_VIEW_KEY, go_to, sync_from_selector
from lumina.state import view_state
from lumina.views import dashboard_view, day_view, week_view


@pytest.fixture
def session_state(monkeypatch):
    state = {}
    monkeypatch.setattr(streamlit, "session_state", state)
    monkeypatch.setattr(streamlit, "toast", Mock())
    return state


@pytest.fixture
def ctx():
    return AppContext(current_date=date(2026, 3, 11))


def load_dashboard(ctx):
    return view_state.load("dashboard", ctx.refresh_key, dashboard_view._load)


def test_task_added_in_day_view_reaches_dashboard(service, session_state, ctx):
    assert load_dashboard(ctx)["data"]["tasks"] == []

    session_state["day.new_title"] = "Buy milk"
    day_view._add_task(ctx, "2026-03-11")

    assert [task.title for task in view_state.get_value("day", "tasks")] == ["Buy milk"]
    assert ctx.refresh_key == 0
    payload = load_dashboard(ctx)
    assert [task.title for task in payload["data"]["tasks"]] == ["Buy milk"]


def test_opening_a_view_reloads_it(service, session_state, ctx):
    view_state.load("week", ("2026-03-08", 0), lambda: {"tasks": []})
    service.create_task("Planned elsewhere", date="2026-03-12")

    go_to(ctx, "week", date(2026, 3, 12))

    assert session_state[ACTIVE_VIEW_KEY] == "week"
    assert view_state.get_slice("week")["status"] == view_state.LOADING


def test_selector_change_reloads_target_view(session_state, ctx):
    view_state.load("month", "k", lambda: {"tasks": []})
    session_state[ACTIVE_VIEW_KEY] = "month"

    sync_from_selector(ctx)

    assert ctx.current_view == "month"
    assert view_state.get_slice("month")["status"] == view_state.LOADING


def test_failed_habit_toggle_clears_view_and_refreshes(service, fake_client, session_state, ctx):
    habit = service.create_habit("Meditate").record
    load_dashboard(ctx)
    fake_client.fail = True

    dashboard_view._toggle_habit(ctx, habit)

    assert "view.dashboard" not in session_state
    assert ctx.refresh_key == 1
    assert "Update habit failed" in session_state["feedback.warning"]


def test_successful_habit_toggle_replaces_list(service, session_state, ctx):
    habit = service.create_habit("Meditate").record
    load_dashboard(ctx)

    dashboard_view._toggle_habit(ctx, habit)

    habits = view_state.get_value("dashboard", "habits")
    assert habits[0].last_completed == "2026-03-11"
    assert habits[0].streak == 1
    assert ctx.refresh_key == 0


def test_failed_task_toggle_does_not_leave_optimistic_copy(service, fake_client, store, session_state, ctx):
    task = service.create_task("Write", date="2026-03-11").record
    view_state.load("day", ("2026-03-11", ctx.refresh_key), lambda: day_view._load("2026-03-11"))
    store.set_json(LOCAL_TASKS_KEY, [])
    fake_client.fail = True

    day_view._toggle_task(ctx, task)

    assert "view.day" not in session_state
    assert ctx.refresh_key == 1

    fake_client.fail = False
    payload = view_state.load("day", ("2026-03-11", ctx.refresh_key), lambda: day_view._load("2026-03-11"))
    assert payload["data"]["tasks"][0].completed is False


def test_offline_task_toggle_keeps_optimistic_copy(service, fake_client, session_state, ctx):
    task = service.create_task("Write", date="2026-03-11").record
    view_state.load("week", ("2026-03-08", 0), lambda: {"tasks": [task]})
    fake_client.fail = True

    week_view._toggle_task(ctx, task)

    assert view_state.get_value("week", "tasks")[0].completed is True
    assert ctx.refresh_key == 0
    streamlit.toast.assert_called_once()
