from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
import html

import streamlit as st

from lumina.aggregations import (
    active_task,
    average_energy,
    day_key,
    day_progress,
    energy_series,
    greeting,
    habit_completion_percent,
    overdue_tasks,
    status_summary,
    tasks_for_day,
    undone_habits,
    with_task_toggled,
)
from lumina.constants import HABIT_COLOR_HEX, HABIT_COLORS, VIEW_DAY
from lumina.data import data_service
from lumina.navigation import go_to
from lumina.services import ai_service
from lumina.state import view_state
from lumina.theme import get_active_theme
from lumina.views.feedback import handle_result, render_load_error
from lumina.views.vision_board import image_source
from lumina.visualizations import energy_chart

VIEW_NAME = "dashboard"


def _load():
    status = data_service.check_connection()
    if status == data_service.STATUS_UNREACHABLE:
        return {"connection": status}
    # The four collections are independent; fetch them together.
    with ThreadPoolExecutor(max_workers=4) as pool:
        tasks_future = pool.submit(data_service.get_tasks)
        habits_future = pool.submit(data_service.get_habits)
        visions_future = pool.submit(data_service.get_vision_items)
        reflections_future = pool.submit(data_service.get_all_reflections)
        tasks = tasks_future.result()
        habits = habits_future.result()
        visions = visions_future.result()
        reflections = reflections_future.result()

    today_iso = data_service.today_iso()
    now_hhmm = datetime.now().strftime("%H:%M")
    insight = ai_service.get_daily_insight(
        status_summary(len(overdue_tasks(tasks, today_iso, now_hhmm)), len(undone_habits(habits, today_iso)))
    )
    return {
        "connection": status,
        "tasks": tasks,
        "habits": habits,
        "visions": visions,
        "reflections": reflections,
        "insight": insight,
    }


def _retry_connection():
    view_state.retry(VIEW_NAME)


def _render_cannot_connect():
    st.error("Lumina cannot connect to its database right now.")
    st.caption("Check your network and the SUPABASE_URL / SUPABASE_ANON_KEY settings, then try again.")
    st.button("Try again", key="dashboard.reconnect", on_click=_retry_connection)


def _quick_add(ctx):
    title = st.session_state.get("dashboard.quick_title", "")
    if not str(title).strip():
        return
    result = data_service.create_task(title, date=data_service.today_iso())
    if handle_result(ctx, result, "Add task", VIEW_NAME):
        tasks = view_state.get_value(VIEW_NAME, "tasks", [])
        view_state.set_value(VIEW_NAME, "tasks", tasks + [result.record])
        st.session_state["dashboard.quick_title"] = ""
        ctx.trigger_refresh()


def _toggle_task(ctx, task):
    tasks = view_state.get_value(VIEW_NAME, "tasks", [])
    view_state.set_value(VIEW_NAME, "tasks", with_task_toggled(tasks, task.id))
    handle_result(ctx, data_service.update_task(task.id, completed=not task.completed), "Update task", VIEW_NAME)


def _toggle_habit(ctx, habit):
    result = data_service.toggle_habit(habit.id)
    if handle_result(ctx, result, "Update habit", VIEW_NAME):
        view_state.set_value(VIEW_NAME, "habits", result.record)


def _add_habit(ctx):
    title = st.session_state.get("dashboard.new_habit", "")
    color = st.session_state.get("dashboard.new_habit_color") or HABIT_COLORS[0]
    result = data_service.create_habit(title, color=color)
    if handle_result(ctx, result, "Add habit", VIEW_NAME):
        habits = view_state.get_value(VIEW_NAME, "habits", [])
        view_state.set_value(VIEW_NAME, "habits", habits + [result.record])
        st.session_state["dashboard.new_habit"] = ""


def _delete_habit(ctx, habit):
    habits = view_state.get_value(VIEW_NAME, "habits", [])
    view_state.set_value(VIEW_NAME, "habits", [item for item in habits if item.id != habit.id])
    handle_result(ctx, data_service.delete_habit(habit.id), "Delete habit", VIEW_NAME)


def _render_focus_card(ctx, overdue, current, today):
    if overdue:
        oldest = overdue[0]
        titles = "".join(f"<li>{html.escape(task.title)} <span class='small-label'>({task.date})</span></li>" for task in overdue[:5])
        st.markdown(
            f"<div class='urgent-card'><b>URGENT · {len(overdue)} overdue</b><ul>{titles}</ul></div>",
            unsafe_allow_html=True,
        )
        st.button(
            "Handle now",
            key="dashboard.handle_overdue",
            on_click=go_to,
            args=(ctx, VIEW_DAY, datetime.strptime(oldest.date, "%Y-%m-%d").date()),
        )
        for task in overdue[:5]:
            st.checkbox(
                f"Done: {task.title}",
                value=False,
                key=f"dashboard.overdue.{task.id}",
                on_change=_toggle_task,
                args=(ctx, task),
            )
        return
    if current:
        time_label = html.escape(current.start_time or "")
        st.markdown(
            f"<div class='card'><b>IN PROGRESS</b><br>{time_label} · {html.escape(current.title)}</div>",
            unsafe_allow_html=True,
        )
    else:
        st.markdown("<div class='card'><b>All clear.</b> Nothing is running late.</div>", unsafe_allow_html=True)
    st.button("Open planner", key="dashboard.open_planner", on_click=go_to, args=(ctx, VIEW_DAY, today))


def _render_habits(ctx, habits, today_iso):
    st.markdown("<div class='section-title'>Habits</div>", unsafe_allow_html=True)
    if not habits:
        st.caption("No habits yet. Start with one small thing.")
    for habit in habits:
        done = habit.done_on(today_iso)
        row = st.columns([0.5, 5, 1.2, 0.5])
        row[0].checkbox(
            "done",
            value=done,
            key=f"dashboard.habit.{habit.id}.{int(done)}",
            on_change=_toggle_habit,
            args=(ctx, habit),
            label_visibility="collapsed",
        )
        color = HABIT_COLOR_HEX.get(habit.color, HABIT_COLOR_HEX["indigo"])
        icon = f"{habit.icon} " if habit.icon else ""
        row[1].markdown(f"<span style='color:{color}'>●</span> {icon}{html.escape(habit.title)}", unsafe_allow_html=True)
        row[2].markdown(f"🔥 {habit.streak}")
        row[3].button("✕", key=f"dashboard.habit_delete.{habit.id}", on_click=_delete_habit, args=(ctx, habit), type="tertiary")

    percent = habit_completion_percent(habits, today_iso)
    st.progress(int(percent), text=f"{percent:.0f}% of habits done today")

    with st.form(key="dashboard.habit_form", clear_on_submit=False):
        cols = st.columns([4, 1.5])
        cols[0].text_input("New habit", key="dashboard.new_habit", placeholder="Drink water, read 10 pages…", label_visibility="collapsed")
        cols[1].selectbox("Color", HABIT_COLORS, key="dashboard.new_habit_color", label_visibility="collapsed")
        st.form_submit_button("Add habit", on_click=_add_habit, args=(ctx,))


def _render_visions(ctx, visions):
    st.markdown("<div class='section-title'>Vision</div>", unsafe_allow_html=True)
    cols = st.columns(4)
    for idx in range(4):
        with cols[idx]:
            if idx < len(visions):
                source = image_source(visions[idx].content)
                if source:
                    st.image(source, use_container_width=True)
                st.caption(visions[idx].label or visions[idx].category)
            else:
                st.caption("✨ Room for a dream")


def render_dashboard(ctx):
    payload = view_state.load(VIEW_NAME, ctx.refresh_key, _load)
    if payload["status"] == view_state.ERROR:
        render_load_error(VIEW_NAME, payload)
        return
    if view_state.get_value(VIEW_NAME, "connection") == data_service.STATUS_UNREACHABLE:
        _render_cannot_connect()
        return
    if view_state.get_value(VIEW_NAME, "connection") == data_service.STATUS_NOT_CONFIGURED:
        st.info("No database configured: tasks and vision items are kept on this device only.")

    now = datetime.now()
    today = now.date()
    today_iso = day_key(today)
    now_hhmm = now.strftime("%H:%M")
    tasks = view_state.get_value(VIEW_NAME, "tasks", [])
    habits = view_state.get_value(VIEW_NAME, "habits", [])
    visions = view_state.get_value(VIEW_NAME, "visions", [])
    reflections = view_state.get_value(VIEW_NAME, "reflections", [])

    head = st.columns([3, 1])
    with head[0]:
        st.markdown(f"<div class='small-label'>{greeting(now.hour)}</div>", unsafe_allow_html=True)
        st.markdown(
            f"<div class='insight-card'>{html.escape(view_state.get_value(VIEW_NAME, 'insight') or '')}</div>",
            unsafe_allow_html=True,
        )
    with head[1]:
        st.markdown(f"<div class='page-title'>{now.strftime('%H:%M')}</div>", unsafe_allow_html=True)
        st.caption(today.strftime("%A, %d %B %Y"))

    quick = st.columns([5, 1])
    quick[0].text_input("Quick add", key="dashboard.quick_title", placeholder="Quick add a task for today…", label_visibility="collapsed")
    quick[1].button("Add", key="dashboard.quick_add", on_click=_quick_add, args=(ctx,), use_container_width=True)

    overdue = overdue_tasks(tasks, today_iso, now_hhmm)
    left, right = st.columns([1.4, 1])
    with left:
        _render_focus_card(ctx, overdue, active_task(tasks, today_iso, now_hhmm), today)
        completed, total = day_progress(tasks, today_iso)
        metric_cols = st.columns(3)
        metric_cols[0].metric("Done today", f"{completed}/{total}")
        metric_cols[1].metric("Overdue", len(overdue))
        series = energy_series(reflections, today)
        metric_cols[2].metric("Avg energy (7d)", f"{average_energy(series):.1f}")
        _, theme = get_active_theme(ctx)
        st.plotly_chart(energy_chart(series, theme), use_container_width=True)
        today_tasks = tasks_for_day(tasks, today_iso)
        if today_tasks:
            st.markdown("<div class='section-title'>Today</div>", unsafe_allow_html=True)
            for task in today_tasks:
                st.checkbox(
                    task.title,
                    value=task.completed,
                    key=f"dashboard.today.{task.id}.{int(task.completed)}",
                    on_change=_toggle_task,
                    args=(ctx, task),
                )
    with right:
        _render_habits(ctx, habits, today_iso)
    _render_visions(ctx, visions)
