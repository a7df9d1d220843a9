import html
from datetime import time

import streamlit as st

from lumina.aggregations import day_key, replace_task, sort_by_time, tasks_for_day, with_task_toggled, without_item
from lumina.constants import MOOD_EMOJI, MOODS, PRIORITIES, PRIORITY_META
from lumina.data import data_service
from lumina.data.schemas import DayReflection
from lumina.state import view_state
from lumina.views.feedback import handle_result, render_load_error

VIEW_NAME = "day"


def _load(day_iso):
    return {
        "tasks": sort_by_time(tasks_for_day(data_service.get_tasks(), day_iso)),
        "reflection": data_service.get_reflection(day_iso),
    }


def _toggle_task(ctx, task):
    tasks = view_state.get_value(VIEW_NAME, "tasks", [])
    view_state.set_value(VIEW_NAME, "tasks", with_task_toggled(tasks, task.id))
    result = data_service.update_task(task.id, completed=not task.completed)
    if handle_result(ctx, result, "Update task", VIEW_NAME) and result.record is not None:
        tasks = view_state.get_value(VIEW_NAME, "tasks", [])
        view_state.set_value(VIEW_NAME, "tasks", replace_task(tasks, result.record))


def _delete_task(ctx, task):
    tasks = view_state.get_value(VIEW_NAME, "tasks", [])
    view_state.set_value(VIEW_NAME, "tasks", without_item(tasks, task.id))
    handle_result(ctx, data_service.delete_task(task.id), "Delete task", VIEW_NAME)


def _add_task(ctx, day_iso):
    title = st.session_state.get("day.new_title", "")
    if not str(title).strip():
        return
    start = st.session_state.get("day.new_time")
    result = data_service.create_task(
        title,
        date=day_iso,
        start_time=start if st.session_state.get("day.new_timed") else None,
        priority=st.session_state.get("day.new_priority", "medium"),
    )
    st.session_state["day.new_title"] = ""
    if handle_result(ctx, result, "Add task", VIEW_NAME):
        tasks = view_state.get_value(VIEW_NAME, "tasks", [])
        view_state.set_value(VIEW_NAME, "tasks", sort_by_time(tasks + [result.record]))


def _render_tasks(ctx, selected_day, tasks):
    st.markdown(
        f"<div class='section-title'>Focus tasks for {selected_day.strftime('%B %d')}</div>",
        unsafe_allow_html=True,
    )
    with st.form(key="day.add_form", clear_on_submit=False):
        cols = st.columns([5, 1.4, 1.2, 1])
        cols[0].text_input("New task", key="day.new_title", placeholder="What's your next priority?", label_visibility="collapsed")
        cols[1].selectbox(
            "Priority",
            PRIORITIES,
            index=1,
            key="day.new_priority",
            format_func=lambda value: PRIORITY_META[value]["label"],
            label_visibility="collapsed",
        )
        cols[2].time_input("Start", value=time(9, 0), key="day.new_time", label_visibility="collapsed", step=900)
        cols[3].checkbox("Timed", key="day.new_timed")
        st.form_submit_button("Add task", on_click=_add_task, args=(ctx, day_key(selected_day)))

    if not tasks:
        st.caption("Nothing planned yet. Add the one thing that matters most.")
        return

    for task in tasks:
        row = st.columns([0.5, 6, 1.2, 0.5])
        row[0].checkbox(
            "done",
            value=task.completed,
            key=f"day.task.{task.id}.{int(task.completed)}",
            on_change=_toggle_task,
            args=(ctx, task),
            label_visibility="collapsed",
        )
        title = html.escape(task.title)
        label = title if not task.completed else f"<span class='task-done'>{title}</span>"
        time_label = f"{task.start_time} · " if task.start_time else ""
        row[1].markdown(f"{time_label}{label}", unsafe_allow_html=True)
        row[2].markdown(
            f"<span class='small-label' style='color:{PRIORITY_META[task.priority]['color']}'>"
            f"{PRIORITY_META[task.priority]['label']}</span>",
            unsafe_allow_html=True,
        )
        row[3].button("✕", key=f"day.delete.{task.id}", on_click=_delete_task, args=(ctx, task), type="tertiary")

    done = sum(1 for task in tasks if task.completed)
    st.caption(f"{done}/{len(tasks)} done for {day_key(selected_day)}.")


def _save_reflection(ctx, day_iso):
    payload = {
        "date": day_iso,
        "energy_level": st.session_state.get(f"day.reflection.{day_iso}.energy", 5),
        "wake_up_time": st.session_state.get(f"day.reflection.{day_iso}.wake"),
        "focus": st.session_state.get(f"day.reflection.{day_iso}.focus", ""),
        "gratitude": [st.session_state.get(f"day.reflection.{day_iso}.gratitude.{idx}", "") for idx in range(3)],
        "mood": st.session_state.get(f"day.reflection.{day_iso}.mood", ""),
        "journal": st.session_state.get(f"day.reflection.{day_iso}.journal", "") or None,
    }
    result = data_service.save_reflection(payload)
    if handle_result(ctx, result, "Save reflection", VIEW_NAME):
        view_state.set_value(VIEW_NAME, "reflection", result.record)
        st.toast("Reflection saved.")


def _render_reflection(ctx, day_iso, reflection):
    reflection = reflection or DayReflection(date=day_iso)
    st.markdown("<div class='section-title'>Daily reflection</div>", unsafe_allow_html=True)
    with st.form(key=f"day.reflection_form.{day_iso}"):
        st.text_input("The one thing", value=reflection.focus, key=f"day.reflection.{day_iso}.focus")
        cols = st.columns(2)
        cols[0].slider("Energy", 1, 10, value=reflection.energy_level, key=f"day.reflection.{day_iso}.energy")
        wake_value = time.fromisoformat(reflection.wake_up_time) if reflection.wake_up_time else time(6, 30)
        cols[1].time_input("Woke up at", value=wake_value, key=f"day.reflection.{day_iso}.wake", step=900)
        mood_options = [""] + MOODS
        st.selectbox(
            "Mood",
            mood_options,
            index=mood_options.index(reflection.mood) if reflection.mood in mood_options else 0,
            key=f"day.reflection.{day_iso}.mood",
            format_func=lambda mood: f"{MOOD_EMOJI.get(mood, '')} {mood}".strip() or "—",
        )
        st.markdown("<div class='small-label'>Today I am grateful for…</div>", unsafe_allow_html=True)
        for idx, item in enumerate(reflection.gratitude):
            st.text_input(f"Gratitude {idx + 1}", value=item, key=f"day.reflection.{day_iso}.gratitude.{idx}", label_visibility="collapsed")
        st.text_area("Journal", value=reflection.journal or "", key=f"day.reflection.{day_iso}.journal", height=120)
        st.form_submit_button("Save reflection", on_click=_save_reflection, args=(ctx, day_iso))


def render_day_view(ctx):
    selected_day = ctx.current_date
    day_iso = day_key(selected_day)
    payload = view_state.load(VIEW_NAME, (day_iso, ctx.refresh_key), lambda: _load(day_iso))
    if payload["status"] == view_state.ERROR:
        render_load_error(VIEW_NAME, payload)
        return

    left, right = st.columns([1.6, 1])
    with left:
        _render_tasks(ctx, selected_day, view_state.get_value(VIEW_NAME, "tasks", []))
    with right:
        _render_reflection(ctx, day_iso, view_state.get_value(VIEW_NAME, "reflection"))
