import html
from datetime import date

import streamlit as st

from lumina.aggregations import (
    day_key,
    month_grid_days,
    reflection_for_day,
    tasks_by_day,
    tasks_in_range,
    with_task_toggled,
)
from lumina.constants import MONTH_CELL_TASK_LIMIT, MOOD_EMOJI, VIEW_DAY, WEEKDAY_LABELS
from lumina.data import data_service
from lumina.navigation import go_to
from lumina.state import view_state
from lumina.views.feedback import handle_result, render_load_error

VIEW_NAME = "month"


def _load(start_iso, end_iso):
    reflections = [
        reflection
        for reflection in data_service.get_all_reflections()
        if start_iso <= reflection.date <= end_iso
    ]
    return {
        "tasks": tasks_in_range(data_service.get_tasks(), start_iso, end_iso),
        "reflections": reflections,
    }


def _toggle_task(ctx, task):
    tasks = view_state.get_value(VIEW_NAME, "tasks", [])
    view_state.set_value(VIEW_NAME, "tasks", with_task_toggled(tasks, task.id))
    handle_result(ctx, data_service.update_task(task.id, completed=not task.completed), "Update task", VIEW_NAME)


def _cell_header(day, reflection, in_month):
    today_class = " today" if day == date.today() else ""
    outside_class = "" if in_month else " outside"
    mood = MOOD_EMOJI.get(reflection.mood, "") if reflection else ""
    focus = ""
    if reflection and reflection.focus:
        focus = f"<span class='chip'>🎯 {html.escape(reflection.focus)}</span>"
    return (
        f"<div class='month-cell{outside_class}{today_class}'>"
        f"<span class='day-number'>{day.day}</span> {mood}{focus}</div>"
    )


def render_month_view(ctx):
    month_start = ctx.current_date.replace(day=1)
    days = month_grid_days(month_start)
    start_iso, end_iso = day_key(days[0]), day_key(days[-1])
    payload = view_state.load(
        VIEW_NAME,
        (start_iso, ctx.refresh_key),
        lambda: _load(start_iso, end_iso),
    )
    if payload["status"] == view_state.ERROR:
        render_load_error(VIEW_NAME, payload)
        return

    tasks = view_state.get_value(VIEW_NAME, "tasks", [])
    reflections = view_state.get_value(VIEW_NAME, "reflections", [])
    by_day = tasks_by_day(tasks, days)

    header = st.columns(7)
    for col, label in zip(header, WEEKDAY_LABELS):
        col.markdown(f"<div class='small-label' style='text-align:center'>{label}</div>", unsafe_allow_html=True)

    for week_index in range(0, len(days), 7):
        cols = st.columns(7)
        for col, day in zip(cols, days[week_index:week_index + 7]):
            day_iso = day_key(day)
            in_month = day.month == month_start.month
            with col:
                st.markdown(_cell_header(day, reflection_for_day(reflections, day), in_month), unsafe_allow_html=True)
                # Days outside the month stay clickable.
                st.button(
                    "Open",
                    key=f"month.open.{day_iso}",
                    on_click=go_to,
                    args=(ctx, VIEW_DAY, day),
                    type="tertiary",
                )
                day_tasks = by_day.get(day_iso, [])
                for task in day_tasks[:MONTH_CELL_TASK_LIMIT]:
                    st.checkbox(
                        task.title,
                        value=task.completed,
                        key=f"month.task.{task.id}.{int(task.completed)}",
                        on_change=_toggle_task,
                        args=(ctx, task),
                    )
                if len(day_tasks) > MONTH_CELL_TASK_LIMIT:
                    st.caption(f"+{len(day_tasks) - MONTH_CELL_TASK_LIMIT} more")
