import streamlit as st

from lumina.aggregations import day_key, sort_by_time, tasks_by_day, tasks_in_range, week_days, with_task_toggled
from lumina.constants import VIEW_DAY
from lumina.data import data_service
from lumina.navigation import go_to
from lumina.state import view_state
from lumina.views.feedback import handle_result, render_load_error
from lumina.visualizations import week_hour_board

VIEW_NAME = "week"


def _toggle_task(ctx, task):
    tasks = view_state.get_value(VIEW_NAME, "tasks", [])
    view_state.set_value(VIEW_NAME, "tasks", with_task_toggled(tasks, task.id))
    handle_result(ctx, data_service.update_task(task.id, completed=not task.completed), "Update task", VIEW_NAME)


def render_week_view(ctx):
    days = week_days(ctx.current_date)
    start_iso, end_iso = day_key(days[0]), day_key(days[-1])
    payload = view_state.load(
        VIEW_NAME,
        (start_iso, ctx.refresh_key),
        lambda: {"tasks": tasks_in_range(data_service.get_tasks(), start_iso, end_iso)},
    )
    if payload["status"] == view_state.ERROR:
        render_load_error(VIEW_NAME, payload)
        return

    tasks = view_state.get_value(VIEW_NAME, "tasks", [])
    by_day = tasks_by_day(tasks, days)
    selected_iso = day_key(ctx.current_date)

    cols = st.columns(7)
    for col, day in zip(cols, days):
        day_iso = day_key(day)
        with col:
            col.button(
                f"{day.strftime('%a').upper()} {day.day}",
                key=f"week.day.{day_iso}",
                on_click=go_to,
                args=(ctx, VIEW_DAY, day),
                type="primary" if day_iso == selected_iso else "secondary",
                use_container_width=True,
            )
            day_tasks = sort_by_time(by_day.get(day_iso, []))
            if not day_tasks:
                st.caption("—")
            for task in day_tasks:
                prefix = "🔴 " if task.priority == "high" and not task.completed else ""
                st.checkbox(
                    f"{prefix}{task.title}",
                    value=task.completed,
                    key=f"week.task.{task.id}.{int(task.completed)}",
                    on_change=_toggle_task,
                    args=(ctx, task),
                )

    st.markdown("<div class='section-title' style='margin-top:16px;'>Schedule</div>", unsafe_allow_html=True)
    st.dataframe(week_hour_board(tasks, days), hide_index=True, use_container_width=True)
