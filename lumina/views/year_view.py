from datetime import date

import streamlit as st

from lumina.aggregations import day_key, days_with_tasks, month_days
from lumina.constants import VIEW_DAY, VIEW_MONTH
from lumina.data import data_service
from lumina.navigation import go_to
from lumina.state import view_state
from lumina.theme import get_active_theme
from lumina.views.feedback import render_load_error
from lumina.visualizations import build_year_task_grid, task_heatmap

VIEW_NAME = "year"


def _mini_calendar_html(year, month, marked_days, today_iso):
    days = month_days(year, month)
    cells = ["<td></td>"] * ((days[0].weekday() + 1) % 7)
    for day in days:
        day_iso = day_key(day)
        style = ""
        if day_iso == today_iso:
            style = "background:var(--today-bg);color:var(--today-text);border-radius:8px;"
        marker = "<div style='height:3px;width:3px;margin:auto;border-radius:50%;background:var(--accent)'></div>" if (
            day_iso in marked_days and day_iso != today_iso
        ) else ""
        cells.append(f"<td style='text-align:center;font-size:11px;padding:2px;{style}'>{day.day}{marker}</td>")
    rows = ["".join(cells[idx:idx + 7]) for idx in range(0, len(cells), 7)]
    header = "".join(f"<th class='small-label'>{label}</th>" for label in "SMTWTFS")
    body = "".join(f"<tr>{row}</tr>" for row in rows)
    return f"<table style='width:100%'><tr>{header}</tr>{body}</table>"


def _jump_to_day(ctx):
    picked = st.session_state.get("year.jump")
    if picked:
        go_to(ctx, VIEW_DAY, picked)


def render_year_view(ctx):
    year = ctx.current_date.year
    payload = view_state.load(
        VIEW_NAME,
        (year, ctx.refresh_key),
        lambda: {"tasks": [task for task in data_service.get_tasks() if task.date.startswith(f"{year:04d}-")]},
    )
    if payload["status"] == view_state.ERROR:
        render_load_error(VIEW_NAME, payload)
        return

    tasks = view_state.get_value(VIEW_NAME, "tasks", [])
    marked = days_with_tasks(tasks, year)
    today_iso = day_key(date.today())

    st.caption(f"{len(tasks)} tasks planned across {len(marked)} days in {year}.")
    st.date_input(
        "Jump to day",
        value=None,
        min_value=date(year, 1, 1),
        max_value=date(year, 12, 31),
        key="year.jump",
        on_change=_jump_to_day,
        args=(ctx,),
    )

    for quarter in range(4):
        cols = st.columns(3)
        for offset, col in enumerate(cols):
            month = quarter * 3 + offset + 1
            first = date(year, month, 1)
            with col:
                st.markdown(f"<div class='section-title'>{first.strftime('%B')}</div>", unsafe_allow_html=True)
                st.markdown(_mini_calendar_html(year, month, marked, today_iso), unsafe_allow_html=True)
                st.button(
                    "View month ›",
                    key=f"year.month.{month}",
                    on_click=go_to,
                    args=(ctx, VIEW_MONTH, first),
                    type="tertiary",
                )

    _, theme = get_active_theme(ctx)
    z, hover_text, x_labels, y_labels = build_year_task_grid(year, tasks)
    st.plotly_chart(
        task_heatmap(z, hover_text, x_labels, y_labels, theme, title=f"Tasks per day · {year}"),
        use_container_width=True,
    )
