from __future__ import annotations

import calendar as _calendar
from datetime import date

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from lumina.aggregations import day_key, sort_by_time, tasks_by_day
from lumina.constants import WEEK_BOARD_HOURS
from lumina.theme import energy_color


def apply_common_plot_style(fig, theme, title=""):
    fig.update_layout(
        title=title,
        title_font=dict(color=theme["text_main"], size=14, family="Inter"),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=theme["text_main"], family="Inter"),
        margin=dict(l=20, r=20, t=30 if title else 10, b=20),
        xaxis=dict(showgrid=False, zeroline=False, tickfont=dict(color=theme["text_soft"])),
        yaxis=dict(showgrid=True, gridcolor=theme["plot_grid"], zeroline=False, tickfont=dict(color=theme["text_soft"])),
    )
    return fig


def energy_chart(series, theme, height=220):
    values = [item["value"] for item in series]
    fig = go.Figure(
        data=go.Bar(
            x=[item["label"] for item in series],
            y=values,
            text=[f"{value}/10" for value in values],
            textposition="outside",
            marker=dict(color=[energy_color(theme, value) for value in values]),
            hovertext=[item["date"] for item in series],
            hoverinfo="text+y",
        )
    )
    apply_common_plot_style(fig, theme)
    fig.update_yaxes(range=[0, 11], dtick=5)
    fig.update_layout(height=height, showlegend=False)
    return fig


def build_year_task_grid(year, tasks):
    """31 x 12 grid of task counts per day for a heatmap."""
    counts = {}
    for task in tasks:
        counts[task.date] = counts.get(task.date, 0) + 1
    z = np.full((31, 12), np.nan)
    text = [["" for _ in range(12)] for _ in range(31)]
    for month in range(1, 13):
        days_in_month = _calendar.monthrange(year, month)[1]
        for day in range(1, days_in_month + 1):
            current = date(year, month, day)
            count = counts.get(day_key(current), 0)
            z[day - 1, month - 1] = count
            text[day - 1][month - 1] = f"{current.isoformat()} • {count} tasks"
    month_labels = ["J", "F", "M", "A", "M", "J", "J", "A", "S", "O", "N", "D"]
    return z, text, month_labels, list(range(1, 32))


def task_heatmap(z, hover_text, x_labels, y_labels, theme, title=""):
    fig = go.Figure(
        data=go.Heatmap(
            z=z,
            text=hover_text,
            hoverinfo="text",
            colorscale=[(0.0, theme["bg_card"]), (1.0, theme["accent"])],
            showscale=False,
            zmin=0,
            xgap=2,
            ygap=2,
        )
    )
    apply_common_plot_style(fig, theme, title)
    fig.update_layout(
        xaxis=dict(
            tickmode="array",
            tickvals=list(range(len(x_labels))),
            ticktext=x_labels,
            side="top",
            showgrid=False,
        ),
        yaxis=dict(
            tickmode="array",
            tickvals=list(range(len(y_labels))),
            ticktext=y_labels,
            autorange="reversed",
            showgrid=False,
        ),
    )
    return fig


def week_hour_board(tasks, days):
    """Hour rows (08:00-21:00) by day columns with timed task titles."""
    index = {}
    for day_iso, day_tasks in tasks_by_day(tasks, days).items():
        for task in sort_by_time(day_tasks):
            if not task.start_time:
                continue
            marker = "✓ " if task.completed else ""
            index.setdefault((day_iso, task.start_time[:2]), []).append(f"{marker}{task.start_time} {task.title}")

    rows = []
    for hour in WEEK_BOARD_HOURS:
        hour_key = f"{hour:02d}"
        row = {"Hour": f"{hour_key}:00"}
        for day in days:
            row[day.strftime("%a %d")] = " | ".join(index.get((day_key(day), hour_key), []))
        rows.append(row)
    return pd.DataFrame(rows)
