from __future__ import annotations

import calendar as _calendar
from datetime import date, datetime, timedelta

from lumina.constants import (
    DATE_FORMAT,
    DEFAULT_ENERGY_LEVEL,
    VIEW_DAY,
    VIEW_MONTH,
    VIEW_WEEK,
    VIEW_YEAR,
)


def day_key(day) -> str:
    if isinstance(day, datetime):
        day = day.date()
    if isinstance(day, date):
        return day.strftime(DATE_FORMAT)
    return str(day)


def next_habit_state(habit, today_iso):
    """Return ``(last_completed, streak)`` after toggling ``habit`` on ``today_iso``."""
    streak = int(habit.streak or 0)
    if habit.last_completed == today_iso:
        return None, max(0, streak - 1)
    return today_iso, streak + 1


# Filtering


def tasks_for_day(tasks, day):
    target = day_key(day)
    return [task for task in tasks if task.date == target]


def tasks_in_range(tasks, start_day, end_day):
    start_iso, end_iso = day_key(start_day), day_key(end_day)
    return [task for task in tasks if start_iso <= task.date <= end_iso]


def tasks_by_day(tasks, days):
    index = {day_key(day): [] for day in days}
    for task in tasks:
        if task.date in index:
            index[task.date].append(task)
    return index


def reflection_for_day(reflections, day):
    target = day_key(day)
    for reflection in reflections:
        if reflection.date == target:
            return reflection
    return None


def sort_by_time(tasks):
    return sorted(tasks, key=lambda task: (task.start_time is None, task.start_time or "", task.created_at or ""))


# Calendar ranges


def week_start(reference):
    # Weeks start on Sunday.
    return reference - timedelta(days=(reference.weekday() + 1) % 7)


def week_days(reference):
    start = week_start(reference)
    return [start + timedelta(days=offset) for offset in range(7)]


def month_last_day(reference):
    days = _calendar.monthrange(reference.year, reference.month)[1]
    return reference.replace(day=days)


def month_grid_days(reference):
    """Days shown in a month grid: whole weeks from Sunday through Saturday."""
    first = reference.replace(day=1)
    last = month_last_day(first)
    start = week_start(first)
    end = last + timedelta(days=(5 - last.weekday()) % 7)
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def month_days(year, month):
    days_in_month = _calendar.monthrange(year, month)[1]
    return [date(year, month, day) for day in range(1, days_in_month + 1)]


def days_with_tasks(tasks, year):
    prefix = f"{year:04d}-"
    return {task.date for task in tasks if task.date.startswith(prefix)}


def add_months(reference, delta):
    month_index = reference.month - 1 + delta
    year = reference.year + month_index // 12
    month = month_index % 12 + 1
    day = min(reference.day, _calendar.monthrange(year, month)[1])
    return date(year, month, day)


def navigate_date(view, reference, direction):
    step = 1 if direction == "next" else -1
    if view == VIEW_YEAR:
        return add_months(reference, 12 * step)
    if view == VIEW_MONTH:
        return add_months(reference, step)
    if view == VIEW_WEEK:
        return reference + timedelta(days=7 * step)
    return reference + timedelta(days=step)


def view_title(view, reference):
    if view == VIEW_DAY:
        return reference.strftime("%A, %d/%m")
    if view == VIEW_WEEK:
        return f"Week {int(reference.strftime('%U')):02d}"
    if view == VIEW_MONTH:
        return reference.strftime("%B, %Y")
    if view == VIEW_YEAR:
        return str(reference.year)
    if view == "vision":
        return "Vision"
    if view == "dashboard":
        return "Today"
    return "Lumina"


# Dashboard


def overdue_tasks(tasks, today_iso, now_hhmm):
    overdue = []
    for task in tasks:
        if task.completed:
            continue
        past_day = task.date < today_iso
        past_hour = task.date == today_iso and bool(task.start_time) and task.start_time < now_hhmm
        if past_day or past_hour:
            overdue.append(task)
    return sorted(overdue, key=lambda task: task.date)


def active_task(tasks, today_iso, now_hhmm):
    for task in sort_by_time(tasks_for_day(tasks, today_iso)):
        if task.start_time and task.start_time <= now_hhmm and not task.completed:
            return task
    return None


def undone_habits(habits, today_iso):
    return [habit for habit in habits if habit.last_completed != today_iso]


def habit_completion_percent(habits, today_iso):
    if not habits:
        return 0.0
    done = len(habits) - len(undone_habits(habits, today_iso))
    return round(done / len(habits) * 100, 1)


def day_progress(tasks, day):
    day_tasks = tasks_for_day(tasks, day)
    completed = sum(1 for task in day_tasks if task.completed)
    return completed, len(day_tasks)


def energy_series(reflections, today, days=7):
    """Energy levels for the last ``days`` days, oldest first.

    Days without a reflection count as the neutral level.
    """
    by_date = {reflection.date: reflection.energy_level for reflection in reflections}
    series = []
    for offset in range(days - 1, -1, -1):
        current = today - timedelta(days=offset)
        series.append(
            {
                "date": day_key(current),
                "label": current.strftime("%a"),
                "value": by_date.get(day_key(current), DEFAULT_ENERGY_LEVEL),
            }
        )
    return series


def average_energy(series):
    if not series:
        return float(DEFAULT_ENERGY_LEVEL)
    return round(sum(item["value"] for item in series) / len(series), 1)


def status_summary(overdue_count, undone_count):
    return f"There are {overdue_count} overdue tasks and {undone_count} habits still open today."


def greeting(hour):
    if hour < 12:
        return "Good morning, make it a bright one!"
    if hour < 18:
        return "Good afternoon, keep the momentum going!"
    return "Good evening, time to slow down and rest."


# Optimistic updates


def replace_task(tasks, updated):
    return [updated if task.id == updated.id else task for task in tasks]


def with_task_toggled(tasks, task_id):
    toggled = []
    for task in tasks:
        if task.id == task_id:
            task = task.model_copy(update={"completed": not task.completed})
        toggled.append(task)
    return toggled


def without_item(items, item_id):
    return [item for item in items if item.id != item_id]
