from datetime import date

from lumina.aggregations import (
    active_task,
    add_months,
    average_energy,
    day_progress,
    days_with_tasks,
    energy_series,
    habit_completion_percent,
    month_grid_days,
    navigate_date,
    next_habit_state,
    overdue_tasks,
    tasks_by_day,
    tasks_for_day,
    tasks_in_range,
    view_title,
    week_days,
    with_task_toggled,
)
from lumina.constants import DATED_VIEWS
from lumina.data.schemas import DayReflection, Habit, Task


def make_task(task_id, day, **extra):
    return Task(id=task_id, title=f"task {task_id}", date=day, **extra)


def test_tasks_for_day_matches_exactly():
    tasks = [
        make_task("a", "2026-03-10"),
        make_task("b", "2026-03-01"),
        make_task("c", "2026-03-10", start_time="09:00"),
    ]

    assert [task.id for task in tasks_for_day(tasks, "2026-03-10")] == ["a", "c"]
    assert [task.id for task in tasks_for_day(tasks, date(2026, 3, 1))] == ["b"]
    assert tasks_for_day(tasks, "2026-03-1") == []


def test_next_habit_state_marks_and_unmarks_today():
    habit = Habit(id="h1", title="Read", streak=4, last_completed="2026-03-10")

    last_completed, streak = next_habit_state(habit, "2026-03-11")
    assert (last_completed, streak) == ("2026-03-11", 5)

    toggled = habit.model_copy(update={"last_completed": last_completed, "streak": streak})
    assert next_habit_state(toggled, "2026-03-11") == (None, 4)


def test_next_habit_state_never_goes_negative():
    habit = Habit(id="h1", title="Read", streak=0, last_completed="2026-03-11")

    assert next_habit_state(habit, "2026-03-11") == (None, 0)


def test_week_days_start_on_sunday():
    days = week_days(date(2026, 3, 11))

    assert days[0] == date(2026, 3, 8)
    assert days[-1] == date(2026, 3, 14)
    assert days[0].weekday() == 6


def test_month_grid_covers_whole_weeks():
    days = month_grid_days(date(2026, 3, 18))

    assert days[0] == date(2026, 3, 1)
    assert days[-1] == date(2026, 4, 4)
    assert len(days) % 7 == 0


def test_month_grid_starts_before_the_first():
    days = month_grid_days(date(2026, 4, 1))

    assert days[0] == date(2026, 3, 29)
    assert days[-1] == date(2026, 5, 2)


def test_tasks_in_range_and_grouping():
    tasks = [
        make_task("a", "2026-03-07"),
        make_task("b", "2026-03-08"),
        make_task("c", "2026-03-14"),
        make_task("d", "2026-03-15"),
    ]
    days = week_days(date(2026, 3, 11))

    in_week = tasks_in_range(tasks, days[0], days[-1])
    grouped = tasks_by_day(in_week, days)

    assert [task.id for task in in_week] == ["b", "c"]
    assert [task.id for task in grouped["2026-03-08"]] == ["b"]
    assert grouped["2026-03-11"] == []


def test_overdue_scenario():
    tasks = [make_task("late", "2026-03-10")]

    overdue = overdue_tasks(tasks, "2026-03-11", "08:00")
    assert [task.id for task in overdue] == ["late"]
    assert day_progress(tasks, "2026-03-10") == (0, 1)

    tasks = with_task_toggled(tasks, "late")

    assert overdue_tasks(tasks, "2026-03-11", "08:00") == []
    assert day_progress(tasks, "2026-03-10") == (1, 1)


def test_overdue_includes_earlier_start_today_only():
    tasks = [
        make_task("early", "2026-03-11", start_time="07:30"),
        make_task("later", "2026-03-11", start_time="18:00"),
        make_task("untimed", "2026-03-11"),
    ]

    assert [task.id for task in overdue_tasks(tasks, "2026-03-11", "12:00")] == ["early"]
    assert active_task(tasks, "2026-03-11", "12:00").id == "early"


def test_energy_series_fills_missing_days():
    reflections = [
        DayReflection(date="2026-03-11", energy_level=9),
        DayReflection(date="2026-03-09", energy_level=2),
    ]

    series = energy_series(reflections, date(2026, 3, 11))

    assert [item["date"] for item in series][0] == "2026-03-05"
    assert [item["value"] for item in series] == [5, 5, 5, 5, 2, 5, 9]
    assert average_energy(series) == 5.1


def test_habit_completion_percent():
    habits = [
        Habit(id="1", title="Read", last_completed="2026-03-11"),
        Habit(id="2", title="Run"),
    ]

    assert habit_completion_percent(habits, "2026-03-11") == 50.0
    assert habit_completion_percent([], "2026-03-11") == 0.0


def test_navigation_helpers():
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2026, 12, 5), 1) == date(2027, 1, 5)
    assert navigate_date("week", date(2026, 3, 11), "next") == date(2026, 3, 18)
    assert navigate_date("day", date(2026, 3, 11), "prev") == date(2026, 3, 10)
    assert navigate_date("month", date(2026, 3, 31), "prev") == date(2026, 2, 28)
    assert view_title("month", date(2026, 3, 11)) == "March, 2026"


def test_days_with_tasks_is_scoped_to_year():
    tasks = [make_task("a", "2026-01-02"), make_task("b", "2025-12-31")]

    assert days_with_tasks(tasks, 2026) == {"2026-01-02"}


def test_unpadded_start_time_sorts_before_later_hours():
    tasks = [
        make_task("ten", "2026-03-11", start_time="10:00"),
        make_task("nine", "2026-03-11", start_time="9:30"),
    ]

    assert [task.id for task in overdue_tasks(tasks, "2026-03-11", "09:45")] == ["nine"]
    assert active_task(tasks, "2026-03-11", "09:45").id == "nine"


def test_year_view_steps_by_year():
    assert navigate_date("year", date(2026, 3, 11), "next") == date(2027, 3, 11)
    assert navigate_date("year", date(2024, 2, 29), "prev") == date(2023, 2, 28)
    assert view_title("year", date(2027, 1, 1)) == "2027"
    assert "year" in DATED_VIEWS
