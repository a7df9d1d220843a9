from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from uuid import uuid4

from pydantic import ValidationError

from lumina.aggregations import next_habit_state
from lumina.constants import (
    DEFAULT_HABIT_COLOR,
    DEFAULT_PRIORITY,
    DEFAULT_VISION_CATEGORY,
    HABITS_TABLE,
    LOCAL_TASKS_KEY,
    LOCAL_VISION_KEY,
    REFLECTIONS_TABLE,
    TASKS_TABLE,
    VISION_TABLE,
)
from lumina.data.schemas import (
    DayReflection,
    Habit,
    MutationResult,
    Task,
    VisionItem,
    normalize_day,
    normalize_priority,
    normalize_time,
)
from lumina.data.supabase_client import BackendError, BackendNotConfigured

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_NOT_CONFIGURED = "not_configured"
STATUS_UNREACHABLE = "unreachable"

_CLIENT = None
_STORE = None
_TODAY_GETTER = None

_TASK_COLUMNS = {
    "title": "title",
    "completed": "completed",
    "date": "date",
    "start_time": "startTime",
    "startTime": "startTime",
    "priority": "priority",
}


def configure(client, store=None, today_getter=None):
    global _CLIENT, _STORE, _TODAY_GETTER
    _CLIENT = client
    _STORE = store
    _TODAY_GETTER = today_getter


def today_iso():
    today = _TODAY_GETTER() if _TODAY_GETTER else date.today()
    return normalize_day(today)


def _new_id():
    return str(uuid4())


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _client():
    if _CLIENT is None:
        raise BackendNotConfigured("data service not configured")
    if not _CLIENT.is_configured():
        raise BackendNotConfigured("Supabase URL or anon key missing")
    return _CLIENT


def _log_degraded(action, exc):
    if isinstance(exc, BackendNotConfigured):
        logger.warning("%s skipped, backend not configured: %s", action, exc)
    else:
        logger.error("%s failed: %s", action, exc)


def _parse_rows(model, rows):
    items = []
    for row in rows or []:
        try:
            items.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning("Skipping malformed %s row: %s", model.__name__, exc.errors()[:1])
    return items


def _parse_row(model, row):
    if not row:
        return None
    parsed = _parse_rows(model, [row])
    return parsed[0] if parsed else None


def _cached(model, key):
    if _STORE is None:
        return []
    return _parse_rows(model, _STORE.get_json(key, []))


def _write_cache(key, items):
    if _STORE is None:
        return
    _STORE.set_json(key, [item.to_row() for item in items])


def _cache_put(model, key, item, prepend=False):
    items = [cached for cached in _cached(model, key) if cached.id != item.id]
    if prepend:
        items.insert(0, item)
    else:
        items.append(item)
    _write_cache(key, items)


def _cache_remove(model, key, item_id):
    items = _cached(model, key)
    _write_cache(key, [item for item in items if item.id != item_id])


def check_connection():
    try:
        _client().select_one(TASKS_TABLE, {})
    except BackendNotConfigured:
        return STATUS_NOT_CONFIGURED
    except BackendError as exc:
        logger.error("Backend connection check failed: %s", exc)
        return STATUS_UNREACHABLE
    return STATUS_OK


# Tasks


def get_tasks():
    try:
        rows = _client().select(TASKS_TABLE, order="date")
    except BackendError as exc:
        _log_degraded("Fetch tasks", exc)
        return sorted(_cached(Task, LOCAL_TASKS_KEY), key=lambda task: task.date)
    tasks = _parse_rows(Task, rows)
    _write_cache(LOCAL_TASKS_KEY, tasks)
    return tasks


def create_task(title, date=None, start_time=None, priority=DEFAULT_PRIORITY, completed=False):
    clean_title = " ".join(str(title or "").split())
    if not clean_title:
        return MutationResult.failed("Task title cannot be empty")
    try:
        task = Task(
            id=_new_id(),
            title=clean_title,
            date=date or today_iso(),
            start_time=start_time,
            priority=priority,
            completed=completed,
        )
    except ValidationError as exc:
        return MutationResult.failed(f"Invalid task: {exc.errors()[0].get('msg')}")

    try:
        stored = _client().insert(TASKS_TABLE, task.to_row(exclude_none=True))
    except BackendError as exc:
        _log_degraded("Create task", exc)
        _cache_put(Task, LOCAL_TASKS_KEY, task)
        return MutationResult.success(task, source="local")
    saved = _parse_row(Task, stored) or task
    _cache_put(Task, LOCAL_TASKS_KEY, saved)
    return MutationResult.success(saved)


def _task_patch(fields):
    patch = {}
    for key, value in fields.items():
        column = _TASK_COLUMNS.get(key)
        if column is None:
            raise ValueError(f"Unknown task field: {key}")
        if column == "date":
            value = normalize_day(value)
        elif column == "startTime":
            value = normalize_time(value)
        elif column == "priority":
            value = normalize_priority(value)
        elif column == "completed":
            value = bool(value)
        elif column == "title":
            value = " ".join(str(value or "").split())
            if not value:
                raise ValueError("Task title cannot be empty")
        patch[column] = value
    return patch


def update_task(task_id, **fields):
    try:
        patch = _task_patch(fields)
    except ValueError as exc:
        return MutationResult.failed(exc)
    if not patch:
        return MutationResult.failed("No changes provided")

    try:
        stored = _client().update(TASKS_TABLE, task_id, patch)
    except BackendError as exc:
        _log_degraded("Update task", exc)
        cached = {task.id: task for task in _cached(Task, LOCAL_TASKS_KEY)}
        if task_id not in cached:
            return MutationResult.failed(exc)
        updated = Task.model_validate({**cached[task_id].to_row(), **patch})
        _cache_put(Task, LOCAL_TASKS_KEY, updated)
        return MutationResult.success(updated, source="local")
    updated = _parse_row(Task, stored)
    if updated is None:
        return MutationResult.failed("Task not found")
    _cache_put(Task, LOCAL_TASKS_KEY, updated)
    return MutationResult.success(updated)


def delete_task(task_id):
    try:
        _client().delete(TASKS_TABLE, task_id)
    except BackendError as exc:
        _log_degraded("Delete task", exc)
        _cache_remove(Task, LOCAL_TASKS_KEY, task_id)
        return MutationResult.success(task_id, source="local")
    _cache_remove(Task, LOCAL_TASKS_KEY, task_id)
    return MutationResult.success(task_id)


# Habits


def get_habits():
    try:
        rows = _client().select(HABITS_TABLE, order="created_at")
    except BackendError as exc:
        _log_degraded("Fetch habits", exc)
        return []
    return _parse_rows(Habit, rows)


def create_habit(title, color=DEFAULT_HABIT_COLOR, icon=None):
    clean_title = " ".join(str(title or "").split())[:60]
    if not clean_title:
        return MutationResult.failed("Habit name cannot be empty")
    habit = Habit(id=_new_id(), title=clean_title, streak=0, color=color or DEFAULT_HABIT_COLOR, icon=icon)
    try:
        stored = _client().insert(HABITS_TABLE, habit.to_row(exclude_none=True))
    except BackendError as exc:
        _log_degraded("Create habit", exc)
        return MutationResult.failed(exc)
    return MutationResult.success(_parse_row(Habit, stored) or habit)


def delete_habit(habit_id):
    try:
        _client().delete(HABITS_TABLE, habit_id)
    except BackendError as exc:
        _log_degraded("Delete habit", exc)
        return MutationResult.failed(exc)
    return MutationResult.success(habit_id)


def toggle_habit(habit_id, today=None):
    """Flip today's completion of a habit and return every habit.

    The whole collection is re-read after the write so callers can replace
    their local list wholesale.
    """
    day_iso = normalize_day(today) if today else today_iso()
    try:
        client = _client()
        habit = _parse_row(Habit, client.select_one(HABITS_TABLE, {"id": habit_id}))
        if habit is None:
            return MutationResult.failed("Habit not found")
        last_completed, streak = next_habit_state(habit, day_iso)
        client.update(HABITS_TABLE, habit_id, {"lastCompleted": last_completed, "streak": streak})
    except BackendError as exc:
        _log_degraded("Toggle habit", exc)
        return MutationResult.failed(exc)
    return MutationResult.success(get_habits())


# Vision board


def get_vision_items():
    try:
        rows = _client().select(VISION_TABLE, order="created_at", desc=True)
    except BackendError as exc:
        _log_degraded("Fetch vision items", exc)
        return _cached(VisionItem, LOCAL_VISION_KEY)
    items = _parse_rows(VisionItem, rows)
    _write_cache(LOCAL_VISION_KEY, items)
    return items


def save_vision_item(content, label=None, category=DEFAULT_VISION_CATEGORY):
    if not str(content or "").strip():
        return MutationResult.failed("Vision item needs an image")
    item = VisionItem(
        id=_new_id(),
        content=content,
        category=category or DEFAULT_VISION_CATEGORY,
        label=label,
        created_at=_now_iso(),
    )
    try:
        stored = _client().insert(VISION_TABLE, item.to_row(exclude_none=True))
    except BackendError as exc:
        _log_degraded("Save vision item", exc)
        _cache_put(VisionItem, LOCAL_VISION_KEY, item, prepend=True)
        return MutationResult.success(item, source="local")
    saved = _parse_row(VisionItem, stored) or item
    _cache_put(VisionItem, LOCAL_VISION_KEY, saved, prepend=True)
    return MutationResult.success(saved)


def delete_vision_item(item_id):
    try:
        _client().delete(VISION_TABLE, item_id)
    except BackendError as exc:
        _log_degraded("Delete vision item", exc)
        _cache_remove(VisionItem, LOCAL_VISION_KEY, item_id)
        return MutationResult.success(item_id, source="local")
    _cache_remove(VisionItem, LOCAL_VISION_KEY, item_id)
    return MutationResult.success(item_id)


# Reflections


def get_reflection(day):
    try:
        row = _client().select_one(REFLECTIONS_TABLE, {"date": normalize_day(day)})
    except BackendError as exc:
        _log_degraded("Fetch reflection", exc)
        return None
    return _parse_row(DayReflection, row)


def get_all_reflections():
    try:
        rows = _client().select(REFLECTIONS_TABLE, order="date")
    except BackendError as exc:
        _log_degraded("Fetch reflections", exc)
        return []
    return _parse_rows(DayReflection, rows)


def save_reflection(reflection):
    try:
        if not isinstance(reflection, DayReflection):
            reflection = DayReflection.model_validate(reflection)
    except ValidationError as exc:
        return MutationResult.failed(f"Invalid reflection: {exc.errors()[0].get('msg')}")
    try:
        stored = _client().upsert(REFLECTIONS_TABLE, reflection.to_row(), on_conflict="date")
    except BackendError as exc:
        _log_degraded("Save reflection", exc)
        return MutationResult.failed(exc)
    return MutationResult.success(_parse_row(DayReflection, stored) or reflection)
