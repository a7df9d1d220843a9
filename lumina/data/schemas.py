from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lumina.constants import DATE_FORMAT, DEFAULT_ENERGY_LEVEL, DEFAULT_PRIORITY, PRIORITIES, TIME_FORMAT


def normalize_day(value) -> str:
    """Return the canonical ``yyyy-MM-dd`` form of a date, datetime or ISO string."""
    if isinstance(value, datetime):
        return value.date().strftime(DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    raw = str(value or "").strip()
    return date.fromisoformat(raw[:10]).strftime(DATE_FORMAT)


def normalize_time(value) -> Optional[str]:
    """Return ``HH:MM`` for a time, datetime or ``H:MM[:SS]`` string."""
    if value is None:
        return None
    if hasattr(value, "strftime"):
        return value.strftime(TIME_FORMAT)
    value_str = str(value).strip()
    if not value_str:
        return None
    pieces = value_str.split(":")
    try:
        hour = int(pieces[0])
        minute = int(pieces[1]) if len(pieces) > 1 else 0
        return time(hour, minute).strftime(TIME_FORMAT)
    except ValueError as exc:
        raise ValueError(f"Invalid time: {value_str!r}") from exc


def normalize_priority(value) -> str:
    value = str(value or "").strip().lower()
    if value in PRIORITIES:
        return value
    return DEFAULT_PRIORITY


class LuminaModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_row(self, exclude_none: bool = False) -> dict:
        return self.model_dump(by_alias=True, exclude_none=exclude_none, mode="json")


class Task(LuminaModel):
    id: str
    title: str
    completed: bool = False
    date: str
    start_time: Optional[str] = Field(None, alias="startTime")
    priority: str = DEFAULT_PRIORITY
    created_at: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value):
        return normalize_day(value)

    @field_validator("start_time", mode="before")
    @classmethod
    def _check_time(cls, value):
        return normalize_time(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _check_priority(cls, value):
        return normalize_priority(value)

    @field_validator("completed", mode="before")
    @classmethod
    def _check_completed(cls, value):
        return bool(value)


class Habit(LuminaModel):
    id: str
    title: str
    streak: int = 0
    last_completed: Optional[str] = Field(None, alias="lastCompleted")
    color: str = "indigo"
    icon: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator("last_completed", mode="before")
    @classmethod
    def _check_last_completed(cls, value):
        if value in (None, ""):
            return None
        return normalize_day(value)

    @field_validator("streak", mode="before")
    @classmethod
    def _check_streak(cls, value):
        try:
            return max(0, int(value or 0))
        except (TypeError, ValueError):
            return 0

    def done_on(self, day_iso: str) -> bool:
        return self.last_completed == day_iso


class VisionItem(LuminaModel):
    id: str
    content: str
    category: str = "Dream"
    label: Optional[str] = None
    created_at: Optional[str] = None


class DayReflection(LuminaModel):
    date: str
    energy_level: int = Field(DEFAULT_ENERGY_LEVEL, alias="energyLevel")
    wake_up_time: str = Field("", alias="wakeUpTime")
    focus: str = ""
    gratitude: List[str] = Field(default_factory=lambda: ["", "", ""])
    mood: str = ""
    journal: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value):
        return normalize_day(value)

    @field_validator("energy_level", mode="before")
    @classmethod
    def _check_energy(cls, value):
        try:
            level = int(value)
        except (TypeError, ValueError):
            return DEFAULT_ENERGY_LEVEL
        return min(10, max(1, level))

    @field_validator("wake_up_time", mode="before")
    @classmethod
    def _check_wake_up(cls, value):
        return normalize_time(value) or ""

    @field_validator("gratitude", mode="before")
    @classmethod
    def _check_gratitude(cls, value):
        items = [str(item or "").strip() for item in (value or [])]
        return (items + ["", "", ""])[:3]


@dataclass
class MutationResult:
    """Outcome of a write against the backend.

    ``source`` is ``"remote"`` when the backend accepted the write and
    ``"local"`` when it was only applied to the fallback cache.
    """

    ok: bool
    record: Any = None
    reason: Optional[str] = None
    source: str = "remote"

    @classmethod
    def success(cls, record=None, source="remote") -> "MutationResult":
        return cls(ok=True, record=record, source=source)

    @classmethod
    def failed(cls, reason) -> "MutationResult":
        return cls(ok=False, reason=str(reason), source="none")

    @property
    def degraded(self) -> bool:
        return self.ok and self.source == "local"

    def __bool__(self) -> bool:
        return self.ok
