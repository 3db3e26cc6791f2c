"""Record models for the seven trackers.

Records are persisted as JSON arrays using the camelCase field names of the
browser storage format (``wakeTime``, ``categoryId``). Optional
fields that are unset are left out of the stored JSON.
"""

import threading
import time
from datetime import date as calendar_date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator  # type: ignore

from ..core.enums import (
    BudgetEntryType,
    FlowIntensity,
    PeriodEntryType,
    WorkoutIntensity,
)

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
CLOCK_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

_id_lock = threading.Lock()
_last_id = 0


def new_record_id() -> str:
    """Return a fresh record id: the current time in milliseconds, as a string.

    Ids handed out by one process are strictly increasing even when two
    calls land in the same millisecond.
    """
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


def today_iso() -> str:
    """Today's date as ``yyyy-MM-dd``."""
    return calendar_date.today().isoformat()


def check_calendar_date(value: Optional[str]) -> Optional[str]:
    """Reject ``yyyy-MM-dd`` strings that name no real day, such as 2024-02-30."""
    if value is not None:
        calendar_date.fromisoformat(value)
    return value


class BaseRecord(BaseModel):
    """Base class for everything stored in a domain collection."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    id: str = Field(min_length=1, description="Caller-generated id, unique by convention")

    def to_storage(self) -> Dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def field_for_key(cls, key: str) -> Optional[str]:
        """Resolve a patch key given as field name or alias to the field name."""
        if key in cls.model_fields:
            return key
        for name, info in cls.model_fields.items():
            if info.alias == key:
                return name
        return None


class DatedRecord(BaseRecord):
    """A record attributed to one calendar day."""

    date: str = Field(pattern=ISO_DATE_PATTERN, description="Calendar date, yyyy-MM-dd")

    @field_validator("date")
    @classmethod
    def validate_calendar_date(cls, value):
        return check_calendar_date(value)

    @property
    def day(self) -> calendar_date:
        """The record's date as a ``datetime.date``."""
        return calendar_date.fromisoformat(self.date)


class SleepEntry(DatedRecord):
    """One night of sleep. ``duration`` is derived from bedtime and wake time."""

    bedtime: str = Field(pattern=CLOCK_TIME_PATTERN)
    wake_time: str = Field(alias="wakeTime", pattern=CLOCK_TIME_PATTERN)
    duration: float = Field(ge=0, le=24, description="Hours slept")
    quality: int = Field(ge=1, le=10)
    notes: Optional[str] = None


class PeriodEntry(DatedRecord):
    """A period, spotting or symptoms log. Several entries per day are allowed."""

    type: PeriodEntryType
    flow: Optional[FlowIntensity] = None
    symptoms: Optional[List[str]] = None
    notes: Optional[str] = None


class WorkoutEntry(DatedRecord):
    """A workout session."""

    type: str = Field(min_length=1)
    duration: float = Field(ge=0, le=1440, description="Minutes")
    intensity: WorkoutIntensity = WorkoutIntensity.MEDIUM
    calories: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class HabitEntry(BaseRecord):
    """A habit. Habits without a date count as today's habits."""

    title: str = Field(min_length=1)
    description: Optional[str] = None
    completed: bool = False
    date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    streak: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_calendar_date(cls, value):
        return check_calendar_date(value)


class BudgetEntry(DatedRecord):
    """An income or expense. ``category_id`` is a weak reference to a BudgetCategory."""

    amount: float = Field(ge=0)
    description: str
    category_id: str = Field(alias="categoryId")
    type: BudgetEntryType


class BudgetCategory(BaseRecord):
    """A spending category with a monthly limit."""

    name: str = Field(min_length=1)
    limit: float = Field(ge=0)
    color: str = Field("#4F46E5", pattern=HEX_COLOR_PATTERN)


class MoodEntry(DatedRecord):
    """A mood rating for a day."""

    mood: int = Field(ge=1, le=10)
    activities: Optional[List[str]] = None
    notes: Optional[str] = None


class WaterEntry(DatedRecord):
    """Water intake, in glasses. Several entries per day are summed."""

    amount: float = Field(ge=0)
    timestamp: Optional[str] = Field(None, pattern=CLOCK_TIME_PATTERN)


DEFAULT_BUDGET_CATEGORIES: List[Dict[str, Any]] = [
    {"id": "1", "name": "Food", "limit": 500, "color": "#10B981"},
    {"id": "2", "name": "Entertainment", "limit": 200, "color": "#F59E0B"},
    {"id": "3", "name": "Housing", "limit": 1000, "color": "#4F46E5"},
    {"id": "4", "name": "Transport", "limit": 150, "color": "#EC4899"},
    {"id": "5", "name": "Savings", "limit": 400, "color": "#06B6D4"},
]


def default_budget_categories() -> List[BudgetCategory]:
    """Fresh copies of the five seeded budget categories."""
    return [BudgetCategory(**data) for data in DEFAULT_BUDGET_CATEGORIES]
