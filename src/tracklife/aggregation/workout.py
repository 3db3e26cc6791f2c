"""Workout tracker aggregations."""

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import ViewMode
from ..domain.records import WorkoutEntry
from .common import (
    consecutive_day_streak,
    each_day,
    end_of_month,
    end_of_week,
    in_range,
    last_month_starts,
    month_key,
    resolve_today,
    start_of_month,
    start_of_week,
)


@dataclass
class WorkoutStats:
    total_workouts: int = 0
    total_duration: float = 0
    total_calories: float = 0
    weekly_workouts: int = 0
    streak: int = 0


def workout_stats(entries: Sequence[WorkoutEntry], today: Optional[date] = None) -> WorkoutStats:
    """Totals, this week's workout count and the current daily streak.

    A streak may end yesterday: not having worked out yet today does not
    break it.
    """
    today = resolve_today(today)
    if not entries:
        return WorkoutStats()

    week_start, week_end = start_of_week(today), end_of_week(today)
    return WorkoutStats(
        total_workouts=len(entries),
        total_duration=sum(e.duration for e in entries),
        total_calories=sum(e.calories or 0 for e in entries),
        weekly_workouts=sum(1 for e in entries if in_range(e.day, week_start, week_end)),
        streak=consecutive_day_streak((e.day for e in entries), today, allow_yesterday=True),
    )


def _bucket(label: str, bucket_entries: List[WorkoutEntry]) -> Dict[str, Any]:
    return {
        "date": label,
        "duration": sum(e.duration for e in bucket_entries),
        "calories": sum(e.calories or 0 for e in bucket_entries),
        "count": len(bucket_entries),
    }


def workout_chart(
    entries: Sequence[WorkoutEntry],
    view: ViewMode = ViewMode.WEEK,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Duration, calories and count per day (week/month view) or per month (year view).

    Every day or month of the window gets a point, including empty ones.
    """
    today = resolve_today(today)
    view = ViewMode(view)

    if view == ViewMode.YEAR:
        by_month: Dict[tuple, List[WorkoutEntry]] = {}
        for entry in entries:
            by_month.setdefault(month_key(entry.day), []).append(entry)
        return [
            _bucket(month.strftime("%b"), by_month.get(month_key(month), []))
            for month in last_month_starts(today, 12)
        ]

    if view == ViewMode.WEEK:
        days = each_day(start_of_week(today), end_of_week(today))
    else:
        days = each_day(start_of_month(today), end_of_month(today))

    by_day: Dict[date, List[WorkoutEntry]] = {}
    for entry in entries:
        by_day.setdefault(entry.day, []).append(entry)
    return [_bucket(day.strftime("%b %d"), by_day.get(day, [])) for day in days]


def type_distribution(entries: Sequence[WorkoutEntry]) -> List[Dict[str, Any]]:
    """Number of workouts per type, in order of first appearance."""
    counts = Counter(e.type for e in entries)
    return [{"name": workout_type, "value": count} for workout_type, count in counts.items()]
