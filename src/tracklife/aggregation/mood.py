"""Mood tracker aggregations."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import ViewMode
from ..domain.records import MoodEntry
from .common import (
    days_back,
    each_day,
    end_of_month,
    last_month_starts,
    mean,
    month_key,
    resolve_today,
    round_half_up,
    start_of_month,
)

MOOD_LABELS = {
    1: "Terrible",
    2: "Bad",
    3: "Poor",
    4: "Okay",
    5: "Neutral",
    6: "Fine",
    7: "Good",
    8: "Great",
    9: "Excellent",
    10: "Amazing",
}

TREND_WINDOW_DAYS = 7
MIN_CORRELATION_OCCURRENCES = 3


def mood_label(mood: Optional[int]) -> str:
    """Word for a 1-10 mood rating, "Not recorded" for None."""
    if mood is None:
        return "Not recorded"
    return MOOD_LABELS.get(mood, "Neutral")


@dataclass
class MoodStats:
    average_mood: float = 0.0
    today_mood: Optional[int] = None
    week_trend: float = 0.0
    top_activities: List[Dict[str, Any]] = field(default_factory=list)


def mood_stats(entries: Sequence[MoodEntry], today: Optional[date] = None) -> MoodStats:
    """Overall average, today's rating, week-over-week trend and most logged activities.

    The trend compares the average of entries up to 7 days old with those
    8 to 14 days old, and is 0 unless both windows have entries.
    """
    today = resolve_today(today)
    if not entries:
        return MoodStats()

    today_entry = next((e for e in entries if e.day == today), None)

    this_week = []
    last_week = []
    for entry in entries:
        age = (today - entry.day).days
        if 0 <= age <= TREND_WINDOW_DAYS:
            this_week.append(entry.mood)
        elif TREND_WINDOW_DAYS < age <= 2 * TREND_WINDOW_DAYS:
            last_week.append(entry.mood)

    trend = 0.0
    if this_week and last_week:
        trend = round_half_up(mean(this_week) - mean(last_week), 1)

    activities = Counter(a for e in entries for a in (e.activities or []))
    return MoodStats(
        average_mood=round_half_up(mean(e.mood for e in entries), 1),
        today_mood=today_entry.mood if today_entry else None,
        week_trend=trend,
        top_activities=[
            {"activity": activity, "count": count} for activity, count in activities.most_common(5)
        ],
    )


def _point(label: str, moods: List[int]) -> Dict[str, Any]:
    avg = mean(moods)
    return {"date": label, "mood": avg, "has_data": avg is not None}


def mood_chart(
    entries: Sequence[MoodEntry],
    view: ViewMode = ViewMode.WEEK,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Average mood per day (last 7 days, or this month) or per month (last 12 months).

    Days or months without entries get ``mood: None``.
    """
    today = resolve_today(today)
    view = ViewMode(view)

    if view == ViewMode.YEAR:
        by_month: Dict[tuple, List[int]] = {}
        for entry in entries:
            by_month.setdefault(month_key(entry.day), []).append(entry.mood)
        return [
            _point(month.strftime("%b"), by_month.get(month_key(month), []))
            for month in last_month_starts(today, 12)
        ]

    if view == ViewMode.WEEK:
        days = days_back(today, TREND_WINDOW_DAYS)
    else:
        days = each_day(start_of_month(today), end_of_month(today))

    by_day: Dict[date, List[int]] = {}
    for entry in entries:
        by_day.setdefault(entry.day, []).append(entry.mood)
    return [_point(day.strftime("%b %d"), by_day.get(day, [])) for day in days]


def mood_distribution(entries: Sequence[MoodEntry]) -> List[Dict[str, Any]]:
    """How many entries carry each rating from 1 to 10."""
    counts = Counter(e.mood for e in entries)
    return [
        {"mood": rating, "count": counts.get(rating, 0), "label": MOOD_LABELS[rating]}
        for rating in range(1, 11)
    ]


def activity_mood_correlation(entries: Sequence[MoodEntry], limit: int = 5) -> List[Dict[str, Any]]:
    """Activities logged at least 3 times, ranked by the average mood on entries carrying them."""
    moods_by_activity: Dict[str, List[int]] = {}
    for entry in entries:
        for activity in entry.activities or []:
            moods_by_activity.setdefault(activity, []).append(entry.mood)

    rows = [
        {
            "activity": activity,
            "average_mood": round_half_up(mean(moods), 1),
            "count": len(moods),
        }
        for activity, moods in moods_by_activity.items()
        if len(moods) >= MIN_CORRELATION_OCCURRENCES
    ]
    rows.sort(key=lambda row: row["average_mood"], reverse=True)
    return rows[:limit]
