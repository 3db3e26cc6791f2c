"""Habit tracker aggregations."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..domain.records import HabitEntry
from .common import resolve_today, round_half_up

ALL_CATEGORIES = "All"
FALLBACK_CATEGORY = "Other"


def habits_for_today(habits: Sequence[HabitEntry], today: Optional[date] = None) -> List[HabitEntry]:
    """Habits without a date, plus those dated today."""
    today_str = resolve_today(today).isoformat()
    return [h for h in habits if not h.date or h.date == today_str]


@dataclass
class CompletionStats:
    today: int
    total: int


def completion_stats(habits: Sequence[HabitEntry], today: Optional[date] = None) -> CompletionStats:
    """Percentage of today's habits completed, and the number of habits tracked."""
    todays = habits_for_today(habits, today)
    if not todays:
        return CompletionStats(today=0, total=len(habits))
    completed = sum(1 for h in todays if h.completed)
    return CompletionStats(today=round_half_up(completed / len(todays) * 100), total=len(habits))


def toggle_patch(habit: HabitEntry) -> Dict[str, Any]:
    """Patch flipping a habit's completion.

    Completing adds one to the streak, un-completing takes one away
    (never below zero).
    """
    streak = habit.streak or 0
    if habit.completed:
        return {"completed": False, "streak": max(0, streak - 1)}
    return {"completed": True, "streak": streak + 1}


def category_completion(habits: Sequence[HabitEntry]) -> List[Dict[str, Any]]:
    """Per category: habit count, completed count and completion percentage."""
    counts: Dict[str, Dict[str, int]] = {}
    for habit in habits:
        bucket = counts.setdefault(habit.category or FALLBACK_CATEGORY, {"total": 0, "completed": 0})
        bucket["total"] += 1
        if habit.completed:
            bucket["completed"] += 1

    return [
        {
            "name": category,
            "value": bucket["total"],
            "completed": bucket["completed"],
            "completion": round_half_up(bucket["completed"] / bucket["total"] * 100),
        }
        for category, bucket in counts.items()
    ]


def top_streaks(habits: Sequence[HabitEntry], limit: int = 5) -> List[Dict[str, Any]]:
    """The habits with the longest positive streaks, longest first."""
    streaking = [h for h in habits if h.streak]
    streaking.sort(key=lambda h: h.streak, reverse=True)
    return [{"name": h.title, "value": h.streak} for h in streaking[:limit]]


def filter_by_category(habits: Sequence[HabitEntry], category: str = ALL_CATEGORIES) -> List[HabitEntry]:
    if category == ALL_CATEGORIES:
        return list(habits)
    return [h for h in habits if h.category == category]
