"""Cross-tracker wellness overview."""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from ..domain.records import HabitEntry, MoodEntry, SleepEntry, WaterEntry, WorkoutEntry
from ..utils.logging_config import get_module_logger
from .common import days_back, end_of_week, mean, percentage_of, resolve_today, round_half_up, start_of_week
from .habit import completion_stats
from .water import daily_total

logger = get_module_logger(__name__)

NEUTRAL_SCORE = 50
SLEEP_PENALTY_PER_HOUR = 15
RECENT_DAYS = 7


def sleep_score(entries: Sequence[SleepEntry], today: date, ideal_hours: float = 8.0) -> int:
    """100 at the ideal average duration over the last 7 days, minus 15 per hour off."""
    cutoff = today - timedelta(days=RECENT_DAYS)
    recent = [e.duration for e in entries if cutoff < e.day <= today]
    if not recent:
        return NEUTRAL_SCORE
    return round_half_up(100 - min(100, abs(mean(recent) - ideal_hours) * SLEEP_PENALTY_PER_HOUR))


def fitness_score(entries: Sequence[WorkoutEntry], today: date, weekly_target: int = 5) -> int:
    """This week's workout count as a percentage of the weekly target."""
    start, end = start_of_week(today), end_of_week(today)
    count = sum(1 for e in entries if start <= e.day <= end)
    return percentage_of(count, weekly_target)


def mood_score(entries: Sequence[MoodEntry], today: date) -> int:
    """Average of the first rating logged on each of the last 7 days, scaled to 100."""
    first_by_day: Dict[date, int] = {}
    for entry in entries:
        first_by_day.setdefault(entry.day, entry.mood)
    moods = [first_by_day[d] for d in days_back(today, RECENT_DAYS) if d in first_by_day]
    if not moods:
        return NEUTRAL_SCORE
    return round_half_up(mean(moods) * 10)


def wellness_scores(
    sleep: Sequence[SleepEntry],
    workouts: Sequence[WorkoutEntry],
    habits: Sequence[HabitEntry],
    moods: Sequence[MoodEntry],
    water: Sequence[WaterEntry],
    today: Optional[date] = None,
    water_goal: float = 8.0,
    workout_target: int = 5,
    ideal_sleep_hours: float = 8.0,
) -> List[Dict[str, Any]]:
    """One 0-100 score per wellness area, ready for a radar chart.

    Sleep and mood fall back to a neutral 50 when nothing was logged in the
    last 7 days.
    """
    today = resolve_today(today)
    scores = [
        ("Sleep", sleep_score(sleep, today, ideal_sleep_hours)),
        ("Fitness", fitness_score(workouts, today, workout_target)),
        ("Habits", completion_stats(habits, today).today),
        ("Mood", mood_score(moods, today)),
        ("Hydration", percentage_of(daily_total(water, today), water_goal)),
    ]
    logger.debug(f"Wellness scores for {today.isoformat()}: {dict(scores)}")
    return [{"category": name, "score": score, "full_mark": 100} for name, score in scores]
