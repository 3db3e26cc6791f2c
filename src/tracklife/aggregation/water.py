"""Water tracker aggregations. Amounts are in glasses."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import WaterViewMode
from ..domain.records import WaterEntry
from .common import consecutive_day_streak, days_back, percentage_of, resolve_today

DEFAULT_DAILY_GOAL = 8.0
WEEK_DAYS = 7
MONTH_DAYS = 30


def daily_total(entries: Sequence[WaterEntry], day: Optional[date] = None) -> float:
    """Sum of all amounts logged on day (today by default)."""
    day = resolve_today(day)
    return sum(e.amount for e in entries if e.day == day)


def todays_entries(entries: Sequence[WaterEntry], today: Optional[date] = None) -> List[WaterEntry]:
    """Today's entries, latest timestamp first; entries without a timestamp keep their order."""
    today = resolve_today(today)
    logged = [e for e in entries if e.day == today]
    timed = sorted((e for e in logged if e.timestamp), key=lambda e: e.timestamp, reverse=True)
    return timed + [e for e in logged if not e.timestamp]


@dataclass
class WaterStats:
    daily_goal: float = DEFAULT_DAILY_GOAL
    today_amount: float = 0.0
    weekly_average: float = 0.0
    completion: int = 0
    streak: int = 0


def water_stats(
    entries: Sequence[WaterEntry],
    today: Optional[date] = None,
    daily_goal: float = DEFAULT_DAILY_GOAL,
) -> WaterStats:
    """Today's intake against the goal, the 7-day average and the daily streak.

    The weekly average always divides by 7, so days without entries count
    as zero. The streak only counts when something was logged today.
    """
    today = resolve_today(today)
    if not entries:
        return WaterStats(daily_goal=daily_goal)

    today_amount = daily_total(entries, today)
    week = [daily_total(entries, day) for day in days_back(today, WEEK_DAYS)]
    return WaterStats(
        daily_goal=daily_goal,
        today_amount=today_amount,
        weekly_average=sum(week) / WEEK_DAYS,
        completion=percentage_of(today_amount, daily_goal),
        streak=consecutive_day_streak((e.day for e in entries), today),
    )


def water_chart(
    entries: Sequence[WaterEntry],
    view: WaterViewMode = WaterViewMode.DAY,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Intake per hour of today (day view) or per day over the last 7 or 30 days.

    In the day view, entries without a timestamp are left out.
    """
    today = resolve_today(today)
    view = WaterViewMode(view)

    if view == WaterViewMode.DAY:
        hourly = [0.0] * 24
        for entry in entries:
            if entry.day == today and entry.timestamp:
                hourly[int(entry.timestamp.split(":")[0])] += entry.amount
        return [{"time": f"{hour:02d}:00", "amount": amount} for hour, amount in enumerate(hourly)]

    count = WEEK_DAYS if view == WaterViewMode.WEEK else MONTH_DAYS
    points = []
    for day in days_back(today, count):
        label = day.strftime("%a") if view == WaterViewMode.WEEK else f"{day:%b} {day.day}"
        points.append({"day": label, "amount": daily_total(entries, day), "is_today": day == today})
    return points
