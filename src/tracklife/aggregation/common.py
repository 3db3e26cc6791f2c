"""Date helpers and reducers shared by the tracker aggregations."""

import calendar
import statistics
from datetime import date, timedelta
from typing import Iterable, List, Optional, Set, Tuple

from ..core.enums import ViewMode


def resolve_today(today: Optional[date] = None) -> date:
    """Return today unless an explicit reference day is given."""
    return today if today is not None else date.today()


def start_of_week(day: date) -> date:
    """Sunday on or before day."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def end_of_week(day: date) -> date:
    """Saturday on or after day."""
    return start_of_week(day) + timedelta(days=6)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return add_months(start_of_month(day), 1) - timedelta(days=1)


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    year, month_zero = divmod(day.year * 12 + (day.month - 1) + months, 12)
    month = month_zero + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def month_key(day: date) -> Tuple[int, int]:
    return day.year, day.month


def view_window(view: ViewMode, today: date) -> Tuple[date, date]:
    """Inclusive date range covered by a week/month/year chart view."""
    view = ViewMode(view)
    if view == ViewMode.WEEK:
        return start_of_week(today), end_of_week(today)
    if view == ViewMode.MONTH:
        return start_of_month(today), end_of_month(today)
    return add_months(today, -12) + timedelta(days=1), today


def in_range(day: date, start: date, end: date) -> bool:
    return start <= day <= end


def days_back(today: date, count: int) -> List[date]:
    """The last count days ending at today, oldest first."""
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def each_day(start: date, end: date) -> List[date]:
    """Every day from start to end inclusive."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def last_month_starts(today: date, count: int) -> List[date]:
    """First day of each of the last count months ending with today's, oldest first."""
    first = start_of_month(today)
    return [add_months(first, -offset) for offset in range(count - 1, -1, -1)]


def consecutive_day_streak(
    dates: Iterable[date], today: Optional[date] = None, allow_yesterday: bool = False
) -> int:
    """Count consecutive days with a record, walking backward from today.

    Stops at the first day without a record. With allow_yesterday, a day
    without a record today does not break the streak if yesterday has one.
    """
    today = resolve_today(today)
    recorded: Set[date] = set(dates)

    cursor = today
    if cursor not in recorded:
        if not allow_yesterday:
            return 0
        cursor = today - timedelta(days=1)

    streak = 0
    while cursor in recorded:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def percentage_of(value: float, target: float) -> int:
    """Whole-number percentage of target reached, capped at 100."""
    if target <= 0:
        return 0
    return min(100, round_half_up(value / target * 100))


def round_half_up(value: float, digits: int = 0):
    """Round halves away from zero; returns an int when digits is 0.

    ``round()`` rounds halves to even, which would turn 2.5 into 2.
    """
    factor = 10 ** digits
    scaled = abs(value) * factor
    rounded = int(scaled + 0.5 + 1e-9)
    if value < 0:
        rounded = -rounded
    if digits == 0:
        return rounded
    return rounded / factor


def mean(values: Iterable[float]) -> Optional[float]:
    """Arithmetic mean, or None for no values."""
    values = list(values)
    if not values:
        return None
    return statistics.fmean(values)
