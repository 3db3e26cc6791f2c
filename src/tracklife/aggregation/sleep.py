"""Sleep tracker aggregations."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import ViewMode
from ..domain.records import SleepEntry, new_record_id
from .common import in_range, mean, resolve_today, round_half_up, view_window

MINUTES_PER_DAY = 24 * 60


def _clock_minutes(clock: str) -> int:
    hours, minutes = clock.split(":")
    return int(hours) * 60 + int(minutes)


def _format_clock(total_minutes: float) -> str:
    total = int(total_minutes)
    return f"{total // 60:02d}:{total % 60:02d}"


def calculate_duration(bedtime: str, wake_time: str) -> float:
    """Hours between bedtime and wake time, wrapping past midnight.

    >>> calculate_duration("23:00", "06:00")
    7.0
    >>> calculate_duration("22:30", "07:00")
    8.5
    """
    minutes = (_clock_minutes(wake_time) - _clock_minutes(bedtime)) % MINUTES_PER_DAY
    return round_half_up(minutes / 60, 1)


def build_sleep_entry(
    entry_date: str,
    bedtime: str,
    wake_time: str,
    quality: int,
    notes: Optional[str] = None,
    entry_id: Optional[str] = None,
) -> SleepEntry:
    """Create a SleepEntry with its duration derived from the two clock times."""
    return SleepEntry(
        id=entry_id or new_record_id(),
        date=entry_date,
        bedtime=bedtime,
        wake_time=wake_time,
        duration=calculate_duration(bedtime, wake_time),
        quality=quality,
        notes=notes or None,
    )


@dataclass
class SleepStats:
    avg_bedtime: Optional[str]
    avg_wake_time: Optional[str]
    avg_quality: Optional[float]
    avg_duration: Optional[float]


def sleep_stats(entries: Sequence[SleepEntry]) -> SleepStats:
    """Average bedtime, wake time, quality and duration over all entries.

    Clock times are averaged as minutes after midnight, so a mix of
    late-evening and after-midnight bedtimes averages toward midday.
    Every field is None when there are no entries.
    """
    if not entries:
        return SleepStats(None, None, None, None)

    avg_bed = mean(_clock_minutes(e.bedtime) for e in entries)
    avg_wake = mean(_clock_minutes(e.wake_time) for e in entries)
    return SleepStats(
        avg_bedtime=_format_clock(avg_bed),
        avg_wake_time=_format_clock(avg_wake),
        avg_quality=round_half_up(mean(e.quality for e in entries), 1),
        avg_duration=round_half_up(mean(e.duration for e in entries), 1),
    )


def sleep_chart(
    entries: Sequence[SleepEntry],
    view: ViewMode = ViewMode.MONTH,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Chart points (date label, hours, quality) inside the view window, oldest first."""
    today = resolve_today(today)
    start, end = view_window(view, today)
    points = sorted(
        (e for e in entries if in_range(e.day, start, end)),
        key=lambda e: e.date,
    )
    return [
        {"date": e.day.strftime("%b %d"), "hours": e.duration, "quality": e.quality}
        for e in points
    ]
