"""Period tracker aggregations: cycle prediction, monthly chart, calendar."""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import CyclePhase, PeriodEntryType
from ..domain.records import PeriodEntry
from .common import add_months, end_of_month, mean, resolve_today, round_half_up, start_of_month

DEFAULT_CYCLE_LENGTH = 28
DEFAULT_PERIOD_LENGTH = 5
PERIOD_RUN_WINDOW_DAYS = 10
FOLLICULAR_END_DAY = 14
OVULATION_END_DAY = 17
CHART_MONTHS = 6


@dataclass
class CycleStats:
    average_cycle_length: int
    average_period_length: int
    next_period_date: Optional[date]
    days_until_next: Optional[int]
    cycle_phase: Optional[CyclePhase]


def _period_dates(entries: Sequence[PeriodEntry]) -> List[date]:
    return sorted({e.day for e in entries if e.type == PeriodEntryType.PERIOD.value})


def cycle_phase_for(days_since_last_period: int, average_period_length: int) -> CyclePhase:
    if days_since_last_period < average_period_length:
        return CyclePhase.MENSTRUAL
    if days_since_last_period < FOLLICULAR_END_DAY:
        return CyclePhase.FOLLICULAR
    if days_since_last_period < OVULATION_END_DAY:
        return CyclePhase.OVULATION
    return CyclePhase.LUTEAL


def cycle_stats(entries: Sequence[PeriodEntry], today: Optional[date] = None) -> CycleStats:
    """Average cycle and period length, next predicted period and today's phase.

    The cycle length is the rounded mean gap between consecutive period
    dates (28 with fewer than two dates). A period's length is the span of
    period dates within 10 days of each date, counted when the span holds
    more than one date (5 when none does). The next period is predicted
    from the most recent period date. With no period dates at all there is
    no prediction.
    """
    today = resolve_today(today)
    dates = _period_dates(entries)

    gaps = [(later - earlier).days for earlier, later in zip(dates, dates[1:])]
    avg_cycle = round_half_up(mean(gaps)) if gaps else DEFAULT_CYCLE_LENGTH

    lengths = []
    for start in dates:
        window_end = start + timedelta(days=PERIOD_RUN_WINDOW_DAYS)
        run = [d for d in dates if start <= d <= window_end]
        if len(run) > 1:
            lengths.append((run[-1] - run[0]).days + 1)
    avg_period = round_half_up(mean(lengths)) if lengths else DEFAULT_PERIOD_LENGTH

    if not dates:
        return CycleStats(avg_cycle, avg_period, None, None, None)

    last_period = dates[-1]
    next_period = last_period + timedelta(days=avg_cycle)
    return CycleStats(
        average_cycle_length=avg_cycle,
        average_period_length=avg_period,
        next_period_date=next_period,
        days_until_next=(next_period - today).days,
        cycle_phase=cycle_phase_for((today - last_period).days, avg_period),
    )


def _has_symptoms(entry: PeriodEntry) -> bool:
    if entry.type == PeriodEntryType.SYMPTOMS.value:
        return True
    return entry.type == PeriodEntryType.PERIOD.value and bool(entry.symptoms)


def monthly_chart(entries: Sequence[PeriodEntry], today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Period-day and symptom-day entry counts for the last six months, oldest first."""
    today = resolve_today(today)
    points = []
    for offset in range(CHART_MONTHS - 1, -1, -1):
        month = add_months(start_of_month(today), -offset)
        start, end = month, end_of_month(month)
        in_month = [e for e in entries if start <= e.day <= end]
        points.append(
            {
                "month": month.strftime("%b"),
                "period_days": sum(1 for e in in_month if e.type == PeriodEntryType.PERIOD.value),
                "symptom_days": sum(1 for e in in_month if _has_symptoms(e)),
            }
        )
    return points


def calendar_month(entries: Sequence[PeriodEntry], year: int, month: int) -> List[Dict[str, Any]]:
    """One cell per day of the month with the kinds of entries logged that day.

    ``flow`` is the flow of the first period entry of the day, if any.
    """
    by_day: Dict[date, List[PeriodEntry]] = {}
    for entry in entries:
        by_day.setdefault(entry.day, []).append(entry)

    cells = []
    for day_number in range(1, calendar.monthrange(year, month)[1] + 1):
        day = date(year, month, day_number)
        logged = by_day.get(day, [])
        period_entries = [e for e in logged if e.type == PeriodEntryType.PERIOD.value]
        cells.append(
            {
                "date": day,
                "has_period": bool(period_entries),
                "has_spotting": any(e.type == PeriodEntryType.SPOTTING.value for e in logged),
                "has_symptoms": any(e.type == PeriodEntryType.SYMPTOMS.value for e in logged),
                "flow": period_entries[0].flow if period_entries else None,
            }
        )
    return cells
