"""Budget tracker aggregations.

Entries reference categories by id without any integrity check, so a
category can be deleted while entries still point at it. Reports put
such entries in an "Uncategorized" bucket.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import BudgetEntryType, BudgetTimeFrame, BudgetView
from ..domain.records import BudgetCategory, BudgetEntry
from .common import (
    add_months,
    end_of_month,
    last_month_starts,
    month_key,
    percentage_of,
    resolve_today,
    round_half_up,
    start_of_month,
)

UNCATEGORIZED_ID = "uncategorized"
UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#9CA3AF"

TIME_FRAME_MONTHS = {
    BudgetTimeFrame.MONTH: 1,
    BudgetTimeFrame.THREE_MONTHS: 3,
    BudgetTimeFrame.SIX_MONTHS: 6,
    BudgetTimeFrame.YEAR: 12,
}

EXPENSE = BudgetEntryType.EXPENSE.value
INCOME = BudgetEntryType.INCOME.value


def _month_to_date(entries: Sequence[BudgetEntry], today: date) -> List[BudgetEntry]:
    start = start_of_month(today)
    return [e for e in entries if start <= e.day <= today]


def _total(entries: Sequence[BudgetEntry], entry_type: str) -> float:
    return sum(e.amount for e in entries if e.type == entry_type)


@dataclass
class MonthSummary:
    total_expenses: float
    total_income: float
    balance: float
    expense_trend: float


def month_summary(entries: Sequence[BudgetEntry], today: Optional[date] = None) -> MonthSummary:
    """Income, expenses and balance from the first of this month through today.

    ``expense_trend`` is the percentage change of this month's expenses over
    the whole previous month, or 0 when the previous month had none.
    """
    today = resolve_today(today)
    current = _month_to_date(entries, today)
    expenses = _total(current, EXPENSE)
    income = _total(current, INCOME)

    prev_start = add_months(start_of_month(today), -1)
    prev_end = end_of_month(prev_start)
    prev_expenses = _total([e for e in entries if prev_start <= e.day <= prev_end], EXPENSE)
    trend = (expenses - prev_expenses) / prev_expenses * 100 if prev_expenses > 0 else 0.0

    return MonthSummary(
        total_expenses=expenses,
        total_income=income,
        balance=income - expenses,
        expense_trend=round_half_up(trend, 1),
    )


def category_spending(
    entries: Sequence[BudgetEntry],
    categories: Sequence[BudgetCategory],
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """This month's spending per category against its limit, biggest spender first.

    ``percentage`` is capped at 100. Expenses whose category no longer exists
    are reported under "Uncategorized" when there are any.
    """
    today = resolve_today(today)
    expenses = [e for e in _month_to_date(entries, today) if e.type == EXPENSE]
    known_ids = {c.id for c in categories}

    rows = []
    for category in categories:
        spent = sum(e.amount for e in expenses if e.category_id == category.id)
        rows.append(
            {
                "category_id": category.id,
                "name": category.name,
                "spent": spent,
                "limit": category.limit,
                "percentage": percentage_of(spent, category.limit),
                "color": category.color,
            }
        )

    orphaned = [e for e in expenses if e.category_id not in known_ids]
    if orphaned:
        rows.append(
            {
                "category_id": UNCATEGORIZED_ID,
                "name": UNCATEGORIZED_NAME,
                "spent": sum(e.amount for e in orphaned),
                "limit": 0,
                "percentage": 0,
                "color": UNCATEGORIZED_COLOR,
            }
        )

    rows.sort(key=lambda row: row["spent"], reverse=True)
    return rows


def category_name(category_id: str, categories: Sequence[BudgetCategory]) -> str:
    """Display name for a category id, "Uncategorized" when it no longer exists."""
    for category in categories:
        if category.id == category_id:
            return category.name
    return UNCATEGORIZED_NAME


def monthly_chart(
    entries: Sequence[BudgetEntry],
    time_frame: BudgetTimeFrame = BudgetTimeFrame.MONTH,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Expenses, income and balance per month over the time frame, oldest first."""
    today = resolve_today(today)
    months = last_month_starts(today, TIME_FRAME_MONTHS[BudgetTimeFrame(time_frame)])
    totals = {month_key(m): {"expenses": 0.0, "income": 0.0} for m in months}

    for entry in entries:
        bucket = totals.get(month_key(entry.day))
        if bucket is None or entry.day > today:
            continue
        if entry.type == EXPENSE:
            bucket["expenses"] += entry.amount
        else:
            bucket["income"] += entry.amount

    return [
        {
            "month": m.strftime("%b %Y"),
            "expenses": totals[month_key(m)]["expenses"],
            "income": totals[month_key(m)]["income"],
            "balance": totals[month_key(m)]["income"] - totals[month_key(m)]["expenses"],
        }
        for m in months
    ]


def recent_entries(
    entries: Sequence[BudgetEntry],
    view: BudgetView = BudgetView.ALL,
    limit: int = 10,
) -> List[BudgetEntry]:
    """Most recent entries first, optionally only expenses or only income."""
    view = BudgetView(view)
    if view == BudgetView.EXPENSES:
        selected = [e for e in entries if e.type == EXPENSE]
    elif view == BudgetView.INCOME:
        selected = [e for e in entries if e.type == INCOME]
    else:
        selected = list(entries)
    selected.sort(key=lambda e: e.date, reverse=True)
    return selected[:limit]
