"""Unit tests for water aggregations."""

from datetime import timedelta

import pytest

from tracklife.aggregation.water import daily_total, todays_entries, water_chart, water_stats
from tracklife.domain.records import WaterEntry


def glass(entry_id, day, amount=1.0, timestamp=None):
    return WaterEntry(id=entry_id, date=str(day), amount=amount, timestamp=timestamp)


@pytest.mark.unit
def test_water_scenario(stores, today):
    for entry_id, amount in (("1", 1), ("2", 1), ("3", 0.5)):
        stores.water.add(glass(entry_id, today, amount))

    entries = stores.water.get_all()
    assert daily_total(entries, today) == 2.5

    stats = water_stats(entries, today, daily_goal=8)
    assert stats.today_amount == 2.5
    assert stats.completion == 31


@pytest.mark.unit
class TestWaterStats:
    def test_weekly_average_divides_by_seven(self, today):
        entries = [glass("1", today, 7), glass("2", today - timedelta(days=3), 7),
                   glass("3", today - timedelta(days=7), 100)]
        assert water_stats(entries, today).weekly_average == 2.0

    def test_streak_requires_today(self, today):
        yesterday_only = [glass("1", today - timedelta(days=1)), glass("2", today - timedelta(days=2))]
        assert water_stats(yesterday_only, today).streak == 0

        with_today = yesterday_only + [glass("3", today)]
        assert water_stats(with_today, today).streak == 3

    def test_completion_capped(self, today):
        assert water_stats([glass("1", today, 12)], today).completion == 100

    def test_custom_goal(self, today):
        stats = water_stats([glass("1", today, 3)], today, daily_goal=6)
        assert stats.daily_goal == 6
        assert stats.completion == 50

    def test_empty(self, today):
        stats = water_stats([], today)
        assert stats.today_amount == 0
        assert stats.completion == 0
        assert stats.daily_goal == 8


@pytest.mark.unit
class TestWaterChart:
    def test_day_view_is_hourly(self, today):
        entries = [
            glass("1", today, 1, "08:15"),
            glass("2", today, 0.5, "08:45"),
            glass("3", today, 2),
            glass("4", today - timedelta(days=1), 1, "08:00"),
        ]
        chart = water_chart(entries, "day", today)
        assert len(chart) == 24
        assert chart[8] == {"time": "08:00", "amount": 1.5}
        assert sum(p["amount"] for p in chart) == 1.5

    def test_week_view(self, today):
        chart = water_chart([glass("1", today, 2)], "week", today)
        assert len(chart) == 7
        assert chart[-1] == {"day": "Fri", "amount": 2, "is_today": True}
        assert chart[0]["day"] == "Sat"

    def test_month_view(self, today):
        chart = water_chart([], "month", today)
        assert len(chart) == 30
        assert chart[0]["day"] == "Feb 15"
        assert chart[-1]["day"] == "Mar 15"


@pytest.mark.unit
def test_todays_entries_latest_first(today):
    entries = [glass("1", today, 1, "08:00"), glass("2", today, 1), glass("3", today, 1, "12:30"),
               glass("4", today - timedelta(days=1), 1, "23:00")]
    assert [e.id for e in todays_entries(entries, today)] == ["3", "1", "2"]
