"""Unit tests for the wellness overview."""

import pytest

from tracklife.aggregation.dashboard import fitness_score, mood_score, sleep_score, wellness_scores
from tracklife.aggregation.sleep import build_sleep_entry
from tracklife.domain.records import HabitEntry, MoodEntry, WaterEntry, WorkoutEntry


def scores_by_category(scores):
    return {s["category"]: s["score"] for s in scores}


@pytest.mark.unit
def test_empty_trackers_score_neutral_or_zero(today):
    scores = scores_by_category(wellness_scores([], [], [], [], [], today))
    assert scores == {"Sleep": 50, "Fitness": 0, "Habits": 0, "Mood": 50, "Hydration": 0}


@pytest.mark.unit
def test_scores_from_every_tracker(today):
    sleep = [
        build_sleep_entry("2024-03-14", "23:00", "06:00", 6, entry_id="1"),
        build_sleep_entry("2024-03-13", "23:00", "06:00", 6, entry_id="2"),
        build_sleep_entry("2024-03-08", "20:00", "08:00", 6, entry_id="3"),
    ]
    workouts = [WorkoutEntry(id=str(n), date=f"2024-03-1{n}", type="Yoga", duration=20) for n in (1, 2, 3)]
    habits = [HabitEntry(id="1", title="Read", completed=True), HabitEntry(id="2", title="Walk")]
    moods = [
        MoodEntry(id="1", date="2024-03-15", mood=8),
        MoodEntry(id="2", date="2024-03-15", mood=2),
        MoodEntry(id="3", date="2024-03-14", mood=6),
    ]
    water = [WaterEntry(id="1", date="2024-03-15", amount=4)]

    scores = wellness_scores(sleep, workouts, habits, moods, water, today)

    assert scores_by_category(scores) == {
        "Sleep": 85,
        "Fitness": 60,
        "Habits": 50,
        "Mood": 70,
        "Hydration": 50,
    }
    assert all(s["full_mark"] == 100 for s in scores)


@pytest.mark.unit
def test_sleep_score_bottoms_out(today):
    short_nights = [build_sleep_entry("2024-03-14", "05:00", "06:00", 2, entry_id="1")]
    assert sleep_score(short_nights, today) == 0


@pytest.mark.unit
def test_fitness_score_caps_at_target(today):
    workouts = [WorkoutEntry(id=str(n), date="2024-03-11", type="Run", duration=10) for n in range(7)]
    assert fitness_score(workouts, today) == 100
    assert fitness_score(workouts[:2], today, weekly_target=4) == 50


@pytest.mark.unit
def test_mood_score_ignores_older_entries(today):
    assert mood_score([MoodEntry(id="1", date="2024-03-01", mood=9)], today) == 50
