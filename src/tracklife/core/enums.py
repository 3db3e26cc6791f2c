"""Enums for the TrackLife application."""

from enum import Enum


class Domain(str, Enum):
    """Tracker domains, valued by their API/CLI name."""

    SLEEP = "sleep"
    PERIOD = "period"
    WORKOUT = "workout"
    HABITS = "habits"
    BUDGET = "budget"
    MOOD = "mood"
    WATER = "water"


class PeriodEntryType(str, Enum):
    """Kinds of period tracker entries."""

    PERIOD = "period"
    SPOTTING = "spotting"
    SYMPTOMS = "symptoms"


class FlowIntensity(str, Enum):
    """Flow intensity for period entries."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class WorkoutIntensity(str, Enum):
    """Workout intensity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BudgetEntryType(str, Enum):
    """Direction of a budget entry."""

    INCOME = "income"
    EXPENSE = "expense"


class ViewMode(str, Enum):
    """Chart time windows used by the sleep, workout and mood trackers."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class WaterViewMode(str, Enum):
    """Chart time windows for the water tracker."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class BudgetTimeFrame(str, Enum):
    """Chart time frames for the budget tracker."""

    MONTH = "month"
    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    YEAR = "year"


class BudgetView(str, Enum):
    """Entry listing filter for the budget tracker."""

    EXPENSES = "expenses"
    INCOME = "income"
    ALL = "all"


class CyclePhase(str, Enum):
    """Menstrual cycle phases."""

    MENSTRUAL = "menstrual"
    FOLLICULAR = "follicular"
    OVULATION = "ovulation"
    LUTEAL = "luteal"
