"""Container wiring one DomainStore per tracker over a shared storage backend."""

from typing import Dict, Union

from ..core.enums import Domain
from ..domain.records import (
    BudgetCategory,
    BudgetEntry,
    HabitEntry,
    MoodEntry,
    PeriodEntry,
    SleepEntry,
    WaterEntry,
    WorkoutEntry,
    default_budget_categories,
)
from ..storage.interfaces import KeyValueStorage
from ..utils.logging_config import get_module_logger
from .domain_store import DomainStore

logger = get_module_logger(__name__)

KEY_PREFIX = "tracklife"

SLEEP_KEY = f"{KEY_PREFIX}:sleep"
PERIOD_KEY = f"{KEY_PREFIX}:period"
WORKOUT_KEY = f"{KEY_PREFIX}:workout"
HABITS_KEY = f"{KEY_PREFIX}:habits"
BUDGET_KEY = f"{KEY_PREFIX}:budget"
BUDGET_CATEGORIES_KEY = f"{KEY_PREFIX}:budget:categories"
MOOD_KEY = f"{KEY_PREFIX}:mood"
WATER_KEY = f"{KEY_PREFIX}:water"


class UnknownDomainError(LookupError):
    """Raised when a tracker is looked up by a name that is not a domain."""

    def __init__(self, name: str):
        valid = ", ".join(d.value for d in Domain)
        super().__init__(f"Unknown domain '{name}' (expected one of: {valid})")
        self.name = name


class BudgetStore:
    """Budget entries plus their independently persisted categories."""

    def __init__(self, storage: KeyValueStorage):
        self.entries: DomainStore[BudgetEntry] = DomainStore(storage, BUDGET_KEY, BudgetEntry)
        self.categories: DomainStore[BudgetCategory] = DomainStore(
            storage, BUDGET_CATEGORIES_KEY, BudgetCategory, default_budget_categories
        )

    def reset(self) -> None:
        """Empty the entries and reseed the default categories."""
        self.entries.reset()
        self.categories.reset()


class TrackerStores:
    """All tracker stores sharing one storage backend."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage
        self.sleep: DomainStore[SleepEntry] = DomainStore(storage, SLEEP_KEY, SleepEntry)
        self.period: DomainStore[PeriodEntry] = DomainStore(storage, PERIOD_KEY, PeriodEntry)
        self.workout: DomainStore[WorkoutEntry] = DomainStore(storage, WORKOUT_KEY, WorkoutEntry)
        self.habits: DomainStore[HabitEntry] = DomainStore(storage, HABITS_KEY, HabitEntry)
        self.budget = BudgetStore(storage)
        self.mood: DomainStore[MoodEntry] = DomainStore(storage, MOOD_KEY, MoodEntry)
        self.water: DomainStore[WaterEntry] = DomainStore(storage, WATER_KEY, WaterEntry)

    def _by_domain(self) -> Dict[Domain, Union[DomainStore, BudgetStore]]:
        return {
            Domain.SLEEP: self.sleep,
            Domain.PERIOD: self.period,
            Domain.WORKOUT: self.workout,
            Domain.HABITS: self.habits,
            Domain.BUDGET: self.budget,
            Domain.MOOD: self.mood,
            Domain.WATER: self.water,
        }

    def for_domain(self, name: Union[str, Domain]) -> Union[DomainStore, BudgetStore]:
        """Look up a tracker by domain name ("sleep", "habits", ...).

        Raises:
            UnknownDomainError: If name is not a tracker domain
        """
        try:
            domain = Domain(name)
        except ValueError:
            raise UnknownDomainError(str(name)) from None
        return self._by_domain()[domain]

    def record_store(self, name: Union[str, Domain]) -> DomainStore:
        """Like for_domain, but resolves Budget to its entries store."""
        store = self.for_domain(name)
        if isinstance(store, BudgetStore):
            return store.entries
        return store

    def reset_all(self) -> None:
        """Reset every tracker in turn.

        The resets are independent: if one fails partway the earlier
        domains stay reset.
        """
        for domain, store in self._by_domain().items():
            store.reset()
            logger.info(f"Reset {domain.value} tracker")
