"""Integration tests for tracker persistence on SQLite.

Tests the full path from domain stores down to the database file:
- Collections survive a restart (a new storage over the same file)
- Slot keys and removal
- Unreadable slots fall back to defaults without touching other trackers
"""

import json

import pytest

from tracklife.storage.sqlalchemy_impl import SQLAlchemyStorage
from tracklife.store.registry import BUDGET_CATEGORIES_KEY, MOOD_KEY, WATER_KEY, TrackerStores


@pytest.mark.integration
class TestSQLAlchemyStorage:
    """Test the key-value contract on a real SQLite database."""

    def test_get_missing_slot(self, sqlite_storage):
        assert sqlite_storage.get("tracklife:sleep") is None

    def test_set_replaces_value(self, sqlite_storage):
        sqlite_storage.set("k", "first")
        sqlite_storage.set("k", "second")

        assert sqlite_storage.get("k") == "second"
        assert sqlite_storage.keys() == ["k"]

    def test_remove(self, sqlite_storage):
        sqlite_storage.set("a", "1")
        sqlite_storage.set("b", "2")

        sqlite_storage.remove("a")
        sqlite_storage.remove("missing")

        assert sqlite_storage.keys() == ["b"]

    def test_engine_points_at_database_file(self, sqlite_storage):
        assert sqlite_storage.engine.url.database.endswith("tracklife.db")

    def test_memory_database(self):
        storage = SQLAlchemyStorage(database_url="sqlite:///:memory:")
        storage.set("k", "v")
        assert storage.get("k") == "v"
        storage.close()


@pytest.mark.integration
class TestTrackerPersistence:
    """Test that tracker data survives reopening the database."""

    def test_records_survive_restart(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'restart.db'}"

        first = SQLAlchemyStorage(database_url=url)
        stores = TrackerStores(first)
        stores.water.add_from_dict({"id": "1", "date": "2024-03-15", "amount": 1.5, "timestamp": "08:00"})
        stores.sleep.add_from_dict({
            "id": "n1", "date": "2024-03-15", "bedtime": "23:00",
            "wakeTime": "07:00", "duration": 8, "quality": 8,
        })
        stores.budget.categories.delete("5")
        first.close()

        second = SQLAlchemyStorage(database_url=url)
        reopened = TrackerStores(second)

        assert [e.amount for e in reopened.water.get_all()] == [1.5]
        assert reopened.sleep.get("n1").wake_time == "07:00"
        assert [c.name for c in reopened.budget.categories.get_all()] == [
            "Food", "Entertainment", "Housing", "Transport",
        ]
        second.close()

    def test_stored_json_uses_camel_case(self, sqlite_storage):
        TrackerStores(sqlite_storage).budget.entries.add_from_dict({
            "id": "1", "date": "2024-03-15", "amount": 12.5, "description": "Lunch",
            "category_id": "1", "type": "expense",
        })

        stored = json.loads(sqlite_storage.get("tracklife:budget"))
        assert stored == [{
            "id": "1", "date": "2024-03-15", "amount": 12.5, "description": "Lunch",
            "categoryId": "1", "type": "expense",
        }]

    def test_corrupt_slot_only_affects_its_tracker(self, sqlite_storage):
        stores = TrackerStores(sqlite_storage)
        stores.mood.add_from_dict({"id": "1", "date": "2024-03-15", "mood": 6})
        sqlite_storage.set(WATER_KEY, "{broken")

        assert stores.water.get_all() == []
        assert len(stores.mood.get_all()) == 1

        stores.water.add_from_dict({"id": "2", "date": "2024-03-15", "amount": 1})
        assert [e.id for e in stores.water.get_all()] == ["2"]

    def test_reset_all_writes_every_slot(self, sqlite_storage):
        stores = TrackerStores(sqlite_storage)
        stores.mood.add_from_dict({"id": "1", "date": "2024-03-15", "mood": 6})

        stores.reset_all()

        keys = sqlite_storage.keys()
        assert MOOD_KEY in keys
        assert BUDGET_CATEGORIES_KEY in keys
        assert len(keys) == 8
        assert json.loads(sqlite_storage.get(MOOD_KEY)) == []
        assert len(json.loads(sqlite_storage.get(BUDGET_CATEGORIES_KEY))) == 5
