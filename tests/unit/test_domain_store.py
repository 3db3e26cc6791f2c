"""Unit tests for the generic domain store."""

import json
import logging

import pytest

from tracklife.domain.records import (
    BudgetCategory,
    HabitEntry,
    SleepEntry,
    WaterEntry,
    WorkoutEntry,
    default_budget_categories,
)
from tracklife.storage.interfaces import KeyValueStorage, StorageError
from tracklife.storage.memory_impl import MemoryStorage
from tracklife.store.domain_store import DomainStore, RecordValidationError

KEY = "tracklife:water"


def water(entry_id: str, amount: float = 1.0, day: str = "2024-03-15") -> WaterEntry:
    return WaterEntry(id=entry_id, date=day, amount=amount, timestamp="08:00")


class FailingWriteStorage(MemoryStorage):
    """Reads work, every write fails."""

    def set(self, key: str, value: str) -> None:
        raise StorageError("disk full")


class FailingReadStorage(KeyValueStorage):
    def get(self, key):
        raise StorageError("unreadable")

    def set(self, key, value):
        pass

    def remove(self, key):
        pass

    def keys(self):
        return []


@pytest.fixture
def water_store(memory_storage):
    return DomainStore(memory_storage, KEY, WaterEntry)


@pytest.mark.unit
class TestGetAll:
    def test_unwritten_slot_returns_empty_default(self, water_store):
        assert water_store.get_all() == []

    def test_unwritten_slot_returns_seeded_default(self, memory_storage):
        store = DomainStore(memory_storage, "cats", BudgetCategory, default_budget_categories)
        categories = store.get_all()
        assert [c.name for c in categories] == ["Food", "Entertainment", "Housing", "Transport", "Savings"]

    def test_reading_default_does_not_write(self, water_store, memory_storage):
        water_store.get_all()
        assert memory_storage.write_count == 0

    def test_corrupt_json_falls_back_to_default(self, caplog):
        storage = MemoryStorage({KEY: "{not json"})
        store = DomainStore(storage, KEY, WaterEntry)
        with caplog.at_level(logging.WARNING):
            assert store.get_all() == []
        assert "Discarding unreadable collection" in caplog.text

    def test_non_array_json_falls_back_to_default(self):
        storage = MemoryStorage({KEY: json.dumps({"id": "1"})})
        assert DomainStore(storage, KEY, WaterEntry).get_all() == []

    def test_invalid_record_falls_back_to_default(self):
        storage = MemoryStorage({KEY: json.dumps([{"id": "1", "date": "2024-03-15", "amount": "lots"}])})
        assert DomainStore(storage, KEY, WaterEntry).get_all() == []

    def test_read_failure_falls_back_to_default(self, caplog):
        store = DomainStore(FailingReadStorage(), KEY, WaterEntry)
        with caplog.at_level(logging.ERROR):
            assert store.get_all() == []
        assert "Failed to read" in caplog.text

    def test_reads_persisted_camel_case_fields(self):
        raw = [{"id": "1", "date": "2024-01-01", "bedtime": "22:30", "wakeTime": "07:00",
                "duration": 8.5, "quality": 7}]
        store = DomainStore(MemoryStorage({"s": json.dumps(raw)}), "s", SleepEntry)
        entry = store.get_all()[0]
        assert entry.wake_time == "07:00"
        assert entry.duration == 8.5

    def test_fractional_workout_minutes_read_back(self):
        raw = [
            {"id": "1", "date": "2024-03-14", "type": "Run", "duration": 30, "intensity": "high"},
            {"id": "2", "date": "2024-03-15", "type": "Yoga", "duration": 30.5, "calories": 99.5},
        ]
        store = DomainStore(MemoryStorage({"w": json.dumps(raw)}), "w", WorkoutEntry)

        entries = store.get_all()

        assert [e.id for e in entries] == ["1", "2"]
        assert entries[1].duration == 30.5
        assert entries[1].calories == 99.5


@pytest.mark.unit
class TestAdd:
    def test_add_appends_at_end(self, water_store):
        water_store.add(water("1"))
        water_store.add(water("2"))
        record = water("3", amount=0.5)

        before = water_store.get_all()
        water_store.add(record)
        after = water_store.get_all()

        assert len(after) == len(before) + 1
        assert after[-1] == record
        assert sum(1 for r in after if r == record) == 1
        assert after[:-1] == before

    def test_add_writes_full_collection_once(self, water_store, memory_storage):
        water_store.add(water("1"))
        water_store.add(water("2"))
        assert memory_storage.write_count == 2
        stored = json.loads(memory_storage.get(KEY))
        assert [r["id"] for r in stored] == ["1", "2"]

    def test_duplicate_ids_are_not_rejected(self, water_store):
        water_store.add(water("1", amount=1))
        water_store.add(water("1", amount=2))
        assert len(water_store.get_all()) == 2

    def test_add_rejects_wrong_record_type(self, water_store):
        habit = HabitEntry(id="1", title="Read")
        with pytest.raises(RecordValidationError):
            water_store.add(habit)

    def test_add_from_dict_accepts_aliases(self, memory_storage):
        store = DomainStore(memory_storage, "s", SleepEntry)
        record = store.add_from_dict({"id": "1", "date": "2024-01-01", "bedtime": "23:00",
                                      "wakeTime": "06:00", "duration": 7.0, "quality": 5})
        assert store.get_all() == [record]

    def test_add_from_dict_rejects_invalid_data(self, water_store, memory_storage):
        with pytest.raises(RecordValidationError):
            water_store.add_from_dict({"id": "1", "date": "15/03/2024", "amount": 1})
        assert memory_storage.write_count == 0

    @pytest.mark.parametrize("bad_date", ["2024-02-30", "2024-13-45"])
    def test_add_rejects_impossible_dates(self, water_store, memory_storage, bad_date):
        with pytest.raises(RecordValidationError):
            water_store.add_from_dict({"id": "1", "date": bad_date, "amount": 1})
        assert memory_storage.write_count == 0
        assert water_store.get_all() == []

    def test_add_rejects_infinite_amount(self, water_store, memory_storage):
        with pytest.raises(RecordValidationError):
            water_store.add_from_dict({"id": "1", "date": "2024-03-15", "amount": float("inf")})
        assert memory_storage.write_count == 0

    def test_write_failure_is_swallowed_and_logged(self, caplog):
        store = DomainStore(FailingWriteStorage(), KEY, WaterEntry)
        with caplog.at_level(logging.ERROR):
            store.add(water("1"))
        assert "Failed to persist" in caplog.text
        assert store.get_all() == []

    def test_persisted_json_omits_unset_optionals(self, memory_storage):
        store = DomainStore(memory_storage, "w", WaterEntry)
        store.add(WaterEntry(id="1", date="2024-03-15", amount=1))
        assert json.loads(memory_storage.get("w")) == [{"id": "1", "date": "2024-03-15", "amount": 1.0}]


@pytest.mark.unit
class TestUpdate:
    def test_update_merges_patch_and_leaves_others_untouched(self, water_store, memory_storage):
        water_store.add(water("1", amount=1))
        water_store.add(water("2", amount=2))
        other_before = json.loads(memory_storage.get(KEY))[1]

        water_store.update("1", {"amount": 3, "timestamp": "09:15"})

        first, second = water_store.get_all()
        assert first.amount == 3
        assert first.timestamp == "09:15"
        assert first.date == "2024-03-15"
        assert json.loads(memory_storage.get(KEY))[1] == other_before
        assert second == water("2", amount=2)

    def test_update_accepts_camel_case_keys(self, memory_storage):
        store = DomainStore(memory_storage, "s", SleepEntry)
        store.add(SleepEntry(id="1", date="2024-01-01", bedtime="22:30", wake_time="07:00",
                             duration=8.5, quality=7))
        store.update("1", {"wakeTime": "06:30"})
        assert store.get("1").wake_time == "06:30"

    def test_update_changes_every_matching_record(self, water_store):
        water_store.add(water("1", amount=1))
        water_store.add(water("1", amount=2))
        water_store.update("1", {"amount": 5})
        assert [r.amount for r in water_store.get_all()] == [5, 5]

    def test_update_unknown_id_still_persists(self, water_store, memory_storage):
        water_store.add(water("1"))
        writes = memory_storage.write_count
        water_store.update("missing", {"amount": 4})
        assert memory_storage.write_count == writes + 1
        assert water_store.get_all() == [water("1")]

    def test_update_with_unknown_field_raises_before_writing(self, water_store, memory_storage):
        water_store.add(water("1"))
        writes = memory_storage.write_count
        with pytest.raises(RecordValidationError):
            water_store.update("1", {"volume": 4})
        assert memory_storage.write_count == writes

    def test_update_with_invalid_value_raises_before_writing(self, water_store, memory_storage):
        water_store.add(water("1"))
        writes = memory_storage.write_count
        with pytest.raises(RecordValidationError):
            water_store.update("1", {"amount": -1})
        assert memory_storage.write_count == writes
        assert water_store.get_all() == [water("1")]


@pytest.mark.unit
class TestDelete:
    def test_delete_removes_all_matches(self, water_store):
        water_store.add(water("1"))
        water_store.add(water("2"))
        water_store.add(water("1", amount=3))

        before = len(water_store.get_all())
        water_store.delete("1")
        after = water_store.get_all()

        assert len(after) == before - 2
        assert all(r.id != "1" for r in after)

    def test_delete_is_idempotent(self, water_store):
        water_store.add(water("1"))
        water_store.add(water("2"))

        water_store.delete("1")
        once = water_store.get_all()
        water_store.delete("1")
        assert water_store.get_all() == once

    def test_delete_unknown_id_is_noop(self, water_store):
        water_store.add(water("1"))
        water_store.delete("nope")
        assert water_store.get_all() == [water("1")]


@pytest.mark.unit
class TestReset:
    def test_reset_empties_collection(self, water_store):
        water_store.add(water("1"))
        water_store.reset()
        assert water_store.get_all() == []

    def test_reset_reseeds_default(self, memory_storage):
        store = DomainStore(memory_storage, "cats", BudgetCategory, default_budget_categories)
        store.delete("1")
        store.add(BudgetCategory(id="9", name="Travel", limit=300))
        store.reset()
        assert store.get_all() == default_budget_categories()


@pytest.mark.unit
def test_get_returns_first_match_or_none(water_store):
    water_store.add(water("1", amount=1))
    water_store.add(water("1", amount=2))
    assert water_store.get("1").amount == 1
    assert water_store.get("2") is None
