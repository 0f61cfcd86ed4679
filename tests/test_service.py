"""
Tests for HabitService against the in-memory store and a pinned clock (2024-06-12)
"""
from datetime import date

import pytest

from lifedash.core.constants import ALL_DAYS
from lifedash.core.exceptions import DatabaseError, HabitNotFoundError, InvalidHabitDataError
from lifedash.models.habit import HabitStatus
from lifedash.services.habits.repository import InMemoryRecordStore
from lifedash.services.habits.service import HabitService
from tests.conftest import WEEKDAYS, completed


class FlakyStore(InMemoryRecordStore):
    """Fails every update for one record id"""

    def __init__(self, failing_id):
        super().__init__()
        self.failing_id = failing_id

    def update(self, record_id, patch):
        if str(record_id) == str(self.failing_id):
            raise DatabaseError("write rejected")
        return super().update(record_id, patch)


class TestCreateAndDelete:
    """Tests for creating and deleting habits."""

    def test_add_habit_defaults(self, service, store):
        habit = service.add_habit("u1", "  Read  ")
        assert habit.name == "Read"
        assert habit.active_days == ALL_DAYS
        assert habit.history == []
        assert store.get(habit.id)["user_id"] == "u1"

    def test_add_habit_with_schedule(self, service):
        habit = service.add_habit("u1", "Exercise", [5, 1, 2, 3, 4])
        assert habit.active_days == WEEKDAYS

    @pytest.mark.parametrize("name, days", [
        ("", None),
        ("   ", None),
        ("Read", []),
        ("Read", [9]),
    ])
    def test_add_habit_rejects_bad_input(self, service, name, days):
        with pytest.raises(InvalidHabitDataError):
            service.add_habit("u1", name, days)

    def test_delete_habit(self, service):
        habit = service.add_habit("u1", "Read")
        service.delete_habit("u1", habit.id)
        with pytest.raises(HabitNotFoundError):
            service.get_habit("u1", habit.id)

    def test_delete_releases_habit_lock(self, service):
        habit = service.add_habit("u1", "Read")
        service.cycle_status("u1", habit.id)
        assert str(habit.id) in service._locks

        service.delete_habit("u1", habit.id)
        assert str(habit.id) not in service._locks

    def test_other_owner_cannot_see_habit(self, service):
        habit = service.add_habit("u1", "Read")
        with pytest.raises(HabitNotFoundError):
            service.get_habit("u2", habit.id)
        with pytest.raises(HabitNotFoundError):
            service.delete_habit("u2", habit.id)


class TestCycle:
    """Tests for cycling a day's status through the service."""

    def test_cycle_persists_history(self, service, store):
        habit = service.add_habit("u1", "Read")
        updated = service.cycle_status("u1", habit.id)

        assert updated.history[0].status is HabitStatus.COMPLETED
        assert store.get(habit.id)["history"] == [{"date": "2024-06-12", "status": "completed"}]

    def test_full_cycle(self, service, store):
        habit = service.add_habit("u1", "Read")
        for _ in range(3):
            service.cycle_status("u1", habit.id, "2024-06-11")
        assert store.get(habit.id)["history"] == []

    def test_future_date_rejected(self, service):
        habit = service.add_habit("u1", "Read")
        with pytest.raises(InvalidHabitDataError):
            service.cycle_status("u1", habit.id, date(2024, 6, 13))

    def test_unknown_habit(self, service):
        with pytest.raises(HabitNotFoundError):
            service.cycle_status("u1", "missing")

    def test_legacy_history_rewritten_in_structured_form(self, service, store):
        record = store.create({"user_id": "u1", "name": "Read", "history": ["2024-06-11T08:00:00.000Z"]})
        service.cycle_status("u1", record["id"])
        assert store.get(record["id"])["history"] == [
            {"date": "2024-06-12", "status": "completed"},
            {"date": "2024-06-11", "status": "completed"},
        ]


class TestScheduleAndReset:
    """Tests for schedule edits and stats reset."""

    def test_update_active_days(self, service, store):
        habit = service.add_habit("u1", "Read")
        updated = service.update_active_days("u1", habit.id, [3, 1])
        assert updated.active_days == [1, 3]
        assert store.get(habit.id)["active_days"] == [1, 3]

    def test_update_active_days_rejects_empty(self, service):
        habit = service.add_habit("u1", "Read")
        with pytest.raises(InvalidHabitDataError):
            service.update_active_days("u1", habit.id, [])

    def test_reset_stats(self, service, store):
        record = store.create({"user_id": "u1", "name": "Read", "history": [completed("2024-06-11")]})
        habit = service.reset_stats("u1", record["id"])

        assert habit.history == []
        assert habit.tracking_start_date == date(2024, 6, 12)
        assert store.get(record["id"])["tracking_start_date"] == "2024-06-12"


class TestMarkMissed:
    """Tests for the daily missed-day backfill."""

    def test_marks_only_unset_habits(self, service, store):
        store.create({"user_id": "u1", "name": "Read", "history": [completed("2024-06-11")]})
        missed = store.create({"user_id": "u1", "name": "Run", "history": []})

        assert service.mark_missed("u1") == 1
        assert store.get(missed["id"])["history"] == [{"date": "2024-06-11", "status": "failed"}]

    def test_idempotent(self, service, store):
        store.create({"user_id": "u1", "name": "Run", "history": []})
        assert service.mark_missed() == 1
        assert service.mark_missed() == 0

    def test_all_owners_by_default(self, service, store):
        store.create({"user_id": "u1", "name": "Run"})
        store.create({"user_id": "u2", "name": "Read"})
        assert service.mark_missed() == 2

    def test_one_failed_write_does_not_stop_others(self, clock):
        store = FlakyStore(failing_id="bad")
        store.create({"id": "bad", "user_id": "u1", "name": "Run"})
        good = store.create({"user_id": "u1", "name": "Read"})

        assert HabitService(store, clock).mark_missed() == 1
        assert store.get(good["id"])["history"][0]["status"] == "failed"

    def test_unreadable_record_is_skipped(self, service, store):
        store.create({"user_id": "u1", "name": "Run", "tracking_start_date": "someday"})
        store.create({"user_id": "u1", "name": "Stretch", "active_days": [1, 9]})
        good = store.create({"user_id": "u1", "name": "Read"})

        assert service.mark_missed() == 1
        assert store.get(good["id"])["history"] == [{"date": "2024-06-11", "status": "failed"}]


class TestReads:
    """Tests for the overview and analytics reads."""

    def test_overview(self, service, store):
        store.create({
            "user_id": "u1",
            "name": "Exercise",
            "active_days": WEEKDAYS,
            "history": [completed("2024-06-10"), completed("2024-06-11")],
        })

        [overview] = service.get_overview("u1")
        assert overview.habit.name == "Exercise"
        assert overview.today_status is None
        assert overview.is_today_active
        assert overview.streak == 2
        assert len(overview.weekly) == 7
        assert overview.success_rate.total_days == 3
        assert overview.success_rate.rate == 67

    def test_overview_empty(self, service):
        assert service.get_overview("nobody") == []

    def test_analytics(self, service, store):
        store.create({"user_id": "u1", "name": "Read", "history": [completed("2024-06-12")]})
        summary = service.get_analytics("u1")
        assert summary.today.completed == 1
        assert summary.best_streak == 1

    def test_unreadable_record_does_not_break_overview(self, service, store):
        store.create({"user_id": "u1", "name": "Run", "tracking_start_date": "someday"})
        store.create({"user_id": "u1", "name": "Stretch", "active_days": [7]})
        store.create({"user_id": "u1", "name": "Read", "history": [completed("2024-06-11")]})

        overview = service.get_overview("u1")
        assert [o.habit.name for o in overview] == ["Read"]
        assert overview[0].streak == 1
        assert service.get_analytics("u1").today.total == 1
