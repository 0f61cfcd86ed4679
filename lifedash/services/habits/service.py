"""
Habits Service - Business logic for habit management
Reads habit records from the record store, derives state with the engine,
and writes the result back as a single record update
"""
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional
import logging
import threading

from pydantic import ValidationError

from lifedash.core.exceptions import (
    DatabaseError,
    HabitNotFoundError,
    InvalidHabitDataError,
)
from lifedash.models.analytics import AnalyticsSummary
from lifedash.models.habit import Habit, HabitOverview, normalize_active_days
from lifedash.utils.timezone import Clock, DateLike, get_clock, to_date
from . import analytics, engine
from .history import serialize_history
from .repository import RecordId, RecordStore

logger = logging.getLogger(__name__)


class HabitService:
    """Habit operations for the dashboard, one owner at a time"""

    def __init__(self, store: RecordStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or get_clock()
        self._locks = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def _lock_for(self, habit_id: RecordId) -> threading.Lock:
        # Writes for one habit must not interleave or a cycle step is lost
        with self._locks_guard:
            return self._locks[str(habit_id)]

    @staticmethod
    def _to_habit(record: Dict[str, Any]) -> Habit:
        return Habit.model_validate(record)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_habits(self, owner_id: Optional[str]) -> List[Habit]:
        """
        Get all habits of an owner (or every habit when owner_id is None)

        Raises:
            DatabaseError: If the store query fails
        """
        habits = []
        for record in self.store.list(owner_id):
            try:
                habits.append(self._to_habit(record))
            except ValidationError as e:
                # One bad record must not hide the owner's other habits
                logger.warning(f"Skipping unreadable habit record {record.get('id')}: {e}")
        return habits

    def get_habit(self, owner_id: Optional[str], habit_id: RecordId) -> Habit:
        """
        Get one habit belonging to owner_id

        Raises:
            HabitNotFoundError: If the habit does not exist or belongs to someone else
        """
        record = self.store.get(habit_id)
        if not record or (owner_id is not None and record.get("user_id") != owner_id):
            raise HabitNotFoundError(f"Habit '{habit_id}' not found")
        return self._to_habit(record)

    def get_overview(self, owner_id: Optional[str]) -> List[HabitOverview]:
        """Today's status, streak, weekly grid and success rate for each habit"""
        today = self.clock.today()
        return [
            HabitOverview(
                habit=habit,
                today_status=engine.get_status_for_date(habit, today),
                is_today_active=engine.is_active_day(habit, today),
                streak=engine.calculate_streak(habit, today),
                weekly=engine.get_weekly_status(habit, today),
                success_rate=engine.calculate_success_rate(habit, today),
            )
            for habit in self.list_habits(owner_id)
        ]

    def get_analytics(self, owner_id: Optional[str], week_offset: int = 0) -> AnalyticsSummary:
        """Completion numbers across all of the owner's habits"""
        habits = self.list_habits(owner_id)
        return analytics.build_summary(habits, self.clock.today(), week_offset)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_habit(self, owner_id: Optional[str], name: str,
                  active_days: Optional[Iterable[int]] = None) -> Habit:
        """
        Create a habit with an empty history

        Raises:
            InvalidHabitDataError: If the name is blank or the schedule is empty/invalid
            DatabaseError: If the insert fails
        """
        if not name or not name.strip():
            raise InvalidHabitDataError("Habit name cannot be blank")
        days = self._validate_days(active_days)

        record = self.store.create({
            "user_id": owner_id,
            "name": name.strip(),
            "history": [],
            "active_days": days,
        })
        logger.info(f"Created habit '{name.strip()}' (ID: {record.get('id')})")
        return self._to_habit(record)

    def delete_habit(self, owner_id: Optional[str], habit_id: RecordId) -> None:
        """Delete a habit for good"""
        habit = self.get_habit(owner_id, habit_id)
        with self._lock_for(habit_id):
            self.store.delete(habit.id)
        with self._locks_guard:
            self._locks.pop(str(habit_id), None)
        logger.info(f"Deleted habit '{habit.name}' (ID: {habit.id})")

    def cycle_status(self, owner_id: Optional[str], habit_id: RecordId,
                     day: Optional[DateLike] = None) -> Habit:
        """
        Advance the status of a day (today by default)

        Raises:
            InvalidHabitDataError: If the day is after today
            HabitNotFoundError: If the habit does not exist
        """
        target = to_date(day) if day is not None else self.clock.today()
        if target > self.clock.today():
            raise InvalidHabitDataError(f"Cannot set a status for a future date: {target}")

        with self._lock_for(habit_id):
            habit = self.get_habit(owner_id, habit_id)
            history = engine.cycle_status(habit, target)
            record = self.store.update(habit.id, {"history": serialize_history(history)})
        return self._updated(habit, record)

    def update_active_days(self, owner_id: Optional[str], habit_id: RecordId,
                           days: Iterable[int]) -> Habit:
        """
        Replace the weekly schedule of a habit

        Raises:
            InvalidHabitDataError: If days is empty or holds an invalid weekday
        """
        validated = self._validate_days(days)
        with self._lock_for(habit_id):
            habit = engine.update_active_days(self.get_habit(owner_id, habit_id), validated)
            record = self.store.update(habit.id, {"active_days": habit.active_days})
        return self._updated(habit, record)

    def reset_stats(self, owner_id: Optional[str], habit_id: RecordId) -> Habit:
        """Clear history and restart tracking today"""
        with self._lock_for(habit_id):
            habit = self.get_habit(owner_id, habit_id)
            patch = engine.reset_stats(habit, self.clock.today())
            record = self.store.update(habit.id, {
                "history": [],
                "tracking_start_date": patch["tracking_start_date"].isoformat(),
            })
        logger.info(f"Reset stats for habit '{habit.name}' (ID: {habit.id})")
        return self._updated(habit, record)

    def mark_missed(self, owner_id: Optional[str] = None) -> int:
        """
        Record yesterday as failed for every scheduled habit left unset

        A failed write for one habit is logged and does not stop the others.

        Returns:
            Number of habits updated
        """
        today = self.clock.today()
        updated = 0

        for habit in self.list_habits(owner_id):
            with self._lock_for(habit.id):
                # Re-read under the lock so a concurrent cycle is not overwritten
                try:
                    current = self.get_habit(None, habit.id)
                except HabitNotFoundError:
                    continue

                changed = engine.mark_missed([current], today)
                if not changed:
                    continue

                try:
                    self.store.update(current.id, {"history": serialize_history(changed[0].history)})
                    updated += 1
                    logger.info(f"[MARK MISSED] Marked '{current.name}' as failed for yesterday")
                except DatabaseError as e:
                    logger.error(f"[MARK MISSED] Failed to update habit {current.id}: {e}")

        return updated

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_days(days: Optional[Iterable[int]]) -> List[int]:
        if days is None:
            return normalize_active_days(None)
        days = list(days)
        if not days:
            raise InvalidHabitDataError("Select at least one active day")
        try:
            return normalize_active_days(days)
        except ValueError as e:
            raise InvalidHabitDataError(str(e))

    def _updated(self, habit: Habit, record: Dict[str, Any]) -> Habit:
        # The store returns {} when the record vanished between read and write
        if not record:
            raise HabitNotFoundError(f"Habit '{habit.id}' not found")
        return self._to_habit(record)
