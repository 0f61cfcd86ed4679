"""
Shared fixtures: a pinned clock, an in-memory record store and a service
wired to both. Nothing here touches the network.
"""
import os

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("APP_TIMEZONE", "America/Los_Angeles")

from datetime import date

import pytest

from lifedash.models.habit import Habit
from lifedash.services.habits.repository import InMemoryRecordStore
from lifedash.services.habits.service import HabitService
from lifedash.utils.timezone import FixedClock

# Wednesday
TODAY = date(2024, 6, 12)
WEEKDAYS = [1, 2, 3, 4, 5]


def make_habit(history=None, active_days=None, **fields) -> Habit:
    """Build a Habit the same way records coming out of the store are read"""
    record = {"id": "h1", "name": "Exercise", "history": history or []}
    if active_days is not None:
        record["active_days"] = active_days
    record.update(fields)
    return Habit.model_validate(record)


def completed(day: str) -> dict:
    return {"date": day, "status": "completed"}


def failed(day: str) -> dict:
    return {"date": day, "status": "failed"}


@pytest.fixture
def clock():
    return FixedClock(TODAY)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def service(store, clock):
    return HabitService(store, clock)
