"""
Pydantic models for habits
"""
from datetime import date, datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional, Union

from lifedash.core.constants import ALL_DAYS

# Alias so fields named "date" do not shadow the type
DateType = date


class HabitStatus(str, Enum):
    """Stored per-day status. Neutral is the absence of an entry."""
    COMPLETED = "completed"
    FAILED = "failed"


class HistoryEntry(BaseModel):
    """Status recorded for a single local calendar date"""
    model_config = ConfigDict(frozen=True)

    date: DateType
    status: HabitStatus


def normalize_active_days(days: Optional[List[int]]) -> List[int]:
    """
    Sort and de-duplicate weekday indices

    Args:
        days: Weekday indices (0=Sunday..6=Saturday) or None for every day

    Returns:
        Sorted list of unique weekday indices

    Raises:
        ValueError: If an index falls outside 0..6
    """
    if days is None:
        return list(ALL_DAYS)
    result = set()
    for day in days:
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            raise ValueError(f"Invalid weekday index '{day}'. Use 0 (Sunday) to 6 (Saturday)")
        result.add(day)
    return sorted(result)


class Habit(BaseModel):
    """A tracked habit as read from the record store"""
    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    name: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    active_days: List[int] = Field(default_factory=lambda: list(ALL_DAYS))
    history: List[HistoryEntry] = Field(default_factory=list)
    tracking_start_date: Optional[date] = None
    created_at: Optional[datetime] = None

    @field_validator("active_days", mode="before")
    @classmethod
    def validate_active_days(cls, v: Any) -> List[int]:
        """Missing schedule means every day; an empty one is kept as-is"""
        return normalize_active_days(v)

    @field_validator("history", mode="before")
    @classmethod
    def validate_history(cls, v: Any) -> List[HistoryEntry]:
        """Normalize legacy and structured history items into HistoryEntry"""
        # Imported here to avoid a models <-> services import cycle
        from lifedash.services.habits.history import normalize_history
        return normalize_history(v)

    @field_validator("tracking_start_date", mode="before")
    @classmethod
    def validate_tracking_start_date(cls, v: Any) -> Any:
        """Accept full timestamps by keeping their date portion"""
        if isinstance(v, str) and v.strip():
            return v.strip()[:10]
        if isinstance(v, str):
            return None
        return v


class DayStatus(BaseModel):
    """One cell of the Sunday-to-Saturday weekly grid"""
    day_index: int
    day_name: str
    date: DateType
    is_active: bool
    is_future: bool
    is_today: bool
    status: Optional[HabitStatus] = None


class SuccessRate(BaseModel):
    """Completion percentage since tracking started"""
    rate: Optional[int] = None
    completed_days: int = 0
    total_days: int = 0
    start_date: Optional[date] = None


class HabitOverview(BaseModel):
    """Everything the habits page shows for a single habit"""
    habit: Habit
    today_status: Optional[HabitStatus] = None
    is_today_active: bool
    streak: int
    weekly: List[DayStatus]
    success_rate: SuccessRate


def _check_request_days(v: List[int]) -> List[int]:
    if not v:
        raise ValueError("Select at least one active day")
    return normalize_active_days(v)


class AddHabitRequest(BaseModel):
    """Request model for adding a new habit"""
    name: str = Field(..., min_length=1, max_length=200, description="Habit name")
    active_days: List[int] = Field(
        default_factory=lambda: list(ALL_DAYS),
        description="Weekday indices, 0=Sunday to 6=Saturday"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject names that are only whitespace"""
        if not v.strip():
            raise ValueError("Habit name cannot be blank")
        return v.strip()

    @field_validator("active_days")
    @classmethod
    def validate_active_days(cls, v: List[int]) -> List[int]:
        """Require at least one valid weekday"""
        return _check_request_days(v)


class UpdateActiveDaysRequest(BaseModel):
    """Request model for changing a habit's weekly schedule"""
    active_days: List[int] = Field(..., description="Weekday indices, 0=Sunday to 6=Saturday")

    @field_validator("active_days")
    @classmethod
    def validate_active_days(cls, v: List[int]) -> List[int]:
        """Require at least one valid weekday"""
        return _check_request_days(v)


class CycleStatusRequest(BaseModel):
    """Request model for advancing a day's status"""
    date: Optional[DateType] = Field(None, description="Day to cycle (YYYY-MM-DD), defaults to today")
