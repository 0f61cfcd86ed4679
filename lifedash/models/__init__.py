"""
Pydantic models for the application
"""
from lifedash.models.habit import (
    HabitStatus,
    HistoryEntry,
    Habit,
    DayStatus,
    SuccessRate,
    HabitOverview,
    AddHabitRequest,
    UpdateActiveDaysRequest,
    CycleStatusRequest
)
from lifedash.models.analytics import DailyCompletion, AnalyticsSummary

__all__ = [
    "HabitStatus",
    "HistoryEntry",
    "Habit",
    "DayStatus",
    "SuccessRate",
    "HabitOverview",
    "AddHabitRequest",
    "UpdateActiveDaysRequest",
    "CycleStatusRequest",
    "DailyCompletion",
    "AnalyticsSummary"
]
