"""
Pydantic models for habit analytics
"""
from datetime import date
from pydantic import BaseModel, Field
from typing import List, Optional

# Alias so fields named "date" do not shadow the type
DateType = date


class DailyCompletion(BaseModel):
    """How many habits were completed on one day"""
    date: DateType
    completed: int = 0
    total: int = 0
    rate: int = Field(0, description="Percentage of habits completed, 0-100")
    is_future: bool = False
    is_today: bool = False


class AnalyticsSummary(BaseModel):
    """Week-at-a-glance numbers across all of a user's habits"""
    today: DailyCompletion
    yesterday: DailyCompletion
    today_vs_yesterday: int
    week: List[DailyCompletion]
    week_average: int
    best_day: Optional[DailyCompletion] = None
    best_streak: int
