"""
Habit Routes - Endpoints for habit tracking
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Header, HTTPException

from lifedash.core.constants import USER_ID_HEADER
from lifedash.core.dependencies import get_habit_service
from lifedash.core.exceptions import (
    HabitNotFoundError,
    InvalidHabitDataError,
    DatabaseError
)
from lifedash.models.analytics import AnalyticsSummary
from lifedash.models.habit import (
    AddHabitRequest,
    CycleStatusRequest,
    Habit,
    HabitOverview,
    UpdateActiveDaysRequest
)
from lifedash.services.habits.service import HabitService

router = APIRouter(prefix="/habits", tags=["habits"])


def get_owner_id(x_user_id: Optional[str] = Header(None, alias=USER_ID_HEADER)) -> str:
    """Owner of the records, passed by the client as X-User-Id"""
    if not x_user_id:
        raise HTTPException(status_code=401, detail=f"Missing {USER_ID_HEADER} header")
    return x_user_id


def _raise_http(e: Exception):
    if isinstance(e, HabitNotFoundError):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InvalidHabitDataError):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, DatabaseError):
        raise HTTPException(status_code=500, detail=str(e))
    raise HTTPException(status_code=500, detail=f"Unexpected error: {str(e)}")


@router.get("", response_model=List[HabitOverview])
async def list_habits(owner_id: str = Depends(get_owner_id),
                      service: HabitService = Depends(get_habit_service)):
    """Get all habits with today's status, streak, week and success rate"""
    try:
        return service.get_overview(owner_id)
    except Exception as e:
        _raise_http(e)


@router.post("", response_model=Habit, status_code=201)
async def add_habit(request: AddHabitRequest,
                    owner_id: str = Depends(get_owner_id),
                    service: HabitService = Depends(get_habit_service)):
    """Add a new habit with its weekly schedule"""
    try:
        return service.add_habit(owner_id, request.name, request.active_days)
    except Exception as e:
        _raise_http(e)


@router.get("/analytics", response_model=AnalyticsSummary)
async def get_analytics(week_offset: int = 0,
                        owner_id: str = Depends(get_owner_id),
                        service: HabitService = Depends(get_habit_service)):
    """Completion numbers across all habits for a week"""
    try:
        return service.get_analytics(owner_id, week_offset)
    except Exception as e:
        _raise_http(e)


@router.post("/mark-missed")
async def mark_missed(owner_id: str = Depends(get_owner_id),
                      service: HabitService = Depends(get_habit_service)):
    """Record yesterday as failed for scheduled habits left unset"""
    try:
        return {"status": "success", "updated": service.mark_missed(owner_id)}
    except Exception as e:
        _raise_http(e)


@router.delete("/{habit_id}")
async def delete_habit(habit_id: str,
                       owner_id: str = Depends(get_owner_id),
                       service: HabitService = Depends(get_habit_service)):
    """Delete a habit"""
    try:
        service.delete_habit(owner_id, habit_id)
        return {"status": "success", "habit_id": habit_id}
    except Exception as e:
        _raise_http(e)


@router.post("/{habit_id}/cycle", response_model=Habit)
async def cycle_status(habit_id: str,
                       request: Optional[CycleStatusRequest] = None,
                       owner_id: str = Depends(get_owner_id),
                       service: HabitService = Depends(get_habit_service)):
    """Advance a day's status: none -> completed -> failed -> none"""
    try:
        day = request.date if request else None
        return service.cycle_status(owner_id, habit_id, day)
    except Exception as e:
        _raise_http(e)


@router.put("/{habit_id}/active-days", response_model=Habit)
async def update_active_days(habit_id: str,
                             request: UpdateActiveDaysRequest,
                             owner_id: str = Depends(get_owner_id),
                             service: HabitService = Depends(get_habit_service)):
    """Change the days of the week a habit is tracked on"""
    try:
        return service.update_active_days(owner_id, habit_id, request.active_days)
    except Exception as e:
        _raise_http(e)


@router.post("/{habit_id}/reset", response_model=Habit)
async def reset_stats(habit_id: str,
                      owner_id: str = Depends(get_owner_id),
                      service: HabitService = Depends(get_habit_service)):
    """Clear a habit's history and restart tracking today"""
    try:
        return service.reset_stats(owner_id, habit_id)
    except Exception as e:
        _raise_http(e)
