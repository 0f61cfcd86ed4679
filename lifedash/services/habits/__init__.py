"""
Habits module - Core habit tracking functionality
"""
from . import history
from . import engine
from . import analytics
from . import repository
from . import service

# Export commonly used functions for convenience
from .engine import (
    get_status_for_date,
    get_today_status,
    next_status,
    cycle_status,
    is_active_day,
    is_today_active,
    get_weekly_status,
    calculate_streak,
    calculate_success_rate,
    mark_missed,
    reset_stats,
    update_active_days,
)

from .history import normalize_history, serialize_history

from .repository import RecordStore, SupabaseRecordStore, InMemoryRecordStore

from .service import HabitService

__all__ = [
    # Modules
    'history',
    'engine',
    'analytics',
    'repository',
    'service',

    # Engine functions
    'get_status_for_date',
    'get_today_status',
    'next_status',
    'cycle_status',
    'is_active_day',
    'is_today_active',
    'get_weekly_status',
    'calculate_streak',
    'calculate_success_rate',
    'mark_missed',
    'reset_stats',
    'update_active_days',

    # History normalization
    'normalize_history',
    'serialize_history',

    # Record stores
    'RecordStore',
    'SupabaseRecordStore',
    'InMemoryRecordStore',

    # Service
    'HabitService',
]
