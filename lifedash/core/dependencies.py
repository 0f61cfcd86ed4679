"""
Dependency injection for shared clients and resources
"""
from functools import lru_cache
from supabase import create_client, Client

from lifedash.core.config import settings
from lifedash.core.exceptions import ConfigurationError
from lifedash.services.habits.repository import (
    InMemoryRecordStore,
    RecordStore,
    SupabaseRecordStore,
)
from lifedash.services.habits.service import HabitService
from lifedash.utils.timezone import get_clock


def get_supabase_client() -> Client:
    """Get Supabase client instance"""
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set to use Supabase storage")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def get_record_store() -> RecordStore:
    """Build the habit record store selected by STORAGE_BACKEND"""
    if settings.STORAGE_BACKEND == "supabase":
        return SupabaseRecordStore(get_supabase_client(), settings.HABITS_TABLE)
    if settings.STORAGE_BACKEND == "memory":
        return InMemoryRecordStore()
    raise ConfigurationError(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}'")


@lru_cache(maxsize=1)
def get_habit_service() -> HabitService:
    """Get the shared habit service (created on first use)"""
    return HabitService(get_record_store(), get_clock())
