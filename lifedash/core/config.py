"""
Application configuration and environment variables
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    """Read a boolean flag such as 'true', '1' or 'no' from the environment"""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables"""

    # Database
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")
    HABITS_TABLE: str = os.getenv("HABITS_TABLE", "habits")

    # 'supabase' or 'memory'; falls back to memory when Supabase is not configured
    STORAGE_BACKEND: str = os.getenv(
        "STORAGE_BACKEND", "supabase" if os.getenv("SUPABASE_URL") else "memory"
    ).lower()

    # Local calendar used for "today"
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "America/Los_Angeles")

    # Daily missed-day backfill
    SCHEDULER_ENABLED: bool = _get_bool("SCHEDULER_ENABLED", True)
    MARK_MISSED_HOUR: int = int(os.getenv("MARK_MISSED_HOUR", "0"))
    MARK_MISSED_MINUTE: int = int(os.getenv("MARK_MISSED_MINUTE", "5"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# Create a global settings instance
settings = Settings()
