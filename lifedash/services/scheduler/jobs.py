"""
Scheduler Job Definitions
Contains the scheduled job functions for habit maintenance
"""
from typing import Optional
import logging

from lifedash.core import dependencies
from lifedash.services.habits.service import HabitService

logger = logging.getLogger(__name__)


def mark_missed_habits(service: Optional[HabitService] = None) -> int:
    """
    Record yesterday as failed for every scheduled habit that was left unset
    Called once a day shortly after local midnight

    Args:
        service: Optional HabitService, defaults to the shared one

    Returns:
        Number of habits updated (0 if the job failed)
    """
    try:
        logger.info("[SCHEDULER] Marking missed habits for yesterday...")

        service = service or dependencies.get_habit_service()
        updated = service.mark_missed()

        if updated > 0:
            logger.info(f"[SCHEDULER] Marked {updated} habit(s) as missed")
        else:
            logger.info("[SCHEDULER] No missed habits found")
        return updated

    except Exception as e:
        logger.error(f"[SCHEDULER] Error in mark_missed_habits: {e}", exc_info=True)
        return 0
