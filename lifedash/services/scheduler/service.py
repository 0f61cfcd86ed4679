"""
Scheduler Service - Background scheduler lifecycle management
Handles starting, stopping, and configuring the APScheduler instance
"""
import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from lifedash.core.config import settings
from lifedash.core.constants import MARK_MISSED_JOB_ID
from lifedash.utils.timezone import get_local_tz
from .jobs import mark_missed_habits

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = None


def start_scheduler():
    """
    Start the background scheduler
    Runs the missed-day backfill once a day in the local timezone
    """
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already running")
        return

    tz = get_local_tz()
    scheduler = BackgroundScheduler(timezone=tz)

    # Yesterday is final once the local day has rolled over
    scheduler.add_job(
        func=mark_missed_habits,
        trigger=CronTrigger(
            hour=settings.MARK_MISSED_HOUR,
            minute=settings.MARK_MISSED_MINUTE,
            timezone=tz
        ),
        id=MARK_MISSED_JOB_ID,
        name='Mark missed habits for yesterday',
        replace_existing=True
    )

    scheduler.start()
    logger.info(
        f"Scheduler started - marking missed habits daily at "
        f"{settings.MARK_MISSED_HOUR:02d}:{settings.MARK_MISSED_MINUTE:02d} ({tz.zone})"
    )


def stop_scheduler():
    """Stop the background scheduler"""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")
