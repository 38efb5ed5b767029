from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from core.config import settings
from core.ledger import HabitLedger
from core.time_utils import get_current_time

scheduler = AsyncIOScheduler()

async def run_daily_maintenance(ledger: HabitLedger):
    """
    Catches day rollovers without a restart.

    The profile streak is only recomputed when a habit is toggled, so after
    midnight it can still show yesterday's value. This job:
    1. Recomputes the profile streak for the current day.
    2. Ends experiments whose duration has elapsed.
    """
    now = get_current_time()
    logger.info(f"[{now}] Running ledger maintenance...")
    try:
        ledger.refresh(now)
    except Exception:
        logger.exception("Ledger maintenance failed")
        return
    logger.info(
        f"[{now}] Maintenance completed. Current streak: {ledger.profile.current_streak}, "
        f"active experiments: {len(ledger.active_experiments)}"
    )

def start_scheduler(ledger: HabitLedger):
    # Check every hour by default
    scheduler.add_job(
        run_daily_maintenance,
        IntervalTrigger(hours=settings.MAINTENANCE_INTERVAL_HOURS),
        args=[ledger],
        id="ledger_maintenance",
        replace_existing=True,
    )
    scheduler.start()

def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
