"""APScheduler jobs: periodic sweep of expired rate-limit windows."""

import pytz
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from erp_import.config import get_settings
from erp_import.core.rate_limiter import RateLimiter

settings = get_settings()
logger = structlog.get_logger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

scheduler = AsyncIOScheduler(timezone=tz)


async def rate_limit_sweep_job(limiter: RateLimiter):
    """Drop expired windows so the map only holds active callers."""
    removed = limiter.sweep()
    if removed:
        logger.info("Rate limit sweep", removed=removed, remaining=len(limiter))


def start_scheduler(limiter: RateLimiter):
    """Start the APScheduler with the rate-limit sweep job."""
    scheduler.add_job(
        rate_limit_sweep_job,
        trigger=IntervalTrigger(minutes=settings.RATE_LIMIT_SWEEP_MINUTES, timezone=tz),
        args=[limiter],
        id="rate_limit_sweep",
        name=f"Rate Limit Sweep (Every {settings.RATE_LIMIT_SWEEP_MINUTES} mins)",
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Scheduler started", sweep_minutes=settings.RATE_LIMIT_SWEEP_MINUTES, timezone=settings.TIMEZONE)


def stop_scheduler():
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
