# backend/investment_tracker/jobs/scheduler.py
"""
APScheduler setup for background jobs.

Jobs:
1. price_refresh - every PRICE_REFRESH_INTERVAL_SECONDS (default 300)
   - Fetches a new quote for every held asset and records it

Failures are tracked per job over a sliding window. A job that fails
JOB_FAILURE_THRESHOLD times within JOB_FAILURE_WINDOW_HOURS is logged at
ERROR level; earlier failures are logged as warnings. A successful run
clears the job's failure history.

The scheduler runs in a background thread; jobs use their own database
sessions and never share one with request handlers.
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from investment_tracker.config import settings

logger = logging.getLogger(__name__)

PRICE_REFRESH_JOB_ID = "price_refresh"

# Global scheduler instance
scheduler: BackgroundScheduler | None = None

# Job failure tracking (job_id -> list of failure timestamps)
_job_failures: dict[str, list[datetime]] = defaultdict(list)


def job_listener(event) -> None:
    """Listen to job execution events and track failures."""
    if event.exception:
        job_id = event.job_id
        failure_time = datetime.now()

        _job_failures[job_id].append(failure_time)

        cutoff = failure_time - timedelta(hours=settings.job_failure_window_hours)
        _job_failures[job_id] = [ft for ft in _job_failures[job_id] if ft > cutoff]

        recent_failures = len(_job_failures[job_id])
        if recent_failures >= settings.job_failure_threshold:
            logger.error(
                f"Job '{job_id}' has failed {recent_failures} times in the last "
                f"{settings.job_failure_window_hours} hour(s). Last error: {event.exception}"
            )
        else:
            logger.warning(
                f"Job '{job_id}' failed (failure {recent_failures}/"
                f"{settings.job_failure_threshold}): {event.exception}"
            )
    elif event.job_id in _job_failures:
        _job_failures[event.job_id].clear()


def init_scheduler() -> BackgroundScheduler:
    """Create the scheduler and register jobs. Does not start it."""
    global scheduler

    from investment_tracker.jobs.price_refresh import run_price_refresh

    scheduler = BackgroundScheduler()
    scheduler.add_listener(job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    # Only one refresh at a time; a slow cycle skips the overlapping run
    scheduler.add_job(
        run_price_refresh,
        IntervalTrigger(seconds=settings.price_refresh_interval_seconds),
        id=PRICE_REFRESH_JOB_ID,
        name="Price Refresh",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )

    logger.info(
        f"Scheduler initialized (price refresh every "
        f"{settings.price_refresh_interval_seconds}s)"
    )
    return scheduler


def start_scheduler() -> None:
    """Start the scheduler."""
    if scheduler and not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")


def stop_scheduler(wait: bool = True) -> None:
    """Stop the scheduler, letting a running job finish when wait is True."""
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=wait)
        logger.info("Scheduler stopped")


def get_job_health_status() -> dict:
    """Get health status of all scheduled jobs."""
    if not scheduler:
        return {}

    status = {}
    for job in scheduler.get_jobs():
        recent_failures = len(_job_failures.get(job.id, []))
        next_run = getattr(job, "next_run_time", None)
        status[job.id] = {
            "name": job.name,
            "next_run": next_run.isoformat() if next_run else None,
            "recent_failures": recent_failures,
            "healthy": recent_failures < settings.job_failure_threshold,
        }
    return status
