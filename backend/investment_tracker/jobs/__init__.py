# backend/investment_tracker/jobs/__init__.py
"""
Background jobs.

- scheduler: APScheduler setup, failure tracking, start/stop
- price_refresh: periodic quote refresh for held assets
"""

from investment_tracker.jobs.scheduler import (
    get_job_health_status,
    init_scheduler,
    start_scheduler,
    stop_scheduler,
)

__all__ = [
    "init_scheduler",
    "start_scheduler",
    "stop_scheduler",
    "get_job_health_status",
]
