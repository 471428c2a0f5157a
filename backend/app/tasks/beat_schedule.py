# backend/app/tasks/beat_schedule.py
"""
Celery Beat schedule for CoachPlanner.

The credit maintenance sweep runs every night at midnight in
``settings.maintenance_timezone`` (UTC by default).
"""

import os
from typing import Any

from celery.schedules import crontab

CREDIT_MAINTENANCE_TASK = "maintenance.run_credit_maintenance"


def _parse_cron_expression(expression: str) -> crontab:
    """Parse a five-field cron expression into a crontab."""
    parts = expression.split()
    if len(parts) != 5:
        raise ValueError(f"Invalid cron expression: {expression!r}")
    minute, hour, day_of_month, month_of_year, day_of_week = parts
    return crontab(
        minute=minute,
        hour=hour,
        day_of_month=day_of_month,
        month_of_year=month_of_year,
        day_of_week=day_of_week,
    )


def get_beat_schedule() -> dict[str, dict[str, Any]]:
    """
    Build the beat schedule.

    ``CREDIT_MAINTENANCE_CRON`` overrides the default midnight run.
    """
    cron = os.getenv("CREDIT_MAINTENANCE_CRON")
    schedule = _parse_cron_expression(cron) if cron else crontab(hour=0, minute=0)
    return {
        "nightly-credit-maintenance": {
            "task": CREDIT_MAINTENANCE_TASK,
            "schedule": schedule,
            "args": [],
            "kwargs": {},
            "options": {"queue": "maintenance", "priority": 2},
        },
    }
