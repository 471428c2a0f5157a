# backend/app/tasks/__init__.py
"""
Celery tasks package for CoachPlanner.

Run the worker and scheduler with:
    celery -A app.tasks worker -Q maintenance,celery
    celery -A app.tasks beat
"""

from app.tasks.celery_app import BaseTask, celery_app
from app.tasks.maintenance_tasks import run_credit_maintenance

__all__ = [
    "celery_app",
    "BaseTask",
    "run_credit_maintenance",
]
