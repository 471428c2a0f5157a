# backend/app/tasks/maintenance_tasks.py
"""
Celery task wrapping the daily credit maintenance sweep.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from app.database import SessionLocal
from app.services.credit_maintenance_service import CreditMaintenanceService
from app.tasks.beat_schedule import CREDIT_MAINTENANCE_TASK
from app.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(
    name=CREDIT_MAINTENANCE_TASK,
    bind=True,
    max_retries=3,
    default_retry_delay=60,
)
def run_credit_maintenance(self: Any, dry_run: bool = False) -> Dict[str, Any]:
    """Expire lapsed packages and send expiry reminders."""
    db = SessionLocal()
    try:
        result = CreditMaintenanceService(db).run(dry_run=dry_run)
        logger.info("Credit maintenance task completed", extra={"result": result})
        return result
    except Exception as exc:
        logger.exception("Credit maintenance task failed", extra={"dry_run": dry_run})
        raise self.retry(exc=exc)
    finally:
        db.close()
