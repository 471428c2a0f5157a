#!/usr/bin/env python
# backend/app/commands/maintenance.py
"""
Credit maintenance commands for CoachPlanner.

Usage:
    python -m app.commands.maintenance run              # Run the sweep now
    python -m app.commands.maintenance run --dry-run    # Report without writing
    python -m app.commands.maintenance run --async      # Submit to Celery
    python -m app.commands.maintenance status           # Show the last run
"""

import argparse
from datetime import datetime, timezone
import json
import logging
import sys
from typing import Any, Callable, Dict, List, Optional

from redis import Redis
from sqlalchemy.orm import Session

from app.core.config import settings
from app.database import SessionLocal
from app.services.credit_maintenance_service import CreditMaintenanceService

logger = logging.getLogger(__name__)

LAST_RUN_KEY = "maintenance:credits:last_run"
LAST_RUN_TTL_SECONDS = 86400 * 7


class MaintenanceCommand:
    """Credit maintenance command handler."""

    def __init__(
        self,
        redis_client: Optional[Redis] = None,
        session_factory: Callable[[], Session] = SessionLocal,
    ) -> None:
        self._redis_client = redis_client
        self.session_factory = session_factory

    @property
    def redis_client(self) -> Redis:
        if self._redis_client is None:
            self._redis_client = Redis.from_url(settings.redis_url)
        return self._redis_client

    def run_maintenance(self, dry_run: bool = False, async_mode: bool = False) -> Dict[str, Any]:
        """
        Run the credit maintenance sweep.

        Args:
            dry_run: Count what would change without writing
            async_mode: Submit the Celery task instead of running inline

        Returns:
            dict: Execution result
        """
        if async_mode:
            from app.tasks.maintenance_tasks import run_credit_maintenance

            task = run_credit_maintenance.apply_async(kwargs={"dry_run": dry_run})
            self._store_last_run_info(
                {
                    "task_id": task.id,
                    "started_at": datetime.now(timezone.utc).isoformat(),
                    "mode": "async",
                    "status": "submitted",
                }
            )
            return {
                "status": "submitted",
                "task_id": task.id,
                "message": f"Maintenance task submitted. Task ID: {task.id}",
            }

        db = self.session_factory()
        try:
            result = CreditMaintenanceService(db).run(dry_run=dry_run)
        except Exception as e:
            logger.error(f"Credit maintenance failed: {e}", exc_info=True)
            self._store_last_run_info(
                {
                    "failed_at": datetime.now(timezone.utc).isoformat(),
                    "error": str(e),
                    "mode": "sync",
                    "status": "failed",
                }
            )
            return {"status": "failed", "error": str(e)}
        finally:
            db.close()

        run_info = {"status": "success", "mode": "sync", **result}
        if not dry_run:
            self._store_last_run_info(run_info)
        return run_info

    def check_status(self) -> Dict[str, Any]:
        raw = self.redis_client.get(LAST_RUN_KEY)
        if not raw:
            return {"status": "no_data", "message": "No maintenance run information found."}
        return json.loads(raw)

    def _store_last_run_info(self, info: Dict[str, Any]) -> None:
        try:
            self.redis_client.set(LAST_RUN_KEY, json.dumps(info), ex=LAST_RUN_TTL_SECONDS)
        except Exception as e:
            # Status record is informational only.
            logger.warning(f"Could not store maintenance run info: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CoachPlanner credit maintenance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    run_parser = subparsers.add_parser("run", help="Expire packages and send reminders")
    run_parser.add_argument(
        "--dry-run", action="store_true", help="Report what would change without writing"
    )
    run_parser.add_argument(
        "--async", action="store_true", dest="async_mode", help="Run asynchronously via Celery"
    )

    subparsers.add_parser("status", help="Show the last run")
    return parser


def main(argv: Optional[List[str]] = None, command: Optional[MaintenanceCommand] = None) -> int:
    """Main entry point for the maintenance command."""
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    cmd = command or MaintenanceCommand()

    if args.command == "run":
        result = cmd.run_maintenance(dry_run=args.dry_run, async_mode=args.async_mode)
        print(json.dumps(result, indent=2, default=str))
        return 1 if result["status"] == "failed" else 0

    if args.command == "status":
        print(json.dumps(cmd.check_status(), indent=2, default=str))
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
