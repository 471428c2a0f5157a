# backend/app/services/credit_maintenance_service.py
"""
Daily credit maintenance.

Runs once a day (Celery beat) or on demand from the CLI:

1. Packages past their expiry date that still hold credits are processed:
   the unused credits leave the membership balance and the student is told.
2. Packages about to expire get a single reminder.
3. Each affected organization owner receives one summary.

Stamps on the package rows make the sweep idempotent: a second run on the
same day finds nothing left to do.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import NotificationType
from ..core.timezone_utils import ensure_utc, utc_now
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


@dataclass
class MaintenanceResult:
    """Counters reported by a maintenance run."""

    expired_packages: int = 0
    credits_forfeited: int = 0
    expiry_warnings: int = 0
    owner_summaries: int = 0
    dry_run: bool = False
    ran_at: Optional[str] = None
    organizations: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CreditMaintenanceService(BaseService):
    """Expires lapsed credit packages and warns about upcoming expiries."""

    def __init__(
        self,
        db: Session,
        credit_package_repository: Any | None = None,
        membership_repository: Any | None = None,
        notification_service: Optional[NotificationService] = None,
    ) -> None:
        super().__init__(db)
        self.credit_package_repository = (
            credit_package_repository or RepositoryFactory.create_credit_package_repository(db)
        )
        self.membership_repository = (
            membership_repository or RepositoryFactory.create_membership_repository(db)
        )
        self.notification_service = notification_service or NotificationService(db)

    @BaseService.measure_operation("daily_credit_maintenance")
    def run(self, now: Optional[datetime] = None, dry_run: bool = False) -> Dict[str, Any]:
        """
        Process expired packages, send expiry reminders and owner summaries.

        Args:
            now: Reference instant (defaults to the current time)
            dry_run: Count what would happen without writing anything

        Returns:
            Counters describing the run
        """
        now = ensure_utc(now) if now else utc_now()
        result = MaintenanceResult(dry_run=dry_run, ran_at=now.isoformat())
        self.logger.info("Starting daily credit maintenance", extra={"dry_run": dry_run})

        if dry_run:
            self._expire_packages(now, result, write=False)
            self._warn_expiring(now, result, write=False)
        else:
            with self.transaction():
                owners = self._expire_packages(now, result, write=True)
                self._warn_expiring(now, result, write=True)
                self._notify_owners(owners, result)

        self.logger.info(
            "Daily credit maintenance finished",
            extra={
                "expired_packages": result.expired_packages,
                "credits_forfeited": result.credits_forfeited,
                "expiry_warnings": result.expiry_warnings,
                "owner_summaries": result.owner_summaries,
                "dry_run": dry_run,
            },
        )
        return result.to_dict()

    def _expire_packages(
        self, now: datetime, result: MaintenanceResult, write: bool
    ) -> Dict[str, str]:
        """Returns organization id -> owner id for organizations that lost credits."""
        owners: Dict[str, str] = {}
        for package in self.credit_package_repository.list_expired_unprocessed(now):
            lost = package.remaining_amount
            membership = package.membership
            organization = membership.organization

            result.expired_packages += 1
            result.credits_forfeited += lost
            org_counts = result.organizations.setdefault(
                organization.id, {"expired_packages": 0, "credits_forfeited": 0}
            )
            org_counts["expired_packages"] += 1
            org_counts["credits_forfeited"] += lost
            owners[organization.id] = organization.owner_id

            self.logger.warning(
                "Credit package expired with unused credits",
                extra={
                    "package_id": package.id,
                    "membership_id": membership.id,
                    "organization_id": organization.id,
                    "credits_lost": lost,
                },
            )
            if not write:
                continue

            locked = self.membership_repository.get_for_update(membership.id)
            locked.credits = max(0, (locked.credits or 0) - lost)
            package.expired_processed_at = now
            self.notification_service.create(
                user_id=membership.user_id,
                title="Credits expired",
                message=(
                    f"Your package '{package.name}' expired with {lost} unused "
                    f"credit{'s' if lost != 1 else ''}."
                ),
                type=NotificationType.WARNING,
                organization_id=organization.id,
            )
        if write:
            self.credit_package_repository.flush()
        return owners

    def _warn_expiring(self, now: datetime, result: MaintenanceResult, write: bool) -> None:
        until = now + timedelta(days=settings.credit_expiry_warning_days)
        for package in self.credit_package_repository.list_expiring_unwarned(now, until):
            result.expiry_warnings += 1
            if not write:
                continue
            membership = package.membership
            expires_at = ensure_utc(package.expires_at)
            self.notification_service.create(
                user_id=membership.user_id,
                title="Credits expiring soon",
                message=(
                    f"{package.remaining_amount} credits from '{package.name}' expire on "
                    f"{expires_at:%Y-%m-%d}. Book a class before then."
                ),
                type=NotificationType.INFO,
                organization_id=membership.organization_id,
            )
            package.expiry_warning_sent_at = now
        if write:
            self.credit_package_repository.flush()

    def _notify_owners(self, owners: Dict[str, str], result: MaintenanceResult) -> None:
        for organization_id, owner_id in owners.items():
            counts = result.organizations[organization_id]
            self.notification_service.create(
                user_id=owner_id,
                title="Daily credit summary",
                message=(
                    f"{counts['expired_packages']} credit package(s) expired with "
                    f"{counts['credits_forfeited']} unused credit(s) in total."
                ),
                type=NotificationType.INFO,
                organization_id=organization_id,
            )
            result.owner_summaries += 1
