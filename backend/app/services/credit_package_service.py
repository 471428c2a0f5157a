# backend/app/services/credit_package_service.py
"""
Credit Package Service for the CoachPlanner platform.

Keeps two ledgers in step: each package's ``remaining_amount`` and the
membership's cached ``credits`` total. Every mutation here changes both by
the same amount inside the caller's transaction.
"""

from datetime import datetime, timedelta
import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import NotificationType
from ..core.exceptions import NotFoundException
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.booking import Booking
from ..models.credit_package import CreditPackage
from ..models.organization import Membership
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class CreditPackageService(BaseService):
    """Grant, list and restore class credits."""

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

    @BaseService.measure_operation("grant_package")
    def grant_package(
        self,
        organization_id: str,
        student_id: str,
        amount: int,
        days_valid: int,
        name: str,
    ) -> CreditPackage:
        """
        Sell a package of ``amount`` credits valid for ``days_valid`` days.

        Raises:
            NotFoundException: If the student is not a member of the organization
        """
        with self.transaction():
            membership = self.membership_repository.get_for_user_for_update(
                student_id, organization_id
            )
            if not membership:
                raise NotFoundException(
                    "Student is not a member of this organization", code="MEMBERSHIP_NOT_FOUND"
                )

            package = self.credit_package_repository.create(
                membership_id=membership.id,
                name=name,
                initial_amount=amount,
                remaining_amount=amount,
                expires_at=utc_now() + timedelta(days=days_valid),
            )
            membership.credits = (membership.credits or 0) + amount
            self.membership_repository.flush()

            self.notification_service.create(
                user_id=student_id,
                title="Credits added",
                message=f"{amount} credits were added to your account ({name}).",
                type=NotificationType.SUCCESS,
                organization_id=organization_id,
            )

        self.logger.info(
            "Credit package granted",
            extra={
                "organization_id": organization_id,
                "student_id": student_id,
                "package_id": package.id,
                "amount": amount,
                "days_valid": days_valid,
            },
        )
        return package

    def list_for_student(self, organization_id: str, student_id: str) -> List[CreditPackage]:
        """Package history for a student, newest first; empty for non-members."""
        membership = self.membership_repository.get_for_user(student_id, organization_id)
        if not membership:
            return []
        return self.credit_package_repository.list_for_membership(membership.id)

    def restore_credit(
        self,
        booking: Booking,
        membership: Membership,
        now: Optional[datetime] = None,
        allow_expired: bool = False,
    ) -> bool:
        """
        Give back the credit a booking consumed, to the package that paid for it.

        A package already swept as expired never takes credits back. Without
        ``allow_expired`` a package past its expiry date doesn't either.
        Does not commit.

        Returns:
            True if the credit was returned
        """
        if booking.credit_package_id is None:
            return False
        package = self.credit_package_repository.get_for_update(booking.credit_package_id)
        if package is None or package.expired_processed_at is not None:
            return False
        if not allow_expired and ensure_utc(package.expires_at) <= (now or utc_now()):
            return False
        if package.remaining_amount >= package.initial_amount:
            return False

        package.remaining_amount += 1
        membership.credits = (membership.credits or 0) + 1
        self.credit_package_repository.flush()
        return True
