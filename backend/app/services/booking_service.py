# backend/app/services/booking_service.py
"""
Booking Service for the CoachPlanner platform.

Reserving a seat is the one operation where two students can race for
the same resource, so it runs in a single transaction that locks the
student's membership and the class row before counting seats.

Checks are applied in a fixed order so callers always see the most
fundamental problem first (membership, then credits, then the class,
then category rules, seats and duplicates, and finally package validity).
"""

from datetime import timedelta
import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import BookingStatus, NotificationType
from ..core.exceptions import (
    CancellationWindowClosedException,
    ClassFullException,
    ConflictException,
    InsufficientCreditsException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.booking import Booking
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .credit_package_service import CreditPackageService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class BookingService(BaseService):
    """Reserve, cancel and check in class bookings."""

    def __init__(
        self,
        db: Session,
        booking_repository: Any | None = None,
        class_session_repository: Any | None = None,
        membership_repository: Any | None = None,
        credit_package_repository: Any | None = None,
        organization_repository: Any | None = None,
        notification_service: Optional[NotificationService] = None,
        credit_package_service: Optional[CreditPackageService] = None,
    ) -> None:
        super().__init__(db)
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.class_session_repository = (
            class_session_repository or RepositoryFactory.create_class_session_repository(db)
        )
        self.membership_repository = (
            membership_repository or RepositoryFactory.create_membership_repository(db)
        )
        self.credit_package_repository = (
            credit_package_repository or RepositoryFactory.create_credit_package_repository(db)
        )
        self.organization_repository = (
            organization_repository or RepositoryFactory.create_organization_repository(db)
        )
        self.notification_service = notification_service or NotificationService(db)
        self.credit_package_service = credit_package_service or CreditPackageService(
            db,
            credit_package_repository=self.credit_package_repository,
            membership_repository=self.membership_repository,
            notification_service=self.notification_service,
        )

    @BaseService.measure_operation("create_booking")
    def create_booking(self, user_id: str, organization_id: str, class_id: str) -> Booking:
        """
        Reserve a seat in a class, paying with the soonest-expiring package.

        Raises:
            NotFoundException: No membership, or no such class in the organization
            InsufficientCreditsException: Credit balance is zero or no package is usable
            ValidationException: Class cancelled or started, or student lacks a category
            ConflictException: Category mismatch, class full or already booked
        """
        now = utc_now()
        with self.transaction():
            membership = self.membership_repository.get_for_user_for_update(
                user_id, organization_id
            )
            if not membership:
                raise NotFoundException(
                    "You are not a student of this gym", code="MEMBERSHIP_NOT_FOUND"
                )
            if (membership.credits or 0) <= 0:
                raise InsufficientCreditsException()

            session = self.class_session_repository.get_in_organization_for_update(
                class_id, organization_id
            )
            if not session:
                raise NotFoundException("Class not found", code="CLASS_NOT_FOUND")
            if session.is_cancelled:
                raise ValidationException("This class was cancelled", code="CLASS_CANCELLED")
            if ensure_utc(session.start_time) <= now:
                raise ValidationException(
                    "This class has already started or finished", code="CLASS_STARTED"
                )

            if session.category_id is not None:
                if membership.category_id is None:
                    raise ValidationException(
                        "You have no category assigned to book this class",
                        code="CATEGORY_REQUIRED",
                    )
                if membership.category_id != session.category_id:
                    raise ConflictException(
                        "This class is not in your category", code="CATEGORY_MISMATCH"
                    )

            if self.booking_repository.count_confirmed(session.id) >= session.capacity:
                raise ClassFullException(session.capacity)
            if self.booking_repository.get_confirmed_for_user(user_id, session.id):
                raise ConflictException(
                    "You are already booked into this class", code="ALREADY_BOOKED"
                )

            package = self.credit_package_repository.get_first_usable_for_update(
                membership.id, now
            )
            if not package:
                raise InsufficientCreditsException("Your credits have expired or are not valid")

            booking = self.booking_repository.create(
                user_id=user_id,
                class_session_id=session.id,
                credit_package_id=package.id,
                status=BookingStatus.CONFIRMED.value,
                created_at=now,
            )
            package.remaining_amount -= 1
            membership.credits -= 1
            self.booking_repository.flush()

            self.notification_service.create(
                user_id=user_id,
                title="Booking confirmed",
                message=(
                    f"You're booked into '{session.title}' on "
                    f"{ensure_utc(session.start_time):%Y-%m-%d %H:%M} UTC."
                ),
                type=NotificationType.SUCCESS,
                organization_id=organization_id,
            )

        self.logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "user_id": user_id,
                "class_id": class_id,
                "package_id": package.id,
                "credits_left": membership.credits,
            },
        )
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, user_id: str, organization_id: str, class_id: str) -> Booking:
        """
        Cancel the caller's booking for a class.

        The credit is returned unless its package has expired in the meantime.

        Raises:
            NotFoundException: No CONFIRMED booking for this class
            ValidationException: Class started
            CancellationWindowClosedException: Too close to the start time
        """
        now = utc_now()
        with self.transaction():
            booking = self.booking_repository.get_confirmed_for_user(user_id, class_id)
            session = (
                self.class_session_repository.get_in_organization(class_id, organization_id)
                if booking
                else None
            )
            if not booking or not session:
                raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")

            start_time = ensure_utc(session.start_time)
            if start_time <= now:
                raise ValidationException(
                    "Cannot cancel a class that already started", code="CLASS_STARTED"
                )
            organization = self.organization_repository.get_by_id(
                organization_id, load_relationships=False
            )
            window_hours = organization.cancellation_window_hours if organization else 0
            if now > start_time - timedelta(hours=window_hours):
                raise CancellationWindowClosedException(window_hours)

            membership = self.membership_repository.get_for_user_for_update(
                user_id, organization_id
            )
            booking.status = BookingStatus.CANCELLED.value
            booking.cancelled_at = now
            booking.credit_refunded = bool(
                membership
                and self.credit_package_service.restore_credit(booking, membership, now=now)
            )
            self.booking_repository.flush()

        self.logger.info(
            "Booking cancelled",
            extra={
                "booking_id": booking.id,
                "user_id": user_id,
                "class_id": class_id,
                "credit_refunded": booking.credit_refunded,
            },
        )
        return booking

    def list_my_bookings(
        self, user_id: str, organization_id: str, upcoming_only: bool = False
    ) -> List[Booking]:
        return self.booking_repository.list_confirmed_for_user(
            user_id, organization_id, starting_after=utc_now() if upcoming_only else None
        )

    @BaseService.measure_operation("mark_attended")
    def mark_attended(self, organization_id: str, booking_id: str) -> Booking:
        """
        Check a student into a class that has started.

        Raises:
            NotFoundException: Booking not in the caller's organization
            ValidationException: Booking not CONFIRMED or class not started yet
        """
        now = utc_now()
        with self.transaction():
            booking = self.booking_repository.get_in_organization(booking_id, organization_id)
            if not booking:
                raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
            if booking.status != BookingStatus.CONFIRMED.value:
                raise ValidationException(
                    "Only confirmed bookings can be marked attended",
                    code="BOOKING_NOT_CONFIRMED",
                    details={"status": booking.status},
                )
            if ensure_utc(booking.class_session.start_time) > now:
                raise ValidationException(
                    "Attendance can only be taken once the class has started",
                    code="CLASS_NOT_STARTED",
                )
            booking.status = BookingStatus.ATTENDED.value
            booking.attended_at = now
            self.booking_repository.flush()

        self.logger.info(
            "Booking attended",
            extra={"booking_id": booking_id, "organization_id": organization_id},
        )
        return booking
