# backend/app/services/class_session_service.py
"""
Class Session Service for the CoachPlanner platform.

Handles the class calendar: creation, the staff and student views of the
schedule, deletion, cancellation with credit refunds and copying a week of
classes onto another week.
"""

from datetime import date, datetime, timedelta
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
import pytz

from ..core.constants import DAYS_PER_WEEK
from ..core.enums import BookingStatus, NotificationType
from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..core.timezone_utils import ensure_utc, get_org_timezone, local_midnight_utc, utc_now
from ..models.class_session import ClassSession
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .credit_package_service import CreditPackageService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


def _category_summary(session: ClassSession) -> Optional[Dict[str, Any]]:
    if session.category is None:
        return None
    return {"id": session.category.id, "name": session.category.name}


class ClassSessionService(BaseService):
    """Class calendar operations for one organization."""

    def __init__(
        self,
        db: Session,
        class_session_repository: Any | None = None,
        booking_repository: Any | None = None,
        category_repository: Any | None = None,
        organization_repository: Any | None = None,
        membership_repository: Any | None = None,
        notification_service: Optional[NotificationService] = None,
        credit_package_service: Optional[CreditPackageService] = None,
    ) -> None:
        super().__init__(db)
        self.class_session_repository = (
            class_session_repository or RepositoryFactory.create_class_session_repository(db)
        )
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.category_repository = (
            category_repository or RepositoryFactory.create_category_repository(db)
        )
        self.organization_repository = (
            organization_repository or RepositoryFactory.create_organization_repository(db)
        )
        self.membership_repository = (
            membership_repository or RepositoryFactory.create_membership_repository(db)
        )
        self.notification_service = notification_service or NotificationService(db)
        self.credit_package_service = credit_package_service or CreditPackageService(
            db, notification_service=self.notification_service
        )

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------

    def _to_item(self, session: ClassSession, booked_count: int) -> Dict[str, Any]:
        return {
            "id": session.id,
            "title": session.title,
            "description": session.description,
            "start_time": ensure_utc(session.start_time),
            "end_time": ensure_utc(session.end_time),
            "capacity": session.capacity,
            "is_cancelled": bool(session.is_cancelled),
            "cancelled_at": ensure_utc(session.cancelled_at) if session.cancelled_at else None,
            "category_id": session.category_id,
            "category": _category_summary(session),
            "instructor_id": session.instructor_id,
            "instructor_name": session.instructor.full_name if session.instructor else None,
            "booked_count": booked_count,
        }

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @BaseService.measure_operation("create_class")
    def create_class(
        self,
        organization_id: str,
        instructor_id: str,
        title: str,
        start_time: datetime,
        end_time: datetime,
        capacity: int,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Schedule a new class taught by ``instructor_id``.

        Raises:
            ValidationException: On an inverted or past time range, or a
                category from another organization
        """
        start_time = ensure_utc(start_time)
        end_time = ensure_utc(end_time)
        if start_time >= end_time:
            raise ValidationException(
                "Start time must be before end time", code="INVALID_TIME_RANGE"
            )
        if start_time < utc_now():
            raise ValidationException("Cannot schedule a class in the past", code="CLASS_IN_PAST")
        if category_id is not None and not self.category_repository.get_in_organization(
            category_id, organization_id
        ):
            raise ValidationException("Selected category is not valid", code="INVALID_CATEGORY")

        with self.transaction():
            session = self.class_session_repository.create(
                organization_id=organization_id,
                category_id=category_id,
                instructor_id=instructor_id,
                title=title,
                description=description,
                start_time=start_time,
                end_time=end_time,
                capacity=capacity,
            )

        self.logger.info(
            "Class created",
            extra={
                "organization_id": organization_id,
                "class_id": session.id,
                "start_time": start_time.isoformat(),
            },
        )
        created = self.class_session_repository.get_in_organization(session.id, organization_id)
        return self._to_item(created, 0)

    @BaseService.measure_operation("delete_class")
    def delete_class(self, organization_id: str, class_id: str) -> None:
        """
        Delete a class that nobody is booked into.

        Raises:
            ConflictException: If CONFIRMED bookings exist
        """
        session = self._get_or_404(organization_id, class_id)
        confirmed = self.booking_repository.count_confirmed(session.id)
        if confirmed:
            raise ConflictException(
                "Class has confirmed bookings; cancel it instead",
                code="CLASS_HAS_BOOKINGS",
                details={"confirmed_bookings": confirmed},
            )
        with self.transaction():
            self.class_session_repository.delete(session.id)
        self.logger.info(
            "Class deleted", extra={"organization_id": organization_id, "class_id": class_id}
        )

    @BaseService.measure_operation("cancel_class")
    def cancel_class(self, organization_id: str, class_id: str) -> Dict[str, Any]:
        """
        Cancel a class and refund everyone booked into it.

        Each CONFIRMED booking is cancelled, its credit goes back to the
        package that paid for it and the student gets a warning.

        Raises:
            ConflictException: If the class is already cancelled
            ValidationException: If the class already started
        """
        now = utc_now()
        refunded = 0
        with self.transaction():
            session = self.class_session_repository.get_in_organization_for_update(
                class_id, organization_id
            )
            if not session:
                raise NotFoundException("Class not found", code="CLASS_NOT_FOUND")
            if session.is_cancelled:
                raise ConflictException("Class is already cancelled", code="CLASS_ALREADY_CANCELLED")
            if ensure_utc(session.start_time) <= now:
                raise ValidationException(
                    "Cannot cancel a class that already started", code="CLASS_STARTED"
                )

            session.is_cancelled = True
            session.cancelled_at = now

            bookings = self.booking_repository.list_confirmed_for_session(session.id)
            for booking in bookings:
                booking.status = BookingStatus.CANCELLED.value
                booking.cancelled_at = now
                membership = self.membership_repository.get_for_user_for_update(
                    booking.user_id, organization_id
                )
                if membership is not None:
                    booking.credit_refunded = self.credit_package_service.restore_credit(
                        booking, membership, now=now, allow_expired=True
                    )
                    if booking.credit_refunded:
                        refunded += 1
                outcome = (
                    "Your credit has been returned."
                    if booking.credit_refunded
                    else "The credit's package has already expired."
                )
                self.notification_service.create(
                    user_id=booking.user_id,
                    title="Class cancelled",
                    message=(
                        f"'{session.title}' on {ensure_utc(session.start_time):%Y-%m-%d %H:%M} UTC "
                        f"was cancelled. {outcome}"
                    ),
                    type=NotificationType.WARNING,
                    organization_id=organization_id,
                )
            self.booking_repository.flush()

        self.logger.info(
            "Class cancelled",
            extra={
                "organization_id": organization_id,
                "class_id": class_id,
                "cancelled_bookings": len(bookings),
                "refunded": refunded,
            },
        )
        return {"class_id": class_id, "cancelled_bookings": len(bookings), "refunded": refunded}

    @BaseService.measure_operation("clone_week")
    def clone_week(
        self, organization_id: str, source_week_start: date, target_week_start: date
    ) -> Dict[str, Any]:
        """
        Copy a week of classes onto another week.

        Weeks start at local midnight in the organization's timezone and
        copies keep their local wall-clock time. Copies that would start in
        the past, or that already exist, are skipped.
        """
        if source_week_start == target_week_start:
            raise ValidationException(
                "Source and target weeks must differ", code="SAME_WEEK"
            )
        organization = self.organization_repository.get_by_id(
            organization_id, load_relationships=False
        )
        if not organization:
            raise NotFoundException("Organization not found", code="ORGANIZATION_NOT_FOUND")

        tz = get_org_timezone(organization)
        window_start = local_midnight_utc(tz, source_week_start)
        window_end = local_midnight_utc(tz, source_week_start + timedelta(days=DAYS_PER_WEEK))
        day_shift = timedelta(days=(target_week_start - source_week_start).days)
        now = utc_now()

        sources = self.class_session_repository.list_in_window(
            organization_id, window_start, window_end
        )
        created: List[ClassSession] = []
        skipped = 0
        with self.transaction():
            for source in sources:
                local_start = ensure_utc(source.start_time).astimezone(tz).replace(tzinfo=None)
                new_start = tz.localize(local_start + day_shift).astimezone(pytz.UTC)
                duration = ensure_utc(source.end_time) - ensure_utc(source.start_time)
                if new_start < now or self.class_session_repository.find_duplicate(
                    organization_id, source.title, source.category_id, new_start
                ):
                    skipped += 1
                    continue
                created.append(
                    self.class_session_repository.create(
                        organization_id=organization_id,
                        category_id=source.category_id,
                        instructor_id=source.instructor_id,
                        title=source.title,
                        description=source.description,
                        start_time=new_start,
                        end_time=new_start + duration,
                        capacity=source.capacity,
                    )
                )

        self.logger.info(
            "Week cloned",
            extra={
                "organization_id": organization_id,
                "source_week_start": source_week_start.isoformat(),
                "target_week_start": target_week_start.isoformat(),
                "created_count": len(created),
                "skipped": skipped,
            },
        )
        return {
            "created": len(created),
            "skipped": skipped,
            "classes": [self._to_item(session, 0) for session in created],
        }

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _get_or_404(
        self, organization_id: str, class_id: str, with_bookings: bool = False
    ) -> ClassSession:
        session = self.class_session_repository.get_in_organization(
            class_id, organization_id, with_bookings=with_bookings
        )
        if not session:
            raise NotFoundException("Class not found", code="CLASS_NOT_FOUND")
        return session

    def list_classes(
        self,
        organization_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """Staff view of the calendar including cancelled classes."""
        sessions = self.class_session_repository.list_for_organization(
            organization_id,
            start=ensure_utc(start) if start else None,
            end=ensure_utc(end) if end else None,
        )
        counts = self.booking_repository.count_confirmed_by_session(s.id for s in sessions)
        return [self._to_item(s, counts.get(s.id, 0)) for s in sessions]

    def get_schedule(
        self,
        organization_id: str,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """Student view of upcoming availability, without cancelled classes."""
        sessions = self.class_session_repository.list_for_organization(
            organization_id,
            start=ensure_utc(start) if start else None,
            end=ensure_utc(end) if end else None,
            include_cancelled=False,
        )
        ids = [s.id for s in sessions]
        counts = self.booking_repository.count_confirmed_by_session(ids)
        mine = self.booking_repository.booked_session_ids(user_id, ids)

        items = []
        for session in sessions:
            booked = counts.get(session.id, 0)
            item = self._to_item(session, booked)
            item.update(
                {
                    "category_name": session.category.name if session.category else None,
                    "available_slots": max(session.capacity - booked, 0),
                    "is_full": booked >= session.capacity,
                    "is_booked_by_me": session.id in mine,
                }
            )
            items.append(item)
        return items

    def get_class(self, organization_id: str, class_id: str) -> Dict[str, Any]:
        """A class with all of its bookings."""
        session = self._get_or_404(organization_id, class_id, with_bookings=True)
        confirmed = [
            b for b in session.bookings if b.status == BookingStatus.CONFIRMED.value
        ]
        item = self._to_item(session, len(confirmed))
        item["bookings"] = [
            {
                "id": booking.id,
                "user_id": booking.user_id,
                "student_name": booking.user.full_name if booking.user else None,
                "status": booking.status,
                "created_at": ensure_utc(booking.created_at) if booking.created_at else None,
            }
            for booking in session.bookings
        ]
        return item
