# backend/app/repositories/booking_repository.py
"""
Booking Repository for the CoachPlanner platform.

Seat counting only considers CONFIRMED bookings; ATTENDED bookings keep the
seat they had when the class started but no longer block anything.
"""

from datetime import datetime
import logging
from typing import Dict, Iterable, List, Optional, Set, cast

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..core.enums import BookingStatus
from ..models.booking import Booking
from ..models.class_session import ClassSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Data access for bookings."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def count_confirmed(self, class_session_id: str) -> int:
        query = self.db.query(func.count(Booking.id)).filter(
            Booking.class_session_id == class_session_id,
            Booking.status == BookingStatus.CONFIRMED.value,
        )
        return int(self._execute_scalar(query) or 0)

    def count_confirmed_by_session(self, class_session_ids: Iterable[str]) -> Dict[str, int]:
        """CONFIRMED booking counts keyed by class id (missing ids count zero)."""
        ids = list(class_session_ids)
        if not ids:
            return {}
        query = (
            self.db.query(Booking.class_session_id, func.count(Booking.id))
            .filter(
                Booking.class_session_id.in_(ids),
                Booking.status == BookingStatus.CONFIRMED.value,
            )
            .group_by(Booking.class_session_id)
        )
        rows = self._execute_query(query)
        return {class_id: int(total) for class_id, total in rows}

    def booked_session_ids(self, user_id: str, class_session_ids: Iterable[str]) -> Set[str]:
        ids = list(class_session_ids)
        if not ids:
            return set()
        query = self.db.query(Booking.class_session_id).filter(
            Booking.user_id == user_id,
            Booking.class_session_id.in_(ids),
            Booking.status == BookingStatus.CONFIRMED.value,
        )
        return {row[0] for row in self._execute_query(query)}

    def get_confirmed_for_user(self, user_id: str, class_session_id: str) -> Optional[Booking]:
        query = self.db.query(Booking).filter(
            Booking.user_id == user_id,
            Booking.class_session_id == class_session_id,
            Booking.status == BookingStatus.CONFIRMED.value,
        )
        return cast(Optional[Booking], self._execute_first(query))

    def list_confirmed_for_session(self, class_session_id: str) -> List[Booking]:
        query = (
            self.db.query(Booking)
            .options(joinedload(Booking.credit_package))
            .filter(
                Booking.class_session_id == class_session_id,
                Booking.status == BookingStatus.CONFIRMED.value,
            )
            .order_by(Booking.created_at.asc())
        )
        return cast(List[Booking], self._execute_query(query))

    def get_in_organization(self, booking_id: str, organization_id: str) -> Optional[Booking]:
        query = (
            self.db.query(Booking)
            .join(ClassSession, Booking.class_session_id == ClassSession.id)
            .options(joinedload(Booking.class_session))
            .filter(
                Booking.id == booking_id,
                ClassSession.organization_id == organization_id,
            )
        )
        return cast(Optional[Booking], self._execute_first(query))

    def list_confirmed_for_user(
        self,
        user_id: str,
        organization_id: str,
        starting_after: Optional[datetime] = None,
    ) -> List[Booking]:
        """A student's CONFIRMED bookings in one organization ordered by class start."""
        query = (
            self.db.query(Booking)
            .join(ClassSession, Booking.class_session_id == ClassSession.id)
            .options(
                joinedload(Booking.class_session).joinedload(ClassSession.category),
                joinedload(Booking.class_session).joinedload(ClassSession.instructor),
            )
            .filter(
                Booking.user_id == user_id,
                Booking.status == BookingStatus.CONFIRMED.value,
                ClassSession.organization_id == organization_id,
            )
        )
        if starting_after is not None:
            query = query.filter(ClassSession.start_time >= starting_after)
        query = query.order_by(ClassSession.start_time.asc())
        return cast(List[Booking], self._execute_query(query))

    def get_next_for_user(
        self, user_id: str, organization_id: str, now: datetime
    ) -> Optional[Booking]:
        query = (
            self.db.query(Booking)
            .join(ClassSession, Booking.class_session_id == ClassSession.id)
            .options(joinedload(Booking.class_session))
            .filter(
                Booking.user_id == user_id,
                Booking.status == BookingStatus.CONFIRMED.value,
                ClassSession.organization_id == organization_id,
                ClassSession.start_time >= now,
            )
            .order_by(ClassSession.start_time.asc())
        )
        return cast(Optional[Booking], self._execute_first(query))

    def count_for_user_since(self, user_id: str, organization_id: str, since: datetime) -> int:
        """Bookings that consumed a credit (CONFIRMED or ATTENDED) made since ``since``."""
        query = (
            self.db.query(func.count(Booking.id))
            .join(ClassSession, Booking.class_session_id == ClassSession.id)
            .filter(
                Booking.user_id == user_id,
                ClassSession.organization_id == organization_id,
                Booking.status.in_(
                    [BookingStatus.CONFIRMED.value, BookingStatus.ATTENDED.value]
                ),
                Booking.created_at >= since,
            )
        )
        return int(self._execute_scalar(query) or 0)
