# backend/app/repositories/class_session_repository.py
"""
ClassSession Repository for the CoachPlanner platform.

All queries are scoped by organization; a class from another tenant is
indistinguishable from a missing one.
"""

from datetime import datetime
import logging
from typing import List, Optional, cast

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ..models.booking import Booking
from ..models.class_session import ClassSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ClassSessionRepository(BaseRepository[ClassSession]):
    """Data access for class sessions."""

    def __init__(self, db: Session):
        super().__init__(db, ClassSession)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(ClassSession.category),
            joinedload(ClassSession.instructor),
        )

    def get_in_organization(
        self, class_id: str, organization_id: str, with_bookings: bool = False
    ) -> Optional[ClassSession]:
        query = self._apply_eager_loading(
            self.db.query(ClassSession).filter(
                ClassSession.id == class_id,
                ClassSession.organization_id == organization_id,
            )
        )
        if with_bookings:
            query = query.options(selectinload(ClassSession.bookings).joinedload(Booking.user))
        return cast(Optional[ClassSession], self._execute_first(query))

    def get_in_organization_for_update(
        self, class_id: str, organization_id: str
    ) -> Optional[ClassSession]:
        query = (
            self.db.query(ClassSession)
            .filter(
                ClassSession.id == class_id,
                ClassSession.organization_id == organization_id,
            )
            .with_for_update()
        )
        return cast(Optional[ClassSession], self._execute_first(query))

    def list_for_organization(
        self,
        organization_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        include_cancelled: bool = True,
    ) -> List[ClassSession]:
        """Classes ordered by start time; each bound is applied on its own."""
        query = self._apply_eager_loading(
            self.db.query(ClassSession).filter(ClassSession.organization_id == organization_id)
        )
        if start is not None:
            query = query.filter(ClassSession.start_time >= start)
        if end is not None:
            query = query.filter(ClassSession.start_time <= end)
        if not include_cancelled:
            query = query.filter(ClassSession.is_cancelled.is_(False))
        query = query.order_by(ClassSession.start_time.asc(), ClassSession.id.asc())
        return cast(List[ClassSession], self._execute_query(query))

    def list_in_window(
        self, organization_id: str, window_start: datetime, window_end: datetime
    ) -> List[ClassSession]:
        """Non-cancelled classes starting in ``[window_start, window_end)``."""
        query = (
            self.db.query(ClassSession)
            .filter(
                ClassSession.organization_id == organization_id,
                ClassSession.is_cancelled.is_(False),
                ClassSession.start_time >= window_start,
                ClassSession.start_time < window_end,
            )
            .order_by(ClassSession.start_time.asc())
        )
        return cast(List[ClassSession], self._execute_query(query))

    def count_in_window(
        self, organization_id: str, window_start: datetime, window_end: datetime
    ) -> int:
        query = self.db.query(func.count(ClassSession.id)).filter(
            ClassSession.organization_id == organization_id,
            ClassSession.is_cancelled.is_(False),
            ClassSession.start_time >= window_start,
            ClassSession.start_time < window_end,
        )
        return int(self._execute_scalar(query) or 0)

    def count_for_category(self, category_id: int) -> int:
        return self.count(category_id=category_id)

    def find_duplicate(
        self,
        organization_id: str,
        title: str,
        category_id: Optional[int],
        start_time: datetime,
    ) -> Optional[ClassSession]:
        """Existing class with the same title, category and start."""
        query = self.db.query(ClassSession).filter(
            ClassSession.organization_id == organization_id,
            ClassSession.title == title,
            ClassSession.start_time == start_time,
        )
        if category_id is None:
            query = query.filter(ClassSession.category_id.is_(None))
        else:
            query = query.filter(ClassSession.category_id == category_id)
        return cast(Optional[ClassSession], self._execute_first(query))
