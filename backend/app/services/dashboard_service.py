# backend/app/services/dashboard_service.py
"""
Dashboard statistics.

Staff see organization-wide cards; students see their own. Calendar
boundaries ("today", "this month") follow the organization's timezone.
"""

from datetime import timedelta
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import STAFF_ROLES, MembershipRole
from ..core.timezone_utils import (
    ensure_utc,
    get_org_timezone,
    local_day_bounds,
    local_month_start,
    utc_now,
)
from ..principal import CurrentPrincipal
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class DashboardService(BaseService):
    """Aggregates the numbers shown on the home dashboard."""

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self.organization_repository = RepositoryFactory.create_organization_repository(db)
        self.membership_repository = RepositoryFactory.create_membership_repository(db)
        self.class_session_repository = RepositoryFactory.create_class_session_repository(db)
        self.credit_package_repository = RepositoryFactory.create_credit_package_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("dashboard_stats")
    def get_stats(self, principal: CurrentPrincipal) -> Dict[str, Any]:
        organization = (
            self.organization_repository.get_by_id(
                principal.organization_id, load_relationships=False
            )
            if principal.organization_id
            else None
        )
        if organization is None:
            return {"empty": True, "message": "You are not part of any gym yet"}

        if principal.has_role(*STAFF_ROLES):
            return self._staff_stats(organization, principal.role)
        return self._student_stats(organization, principal.user_id)

    def _staff_stats(self, organization, role: MembershipRole) -> Dict[str, Any]:
        now = utc_now()
        tz = get_org_timezone(organization)
        day_start, day_end = local_day_bounds(tz, now)
        return {
            "role": role.value,
            "cards": {
                "active_students": self.membership_repository.count_students(organization.id),
                "classes_today": self.class_session_repository.count_in_window(
                    organization.id, day_start, day_end
                ),
                "expiring_packs": self.credit_package_repository.count_expiring_for_organization(
                    organization.id, now, now + timedelta(days=settings.expiring_pack_window_days)
                ),
                "register_slug": organization.slug,
            },
        }

    def _student_stats(self, organization, user_id: str) -> Dict[str, Any]:
        now = utc_now()
        tz = get_org_timezone(organization)
        membership = self.membership_repository.get_for_user(user_id, organization.id)

        next_expiration = None
        if membership:
            package = self.credit_package_repository.get_next_expiring(membership.id, now)
            if package:
                next_expiration = ensure_utc(package.expires_at)

        next_booking = self.booking_repository.get_next_for_user(user_id, organization.id, now)
        next_class = (
            {
                "title": next_booking.class_session.title,
                "date": ensure_utc(next_booking.class_session.start_time),
            }
            if next_booking
            else None
        )

        return {
            "role": MembershipRole.STUDENT.value,
            "cards": {
                "credits": membership.credits if membership else 0,
                "next_expiration": next_expiration,
                "next_class": next_class,
                "classes_this_month": self.booking_repository.count_for_user_since(
                    user_id, organization.id, local_month_start(tz, now)
                ),
            },
        }
