# backend/app/repositories/credit_package_repository.py
"""
Credit Package Repository for the CoachPlanner platform.

Encapsulates the package queries behind booking (which package pays),
dashboards (what expires soon) and the daily maintenance sweep.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import List, Optional, cast

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..models.credit_package import CreditPackage
from ..models.organization import Membership
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CreditPackageRepository(BaseRepository[CreditPackage]):
    """Repository for credit package queries."""

    def __init__(self, db: Session):
        super().__init__(db, CreditPackage)

    def get_first_usable_for_update(
        self, membership_id: str, now: datetime
    ) -> Optional[CreditPackage]:
        """Soonest-expiring package that still has credits, locked for deduction."""
        query = (
            self.db.query(CreditPackage)
            .filter(
                CreditPackage.membership_id == membership_id,
                CreditPackage.remaining_amount > 0,
                CreditPackage.expires_at > now,
            )
            .order_by(
                CreditPackage.expires_at.asc(),
                CreditPackage.created_at.asc(),
                CreditPackage.id.asc(),
            )
            .with_for_update()
        )
        return cast(Optional[CreditPackage], self._execute_first(query))

    def get_next_expiring(self, membership_id: str, now: datetime) -> Optional[CreditPackage]:
        query = (
            self.db.query(CreditPackage)
            .filter(
                CreditPackage.membership_id == membership_id,
                CreditPackage.remaining_amount > 0,
                CreditPackage.expires_at > now,
            )
            .order_by(CreditPackage.expires_at.asc())
        )
        return cast(Optional[CreditPackage], self._execute_first(query))

    def list_for_membership(self, membership_id: str) -> List[CreditPackage]:
        """Package history, newest first."""
        query = (
            self.db.query(CreditPackage)
            .filter(CreditPackage.membership_id == membership_id)
            .order_by(CreditPackage.created_at.desc(), CreditPackage.id.desc())
        )
        return cast(List[CreditPackage], self._execute_query(query))

    def count_expiring_for_organization(
        self, organization_id: str, now: datetime, until: datetime
    ) -> int:
        query = (
            self.db.query(func.count(CreditPackage.id))
            .join(Membership, CreditPackage.membership_id == Membership.id)
            .filter(
                Membership.organization_id == organization_id,
                CreditPackage.remaining_amount > 0,
                CreditPackage.expires_at > now,
                CreditPackage.expires_at <= until,
            )
        )
        return int(self._execute_scalar(query) or 0)

    def list_expired_unprocessed(self, now: datetime) -> List[CreditPackage]:
        """Lapsed packages with credits left that the sweep has not handled yet."""
        query = (
            self.db.query(CreditPackage)
            .options(
                joinedload(CreditPackage.membership).joinedload(Membership.organization),
            )
            .filter(
                CreditPackage.expires_at <= now,
                CreditPackage.remaining_amount > 0,
                CreditPackage.expired_processed_at.is_(None),
            )
            .order_by(CreditPackage.expires_at.asc(), CreditPackage.id.asc())
        )
        return cast(List[CreditPackage], self._execute_query(query))

    def list_expiring_unwarned(self, now: datetime, until: datetime) -> List[CreditPackage]:
        """Packages expiring in ``(now, until]`` whose owner has not been warned."""
        query = (
            self.db.query(CreditPackage)
            .options(
                joinedload(CreditPackage.membership).joinedload(Membership.organization),
            )
            .filter(
                CreditPackage.expires_at > now,
                CreditPackage.expires_at <= until,
                CreditPackage.remaining_amount > 0,
                CreditPackage.expiry_warning_sent_at.is_(None),
            )
            .order_by(CreditPackage.expires_at.asc(), CreditPackage.id.asc())
        )
        return cast(List[CreditPackage], self._execute_query(query))

    def sum_active_remaining(self, membership_id: str) -> int:
        """Sum of remaining credits over packages not yet processed as expired."""
        query = self.db.query(func.coalesce(func.sum(CreditPackage.remaining_amount), 0)).filter(
            CreditPackage.membership_id == membership_id,
            CreditPackage.expired_processed_at.is_(None),
        )
        return int(self._execute_scalar(query) or 0)
