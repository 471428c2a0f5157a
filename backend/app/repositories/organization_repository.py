# backend/app/repositories/organization_repository.py
"""
Organization and Membership repositories.

Memberships are the tenant boundary: every scoped query in the API starts
from the (user, organization) pair held in the caller's token.
"""

import logging
from typing import List, Optional, cast

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from ..core.enums import MembershipRole
from ..models.organization import Membership, Organization
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class OrganizationRepository(BaseRepository[Organization]):
    """Repository for Organization data access."""

    def __init__(self, db: Session):
        super().__init__(db, Organization)

    def get_by_slug(self, slug: str) -> Optional[Organization]:
        query = (
            self.db.query(Organization)
            .options(selectinload(Organization.categories))
            .filter(Organization.slug == slug)
        )
        return cast(Optional[Organization], self._execute_first(query))

    def slug_exists(self, slug: str) -> bool:
        return self.exists(slug=slug)

    def get_first_owned_by(self, user_id: str) -> Optional[Organization]:
        """Oldest organization the user owns, used to pick the login context."""
        query = (
            self.db.query(Organization)
            .filter(Organization.owner_id == user_id)
            .order_by(Organization.created_at.asc(), Organization.id.asc())
        )
        return cast(Optional[Organization], self._execute_first(query))


class MembershipRepository(BaseRepository[Membership]):
    """Repository for Membership data access."""

    def __init__(self, db: Session):
        super().__init__(db, Membership)

    def get_for_user(self, user_id: str, organization_id: str) -> Optional[Membership]:
        query = self.db.query(Membership).filter(
            Membership.user_id == user_id,
            Membership.organization_id == organization_id,
        )
        return cast(Optional[Membership], self._execute_first(query))

    def get_for_user_for_update(self, user_id: str, organization_id: str) -> Optional[Membership]:
        """Membership row locked for a credit mutation."""
        query = (
            self.db.query(Membership)
            .filter(
                Membership.user_id == user_id,
                Membership.organization_id == organization_id,
            )
            .with_for_update()
        )
        return cast(Optional[Membership], self._execute_first(query))

    def get_oldest_for_user(self, user_id: str) -> Optional[Membership]:
        query = (
            self.db.query(Membership)
            .filter(Membership.user_id == user_id)
            .order_by(Membership.joined_at.asc(), Membership.id.asc())
        )
        return cast(Optional[Membership], self._execute_first(query))

    def list_students(self, organization_id: str) -> List[Membership]:
        """Students of an organization, newest joined first."""
        query = (
            self.db.query(Membership)
            .options(joinedload(Membership.user), joinedload(Membership.category))
            .filter(
                Membership.organization_id == organization_id,
                Membership.role == MembershipRole.STUDENT.value,
            )
            .order_by(Membership.joined_at.desc(), Membership.id.desc())
        )
        return cast(List[Membership], self._execute_query(query))

    def count_students(self, organization_id: str) -> int:
        query = self.db.query(func.count(Membership.id)).filter(
            Membership.organization_id == organization_id,
            Membership.role == MembershipRole.STUDENT.value,
        )
        return int(self._execute_scalar(query) or 0)

    def clear_category(self, organization_id: str, category_id: int) -> int:
        """Unassign a category from every member; returns the number of rows touched."""
        members = self.find_by(organization_id=organization_id, category_id=category_id)
        for member in members:
            member.category_id = None
        self.db.flush()
        return len(members)

