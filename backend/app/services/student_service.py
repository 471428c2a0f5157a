# backend/app/services/student_service.py
"""
Student roster management for staff, plus the student's own summary.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..auth import get_password_hash
from ..core.config import settings
from ..core.enums import MembershipRole
from ..core.exceptions import NotFoundException, ValidationException
from ..models.organization import Membership
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


def _membership_summary(membership: Membership) -> Dict[str, Any]:
    return {
        "id": membership.user_id,
        "membership_id": membership.id,
        "full_name": membership.user.full_name,
        "email": membership.user.email,
        "role": membership.role,
        "credits": membership.credits,
        "category_id": membership.category_id,
        "category_name": membership.category.name if membership.category else None,
        "joined_at": membership.joined_at,
    }


class StudentService(BaseService):
    """Enrol and list students of an organization."""

    def __init__(
        self,
        db: Session,
        user_repository: Any | None = None,
        membership_repository: Any | None = None,
        category_repository: Any | None = None,
    ) -> None:
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.membership_repository = (
            membership_repository or RepositoryFactory.create_membership_repository(db)
        )
        self.category_repository = (
            category_repository or RepositoryFactory.create_category_repository(db)
        )

    def _validate_category(self, organization_id: str, category_id: Optional[int]) -> None:
        if category_id is not None and not self.category_repository.get_in_organization(
            category_id, organization_id
        ):
            raise ValidationException("Selected category is not valid", code="INVALID_CATEGORY")

    @BaseService.measure_operation("create_student")
    def create_student(
        self,
        organization_id: str,
        email: str,
        full_name: str,
        category_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Enrol a student, creating the account with the default password if needed.

        Raises:
            ValidationException: If already enrolled or the category is foreign
        """
        self._validate_category(organization_id, category_id)

        user = self.user_repository.get_by_email(email)
        if user and self.membership_repository.get_for_user(user.id, organization_id):
            raise ValidationException(
                "This user is already registered in your gym", code="ALREADY_MEMBER"
            )

        with self.transaction():
            if not user:
                user = self.user_repository.create(
                    email=email.strip().lower(),
                    full_name=full_name,
                    hashed_password=get_password_hash(
                        settings.default_student_password.get_secret_value()
                    ),
                )
                created_account = True
            else:
                created_account = False
            membership = self.membership_repository.create(
                user_id=user.id,
                organization_id=organization_id,
                role=MembershipRole.STUDENT.value,
                category_id=category_id,
            )

        self.logger.info(
            "Student enrolled",
            extra={
                "organization_id": organization_id,
                "user_id": user.id,
                "created_account": created_account,
            },
        )
        self.db.refresh(membership)
        return _membership_summary(membership)

    def list_students(self, organization_id: str) -> List[Dict[str, Any]]:
        return [
            _membership_summary(m) for m in self.membership_repository.list_students(organization_id)
        ]

    def get_my_summary(self, user_id: str, organization_id: Optional[str]) -> Dict[str, Any]:
        """The caller's membership; zero credits when they have none."""
        membership = (
            self.membership_repository.get_for_user(user_id, organization_id)
            if organization_id
            else None
        )
        if not membership:
            user = self.user_repository.get_by_id(user_id, load_relationships=False)
            return {
                "id": user_id,
                "full_name": user.full_name if user else "",
                "email": user.email if user else "",
                "role": None,
                "credits": 0,
                "category_id": None,
                "category_name": None,
            }
        return {
            "id": membership.user_id,
            "full_name": membership.user.full_name,
            "email": membership.user.email,
            "role": membership.role,
            "credits": membership.credits,
            "category_id": membership.category_id,
            "category_name": membership.category.name if membership.category else None,
        }

    @BaseService.measure_operation("assign_category")
    def assign_category(
        self, organization_id: str, student_id: str, category_id: Optional[int]
    ) -> Dict[str, Any]:
        """Assign a category to a student, or clear it with ``None``."""
        membership = self.membership_repository.get_for_user(student_id, organization_id)
        if not membership or membership.role != MembershipRole.STUDENT.value:
            raise NotFoundException("Student not found", code="STUDENT_NOT_FOUND")
        self._validate_category(organization_id, category_id)

        with self.transaction():
            membership.category_id = category_id
            self.membership_repository.flush()

        self.db.refresh(membership)
        self.logger.info(
            "Student category changed",
            extra={
                "organization_id": organization_id,
                "user_id": student_id,
                "category_id": category_id,
            },
        )
        return _membership_summary(membership)
