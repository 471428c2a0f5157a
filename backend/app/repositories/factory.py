# backend/app/repositories/factory.py
"""
Repository Factory for the CoachPlanner platform.

Provides centralized creation of repository instances so services and
tests build them the same way.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .category_repository import CategoryRepository
    from .class_session_repository import ClassSessionRepository
    from .credit_package_repository import CreditPackageRepository
    from .notification_repository import NotificationRepository
    from .organization_repository import MembershipRepository, OrganizationRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_organization_repository(db: Session) -> "OrganizationRepository":
        from .organization_repository import OrganizationRepository

        return OrganizationRepository(db)

    @staticmethod
    def create_membership_repository(db: Session) -> "MembershipRepository":
        from .organization_repository import MembershipRepository

        return MembershipRepository(db)

    @staticmethod
    def create_category_repository(db: Session) -> "CategoryRepository":
        from .category_repository import CategoryRepository

        return CategoryRepository(db)

    @staticmethod
    def create_class_session_repository(db: Session) -> "ClassSessionRepository":
        from .class_session_repository import ClassSessionRepository

        return ClassSessionRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_credit_package_repository(db: Session) -> "CreditPackageRepository":
        """Create repository for credit package queries."""
        from .credit_package_repository import CreditPackageRepository

        return CreditPackageRepository(db)

    @staticmethod
    def create_notification_repository(db: Session) -> "NotificationRepository":
        from .notification_repository import NotificationRepository

        return NotificationRepository(db)
