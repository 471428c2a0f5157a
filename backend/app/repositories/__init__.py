# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for the CoachPlanner platform.

This package provides the repository layer for data access,
separating business logic from database queries.

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    self.booking_repository = RepositoryFactory.create_booking_repository(db)
    taken = self.booking_repository.count_confirmed(class_id)
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .category_repository import CategoryRepository
from .class_session_repository import ClassSessionRepository
from .credit_package_repository import CreditPackageRepository
from .factory import RepositoryFactory
from .notification_repository import NotificationRepository
from .organization_repository import MembershipRepository, OrganizationRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "CategoryRepository",
    "ClassSessionRepository",
    "CreditPackageRepository",
    "MembershipRepository",
    "NotificationRepository",
    "OrganizationRepository",
    "RepositoryFactory",
    "UserRepository",
]
