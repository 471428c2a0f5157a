# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
bound to the request's database session.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...services.auth_service import AuthService
from ...services.booking_service import BookingService
from ...services.category_service import CategoryService
from ...services.class_session_service import ClassSessionService
from ...services.credit_package_service import CreditPackageService
from ...services.dashboard_service import DashboardService
from ...services.organization_service import OrganizationService
from ...services.student_service import StudentService
from ...services.user_service import UserService

logger = logging.getLogger(__name__)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_organization_service(db: Session = Depends(get_db)) -> OrganizationService:
    return OrganizationService(db)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_class_session_service(db: Session = Depends(get_db)) -> ClassSessionService:
    return ClassSessionService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """
    Get booking service instance.

    The booking service builds its own notification and credit package
    services on the same session so all writes share one transaction.
    """
    return BookingService(db)


def get_credit_package_service(db: Session = Depends(get_db)) -> CreditPackageService:
    return CreditPackageService(db)


def get_student_service(db: Session = Depends(get_db)) -> StudentService:
    return StudentService(db)


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    return DashboardService(db)
