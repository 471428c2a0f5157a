# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_principal
from .authz import require_organization, require_roles
from .services import (
    get_auth_service,
    get_booking_service,
    get_category_service,
    get_class_session_service,
    get_credit_package_service,
    get_dashboard_service,
    get_organization_service,
    get_student_service,
    get_user_service,
)

__all__ = [
    # Auth
    "get_current_principal",
    "require_organization",
    "require_roles",
    # Services
    "get_auth_service",
    "get_booking_service",
    "get_category_service",
    "get_class_session_service",
    "get_credit_package_service",
    "get_dashboard_service",
    "get_organization_service",
    "get_student_service",
    "get_user_service",
]
