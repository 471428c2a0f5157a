# backend/app/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import (
    auth,
    bookings,
    categories,
    classes,
    credit_packages,
    dashboard,
    health,
    notifications,
    organizations,
    students,
    users,
)

__all__ = [
    "auth",
    "bookings",
    "categories",
    "classes",
    "credit_packages",
    "dashboard",
    "health",
    "notifications",
    "organizations",
    "students",
    "users",
]
