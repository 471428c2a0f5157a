# backend/app/core/enums.py
"""
Core enums for the CoachPlanner platform.

Stored as plain strings in the database; the enums give services and
schemas a single source of truth for the allowed values.
"""

from enum import Enum


class MembershipRole(str, Enum):
    """Role a user holds inside one organization."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    INSTRUCTOR = "INSTRUCTOR"
    STUDENT = "STUDENT"


# Roles allowed to manage the organization's catalog and students
STAFF_ROLES = (MembershipRole.OWNER, MembershipRole.ADMIN, MembershipRole.INSTRUCTOR)
MANAGER_ROLES = (MembershipRole.OWNER, MembershipRole.ADMIN)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    CONFIRMED = "CONFIRMED"  # Seat reserved, credit consumed
    CANCELLED = "CANCELLED"  # Cancelled by the student or with the class
    ATTENDED = "ATTENDED"  # Student checked in


class NotificationType(str, Enum):
    """Severity shown by the notification inbox."""

    INFO = "INFO"
    WARNING = "WARNING"
    SUCCESS = "SUCCESS"
