"""
Database models for the CoachPlanner platform.

This module exports all SQLAlchemy models used in the application.
The models are organized by functionality:
- User accounts
- Organizations (tenants) and memberships
- Categories and class sessions
- Credit packages and bookings
- In-app notifications
"""

from .booking import Booking
from .category import Category
from .class_session import ClassSession
from .credit_package import CreditPackage
from .notification import Notification
from .organization import Membership, Organization
from .user import User

__all__ = [
    "Booking",
    "Category",
    "ClassSession",
    "CreditPackage",
    "Membership",
    "Notification",
    "Organization",
    "User",
]
