# backend/app/schemas/__init__.py
"""
Pydantic schemas for the CoachPlanner platform.

Request models forbid unknown fields; response models are built from ORM
objects or from the dictionaries services return.
"""

from .booking import BookingCreate, BookingResponse, BookingWithClassResponse
from .category import CategoryCreate, CategoryResponse, CategoryUpdate
from .class_session import (
    CancelClassResponse,
    ClassSessionCreate,
    ClassSessionDetailResponse,
    ClassSessionResponse,
    CloneWeekRequest,
    CloneWeekResponse,
    ScheduleItemResponse,
)
from .credit_package import CreditPackageCreate, CreditPackageResponse
from .dashboard import DashboardStatsResponse
from .notifications import NotificationListResponse, NotificationResponse
from .organization import OrganizationConfigResponse, OrganizationConfigUpdate
from .student import StudentCategoryUpdate, StudentCreate, StudentResponse, StudentSummaryResponse
from .user import UserProfileResponse, UserProfileUpdate

__all__ = [
    "BookingCreate",
    "BookingResponse",
    "BookingWithClassResponse",
    "CancelClassResponse",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "ClassSessionCreate",
    "ClassSessionDetailResponse",
    "ClassSessionResponse",
    "CloneWeekRequest",
    "CloneWeekResponse",
    "CreditPackageCreate",
    "CreditPackageResponse",
    "DashboardStatsResponse",
    "NotificationListResponse",
    "NotificationResponse",
    "OrganizationConfigResponse",
    "OrganizationConfigUpdate",
    "ScheduleItemResponse",
    "StudentCategoryUpdate",
    "StudentCreate",
    "StudentResponse",
    "StudentSummaryResponse",
    "UserProfileResponse",
    "UserProfileUpdate",
]
