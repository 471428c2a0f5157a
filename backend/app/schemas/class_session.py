# backend/app/schemas/class_session.py
"""Schemas for the class calendar."""

from datetime import date
from typing import List, Optional

from pydantic import Field

from ..core.enums import BookingStatus
from ._strict_base import StrictModel, StrictRequestModel, UTCDateTime


class ClassSessionCreate(StrictRequestModel):
    """New class; naive times are read as UTC."""

    title: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=2000)
    start_time: UTCDateTime
    end_time: UTCDateTime
    capacity: int = Field(..., ge=1)
    category_id: Optional[int] = None


class CategorySummary(StrictModel):
    id: int
    name: str


class ClassSessionResponse(StrictModel):
    id: str
    title: str
    description: Optional[str] = None
    start_time: UTCDateTime
    end_time: UTCDateTime
    capacity: int
    is_cancelled: bool
    cancelled_at: Optional[UTCDateTime] = None
    category_id: Optional[int] = None
    category: Optional[CategorySummary] = None
    instructor_id: str
    instructor_name: Optional[str] = None
    booked_count: int


class ScheduleItemResponse(ClassSessionResponse):
    """Student-facing calendar entry with seat availability."""

    category_name: Optional[str] = None
    available_slots: int
    is_full: bool
    is_booked_by_me: bool


class ClassBookingSummary(StrictModel):
    id: str
    user_id: str
    student_name: Optional[str] = None
    status: BookingStatus
    created_at: Optional[UTCDateTime] = None


class ClassSessionDetailResponse(ClassSessionResponse):
    bookings: List[ClassBookingSummary]


class CancelClassResponse(StrictModel):
    class_id: str
    cancelled_bookings: int
    refunded: int


class CloneWeekRequest(StrictRequestModel):
    source_week_start: date
    target_week_start: date


class CloneWeekResponse(StrictModel):
    created: int
    skipped: int
    classes: List[ClassSessionResponse]
