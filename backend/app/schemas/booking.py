# backend/app/schemas/booking.py
"""Schemas for booking endpoints."""

from typing import Optional

from pydantic import ConfigDict

from ..core.enums import BookingStatus
from ._strict_base import StrictModel, StrictRequestModel, UTCDateTime


class BookingCreate(StrictRequestModel):
    class_id: str


class BookedClassSummary(StrictModel):
    id: str
    title: str
    start_time: UTCDateTime
    end_time: UTCDateTime
    is_cancelled: bool

    model_config = ConfigDict(from_attributes=True, **StrictModel.model_config)


class BookingResponse(StrictModel):
    id: str
    user_id: str
    class_session_id: str
    credit_package_id: Optional[str] = None
    status: BookingStatus
    created_at: Optional[UTCDateTime] = None
    cancelled_at: Optional[UTCDateTime] = None
    attended_at: Optional[UTCDateTime] = None
    credit_refunded: bool

    model_config = ConfigDict(from_attributes=True, **StrictModel.model_config)


class BookingWithClassResponse(BookingResponse):
    class_session: BookedClassSummary
