# backend/app/routes/v1/bookings.py
"""
Booking routes - API v1.

Students book and cancel their own seats; staff check students in.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.authz import require_roles
from ...api.dependencies.services import get_booking_service
from ...core.enums import STAFF_ROLES, MembershipRole
from ...principal import CurrentPrincipal
from ...schemas.booking import BookingCreate, BookingResponse, BookingWithClassResponse
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings-v1"])

require_student = require_roles(MembershipRole.STUDENT)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    principal: CurrentPrincipal = Depends(require_student),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Book a seat in a class.

    One credit is taken from the package that expires first.
    """
    booking = booking_service.create_booking(
        principal.user_id, principal.organization_id, payload.class_id
    )
    return BookingResponse.model_validate(booking)


@router.get("/my-bookings", response_model=List[BookingWithClassResponse])
def list_my_bookings(
    upcoming_only: bool = Query(False, description="Only classes that have not started"),
    principal: CurrentPrincipal = Depends(require_student),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingWithClassResponse]:
    bookings = booking_service.list_my_bookings(
        principal.user_id, principal.organization_id, upcoming_only=upcoming_only
    )
    return [BookingWithClassResponse.model_validate(b) for b in bookings]


@router.delete("/{class_id}", response_model=BookingResponse)
def cancel_booking(
    class_id: str,
    principal: CurrentPrincipal = Depends(require_student),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Cancel the caller's booking for ``class_id``."""
    booking = booking_service.cancel_booking(
        principal.user_id, principal.organization_id, class_id
    )
    return BookingResponse.model_validate(booking)


@router.patch("/{booking_id}/attend", response_model=BookingResponse)
def mark_attended(
    booking_id: str,
    principal: CurrentPrincipal = Depends(require_roles(*STAFF_ROLES)),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = booking_service.mark_attended(principal.organization_id, booking_id)
    return BookingResponse.model_validate(booking)
