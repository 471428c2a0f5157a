# backend/app/routes/v1/classes.py
"""
Class calendar routes - API v1.

Staff schedule, cancel and clone classes; every member of the
organization can read the calendar. Fixed paths are declared before
``/{class_id}`` so they are not captured by it.
"""

from datetime import datetime
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ...api.dependencies.authz import require_organization, require_roles
from ...api.dependencies.services import get_class_session_service
from ...core.enums import MANAGER_ROLES, STAFF_ROLES
from ...core.timezone_utils import ensure_utc
from ...principal import CurrentPrincipal
from ...schemas.class_session import (
    CancelClassResponse,
    ClassSessionCreate,
    ClassSessionDetailResponse,
    ClassSessionResponse,
    CloneWeekRequest,
    CloneWeekResponse,
    ScheduleItemResponse,
)
from ...services.class_session_service import ClassSessionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["classes-v1"])


def _window(
    start: Optional[datetime], end: Optional[datetime]
) -> tuple[Optional[datetime], Optional[datetime]]:
    return (
        ensure_utc(start) if start else None,
        ensure_utc(end) if end else None,
    )


@router.post("", response_model=ClassSessionResponse, status_code=status.HTTP_201_CREATED)
def create_class(
    payload: ClassSessionCreate,
    principal: CurrentPrincipal = Depends(require_roles(*STAFF_ROLES)),
    class_service: ClassSessionService = Depends(get_class_session_service),
) -> ClassSessionResponse:
    """Schedule a class taught by the caller."""
    item = class_service.create_class(
        organization_id=principal.organization_id,
        instructor_id=principal.user_id,
        title=payload.title,
        start_time=payload.start_time,
        end_time=payload.end_time,
        capacity=payload.capacity,
        category_id=payload.category_id,
        description=payload.description,
    )
    return ClassSessionResponse.model_validate(item)


@router.get("", response_model=List[ClassSessionResponse])
def list_classes(
    start: Optional[datetime] = Query(None, description="Window start (inclusive)"),
    end: Optional[datetime] = Query(None, description="Window end (exclusive)"),
    principal: CurrentPrincipal = Depends(require_organization),
    class_service: ClassSessionService = Depends(get_class_session_service),
) -> List[ClassSessionResponse]:
    start, end = _window(start, end)
    items = class_service.list_classes(principal.organization_id, start=start, end=end)
    return [ClassSessionResponse.model_validate(item) for item in items]


@router.get("/schedule", response_model=List[ScheduleItemResponse])
def get_schedule(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    principal: CurrentPrincipal = Depends(require_organization),
    class_service: ClassSessionService = Depends(get_class_session_service),
) -> List[ScheduleItemResponse]:
    """Calendar with seat availability and the caller's own bookings flagged."""
    start, end = _window(start, end)
    items = class_service.get_schedule(
        principal.organization_id, principal.user_id, start=start, end=end
    )
    return [ScheduleItemResponse.model_validate(item) for item in items]


@router.post("/clone-week", response_model=CloneWeekResponse)
def clone_week(
    payload: CloneWeekRequest,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    class_service: ClassSessionService = Depends(get_class_session_service),
) -> CloneWeekResponse:
    result = class_service.clone_week(
        principal.organization_id, payload.source_week_start, payload.target_week_start
    )
    return CloneWeekResponse.model_validate(result)


@router.get("/{class_id}", response_model=ClassSessionDetailResponse)
def get_class(
    class_id: str,
    principal: CurrentPrincipal = Depends(require_organization),
    class_service: ClassSessionService = Depends(get_class_session_service),
) -> ClassSessionDetailResponse:
    """Class detail with the roster of bookings."""
    return ClassSessionDetailResponse.model_validate(
        class_service.get_class(principal.organization_id, class_id)
    )


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_class(
    class_id: str,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    class_service: ClassSessionService = Depends(get_class_session_service),
) -> Response:
    class_service.delete_class(principal.organization_id, class_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{class_id}/cancel", response_model=CancelClassResponse)
def cancel_class(
    class_id: str,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    class_service: ClassSessionService = Depends(get_class_session_service),
) -> CancelClassResponse:
    result = class_service.cancel_class(principal.organization_id, class_id)
    return CancelClassResponse.model_validate(result)
