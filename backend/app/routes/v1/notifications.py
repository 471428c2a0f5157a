# backend/app/routes/v1/notifications.py
"""
Notification inbox routes - API v1.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api.dependencies.auth import get_current_principal
from ...database import get_db
from ...principal import CurrentPrincipal
from ...schemas.notifications import (
    NotificationListResponse,
    NotificationResponse,
    NotificationsMarkedResponse,
)
from ...services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications-v1"])


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    db: Session = Depends(get_db),
    principal: CurrentPrincipal = Depends(get_current_principal),
) -> NotificationListResponse:
    """Latest notifications for the caller, newest first."""
    service = NotificationService(db)
    notifications, unread = service.get_notifications(principal.user_id)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=unread,
    )


@router.patch("/read-all", response_model=NotificationsMarkedResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    principal: CurrentPrincipal = Depends(get_current_principal),
) -> NotificationsMarkedResponse:
    service = NotificationService(db)
    return NotificationsMarkedResponse(updated=service.mark_all_as_read(principal.user_id))


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    principal: CurrentPrincipal = Depends(get_current_principal),
) -> NotificationResponse:
    service = NotificationService(db)
    notification = service.mark_as_read(principal.user_id, notification_id)
    return NotificationResponse.model_validate(notification)
