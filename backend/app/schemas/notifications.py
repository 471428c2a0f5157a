# backend/app/schemas/notifications.py
"""Schemas for notification inbox endpoints."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from ..core.enums import NotificationType
from ._strict_base import StrictModel, UTCDateTime


class NotificationResponse(StrictModel):
    """Notification inbox entry."""

    id: str
    title: str
    message: str
    type: NotificationType
    is_read: bool
    organization_id: str | None = None
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True, **StrictModel.model_config)


class NotificationListResponse(StrictModel):
    """Latest notifications plus the unread total."""

    notifications: list[NotificationResponse]
    unread_count: int = Field(..., ge=0)


class NotificationsMarkedResponse(StrictModel):
    updated: int = Field(..., ge=0)
