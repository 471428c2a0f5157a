# backend/app/services/notification_service.py
"""
Notification Service for the CoachPlanner platform.

Owns the in-app inbox. Other services call ``create`` inside their own
transaction so a notification is written only when the business change
it describes is committed.
"""

import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundException
from ..models.notification import Notification
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    """In-app notification inbox."""

    def __init__(self, db: Session, notification_repository: Any | None = None) -> None:
        super().__init__(db)
        self.notification_repository = (
            notification_repository or RepositoryFactory.create_notification_repository(db)
        )

    def create(
        self,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        organization_id: Optional[str] = None,
    ) -> Notification:
        """
        Add a notification to a user's inbox.

        Does not commit; the caller's transaction decides.
        """
        notification = self.notification_repository.create_notification(
            user_id=user_id,
            title=title,
            message=message,
            type=NotificationType(type).value,
            organization_id=organization_id,
        )
        self.logger.debug(
            "Notification queued",
            extra={"user_id": user_id, "notification_type": NotificationType(type).value},
        )
        return notification

    @BaseService.measure_operation("get_notifications")
    def get_notifications(self, user_id: str) -> Tuple[List[Notification], int]:
        """Latest notifications (newest first) and the unread total."""
        notifications = self.notification_repository.get_user_notifications(
            user_id, limit=settings.notification_list_limit
        )
        unread = self.notification_repository.get_unread_count(user_id)
        return notifications, unread

    @BaseService.measure_operation("mark_notification_read")
    def mark_as_read(self, user_id: str, notification_id: str) -> Notification:
        with self.transaction():
            notification = self.notification_repository.mark_as_read(user_id, notification_id)
            if notification is None:
                raise NotFoundException("Notification not found", code="NOTIFICATION_NOT_FOUND")
        return notification

    @BaseService.measure_operation("mark_all_notifications_read")
    def mark_all_as_read(self, user_id: str) -> int:
        with self.transaction():
            updated = self.notification_repository.mark_all_as_read(user_id)
        self.logger.info(
            "Notifications marked read", extra={"user_id": user_id, "updated": updated}
        )
        return updated
