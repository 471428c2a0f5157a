"""Repository for in-app notification inbox entries."""

from __future__ import annotations

from typing import List, Optional, cast

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.notification import Notification
from .base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Data access for notification inbox entries."""

    def __init__(self, db: Session) -> None:
        super().__init__(db, Notification)

    def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str,
        organization_id: Optional[str] = None,
    ) -> Notification:
        return self.create(
            user_id=user_id,
            organization_id=organization_id,
            title=title,
            message=message,
            type=type,
            is_read=False,
        )

    def get_user_notifications(self, user_id: str, limit: int = 20) -> List[Notification]:
        query = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return cast(List[Notification], self._execute_query(query))

    def get_unread_count(self, user_id: str) -> int:
        query = self.db.query(func.count(Notification.id)).filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
        return int(self._execute_scalar(query) or 0)

    def get_user_notification(self, user_id: str, notification_id: str) -> Optional[Notification]:
        query = self.db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        )
        return cast(Optional[Notification], self._execute_first(query))

    def mark_as_read(self, user_id: str, notification_id: str) -> Optional[Notification]:
        notification = self.get_user_notification(user_id, notification_id)
        if notification is None:
            return None
        notification.is_read = True
        self.db.flush()
        return notification

    def mark_all_as_read(self, user_id: str) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session="fetch")
        )
        self.db.flush()
        return int(updated or 0)
