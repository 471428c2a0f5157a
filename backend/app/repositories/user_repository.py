# backend/app/repositories/user_repository.py
"""
User Repository for the CoachPlanner platform.

Handles User data access: lookups by email and platform-wide counts.
Emails are stored lower-cased, so lookups normalize their input the same way.
"""

import logging
from typing import Optional, cast

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (case-insensitive)."""
        query = self.db.query(User).filter(func.lower(User.email) == email.strip().lower())
        return cast(Optional[User], self._execute_first(query))

    def count_all(self) -> int:
        """Total number of registered accounts."""
        return int(self._execute_scalar(self.db.query(func.count(User.id))) or 0)
