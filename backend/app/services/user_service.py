"""Profile management for the authenticated user."""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..auth import get_password_hash
from ..core.exceptions import NotFoundException
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Read and update the caller's own profile."""

    def __init__(self, db: Session, user_repository: Any | None = None) -> None:
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    def get_profile(self, user_id: str) -> User:
        user = self.user_repository.get_by_id(user_id, load_relationships=False)
        if not user:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user

    @BaseService.measure_operation("update_profile")
    def update_profile(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        updates = {}
        if full_name is not None:
            updates["full_name"] = full_name
        if password is not None:
            updates["hashed_password"] = get_password_hash(password)

        with self.transaction():
            user = self.user_repository.update(user_id, **updates)
            if not user:
                raise NotFoundException("User not found", code="USER_NOT_FOUND")

        self.logger.info(
            "Profile updated",
            extra={"user_id": user_id, "fields": sorted(k for k in updates if k != "hashed_password")},
        )
        return user
