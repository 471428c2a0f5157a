"""Repository for organization-scoped class categories."""

import logging
from typing import List, Optional, cast

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.category import Category
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CategoryRepository(BaseRepository[Category]):
    """Data access for categories."""

    def __init__(self, db: Session):
        super().__init__(db, Category)

    def list_for_organization(self, organization_id: str) -> List[Category]:
        query = (
            self.db.query(Category)
            .filter(Category.organization_id == organization_id)
            .order_by(Category.name.asc(), Category.id.asc())
        )
        return cast(List[Category], self._execute_query(query))

    def get_in_organization(self, category_id: int, organization_id: str) -> Optional[Category]:
        query = self.db.query(Category).filter(
            Category.id == category_id,
            Category.organization_id == organization_id,
        )
        return cast(Optional[Category], self._execute_first(query))

    def get_by_name(self, organization_id: str, name: str) -> Optional[Category]:
        query = self.db.query(Category).filter(
            Category.organization_id == organization_id,
            func.lower(Category.name) == name.strip().lower(),
        )
        return cast(Optional[Category], self._execute_first(query))
