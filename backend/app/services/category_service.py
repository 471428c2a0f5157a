"""Category management scoped to one organization."""

import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, NotFoundException
from ..models.category import Category
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class CategoryService(BaseService):
    """CRUD for categories with per-organization name uniqueness."""

    def __init__(
        self,
        db: Session,
        category_repository: Any | None = None,
        class_session_repository: Any | None = None,
        membership_repository: Any | None = None,
    ) -> None:
        super().__init__(db)
        self.category_repository = (
            category_repository or RepositoryFactory.create_category_repository(db)
        )
        self.class_session_repository = (
            class_session_repository or RepositoryFactory.create_class_session_repository(db)
        )
        self.membership_repository = (
            membership_repository or RepositoryFactory.create_membership_repository(db)
        )

    def _ensure_name_available(
        self, organization_id: str, name: str, exclude_id: Optional[int] = None
    ) -> None:
        existing = self.category_repository.get_by_name(organization_id, name)
        if existing and existing.id != exclude_id:
            raise ConflictException(
                f"A category named '{name}' already exists", code="CATEGORY_EXISTS"
            )

    def list_categories(self, organization_id: str) -> List[Category]:
        return self.category_repository.list_for_organization(organization_id)

    def get_category(self, organization_id: str, category_id: int) -> Category:
        category = self.category_repository.get_in_organization(category_id, organization_id)
        if not category:
            raise NotFoundException("Category not found", code="CATEGORY_NOT_FOUND")
        return category

    @BaseService.measure_operation("create_category")
    def create_category(self, organization_id: str, name: str) -> Category:
        name = name.strip()
        self._ensure_name_available(organization_id, name)
        with self.transaction():
            category = self.category_repository.create(organization_id=organization_id, name=name)
        self.logger.info(
            "Category created",
            extra={"organization_id": organization_id, "category_id": category.id},
        )
        return category

    @BaseService.measure_operation("rename_category")
    def rename_category(self, organization_id: str, category_id: int, name: str) -> Category:
        category = self.get_category(organization_id, category_id)
        name = name.strip()
        self._ensure_name_available(organization_id, name, exclude_id=category.id)
        with self.transaction():
            category.name = name
            self.category_repository.flush()
        return category

    @BaseService.measure_operation("delete_category")
    def delete_category(self, organization_id: str, category_id: int) -> None:
        """
        Delete a category no class refers to.

        Members assigned to it lose the assignment.

        Raises:
            ConflictException: If class sessions still use the category
        """
        category = self.get_category(organization_id, category_id)
        in_use = self.class_session_repository.count_for_category(category.id)
        if in_use:
            raise ConflictException(
                "Category is used by existing classes",
                code="CATEGORY_IN_USE",
                details={"class_count": in_use},
            )

        with self.transaction():
            cleared = self.membership_repository.clear_category(organization_id, category.id)
            self.category_repository.delete(category.id)

        self.logger.info(
            "Category deleted",
            extra={
                "organization_id": organization_id,
                "category_id": category_id,
                "members_cleared": cleared,
            },
        )
