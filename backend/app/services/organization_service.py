# backend/app/services/organization_service.py
"""
Organization configuration service.

Owns the per-gym calendar settings: slot length, opening hours, timezone
and the cancellation window students must respect.
"""

import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, ValidationException
from ..models.organization import Organization
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class OrganizationService(BaseService):
    """Reads and updates organization configuration."""

    def __init__(self, db: Session, organization_repository: Any | None = None) -> None:
        super().__init__(db)
        self.organization_repository = (
            organization_repository or RepositoryFactory.create_organization_repository(db)
        )

    def get_config(self, organization_id: str) -> Organization:
        organization = self.organization_repository.get_by_id(
            organization_id, load_relationships=False
        )
        if not organization:
            raise NotFoundException("Organization not found", code="ORGANIZATION_NOT_FOUND")
        return organization

    @BaseService.measure_operation("update_config")
    def update_config(self, organization_id: str, updates: Dict[str, Any]) -> Organization:
        """
        Apply a partial configuration update.

        Field bounds are enforced by the request schema; the opening hours
        are checked here against the merged result.

        Raises:
            ValidationException: If open_hour is not before close_hour
        """
        organization = self.get_config(organization_id)

        open_hour = updates.get("open_hour", organization.open_hour)
        close_hour = updates.get("close_hour", organization.close_hour)
        if open_hour >= close_hour:
            raise ValidationException(
                "Opening hour must be before closing hour",
                code="INVALID_OPENING_HOURS",
                details={"open_hour": open_hour, "close_hour": close_hour},
            )

        with self.transaction():
            for key, value in updates.items():
                setattr(organization, key, value)
            self.organization_repository.flush()

        self.logger.info(
            "Organization config updated",
            extra={"organization_id": organization_id, "fields": sorted(updates)},
        )
        return organization
