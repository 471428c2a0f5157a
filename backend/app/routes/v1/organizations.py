"""Organization configuration routes - API v1."""

from fastapi import APIRouter, Depends

from ...api.dependencies.authz import require_organization, require_roles
from ...api.dependencies.services import get_organization_service
from ...core.enums import MANAGER_ROLES
from ...principal import CurrentPrincipal
from ...schemas.organization import OrganizationConfigResponse, OrganizationConfigUpdate
from ...services.organization_service import OrganizationService

router = APIRouter(tags=["organizations-v1"])


@router.get("/config", response_model=OrganizationConfigResponse)
def get_config(
    principal: CurrentPrincipal = Depends(require_organization),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> OrganizationConfigResponse:
    organization = organization_service.get_config(principal.organization_id)
    return OrganizationConfigResponse.model_validate(organization)


@router.patch("/config", response_model=OrganizationConfigResponse)
def update_config(
    payload: OrganizationConfigUpdate,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> OrganizationConfigResponse:
    """Update calendar settings; only fields present in the body change."""
    organization = organization_service.update_config(
        principal.organization_id, payload.model_dump(exclude_unset=True)
    )
    return OrganizationConfigResponse.model_validate(organization)
