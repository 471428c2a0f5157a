"""Category routes - API v1."""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ...api.dependencies.authz import require_organization, require_roles
from ...api.dependencies.services import get_category_service
from ...core.enums import MANAGER_ROLES
from ...principal import CurrentPrincipal
from ...schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from ...services.category_service import CategoryService

router = APIRouter(tags=["categories-v1"])


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    category_service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    category = category_service.create_category(principal.organization_id, payload.name)
    return CategoryResponse.model_validate(category)


@router.get("", response_model=List[CategoryResponse])
def list_categories(
    principal: CurrentPrincipal = Depends(require_organization),
    category_service: CategoryService = Depends(get_category_service),
) -> List[CategoryResponse]:
    return [
        CategoryResponse.model_validate(c)
        for c in category_service.list_categories(principal.organization_id)
    ]


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: int,
    principal: CurrentPrincipal = Depends(require_organization),
    category_service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    category = category_service.get_category(principal.organization_id, category_id)
    return CategoryResponse.model_validate(category)


@router.patch("/{category_id}", response_model=CategoryResponse)
def rename_category(
    category_id: int,
    payload: CategoryUpdate,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    category_service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    category = category_service.rename_category(
        principal.organization_id, category_id, payload.name
    )
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    category_service: CategoryService = Depends(get_category_service),
) -> Response:
    category_service.delete_category(principal.organization_id, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
