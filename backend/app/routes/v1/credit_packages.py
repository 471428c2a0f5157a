"""Credit package routes - API v1."""

from typing import List

from fastapi import APIRouter, Depends, status

from ...api.dependencies.authz import require_roles
from ...api.dependencies.services import get_credit_package_service
from ...core.enums import MANAGER_ROLES, MembershipRole
from ...principal import CurrentPrincipal
from ...schemas.credit_package import CreditPackageCreate, CreditPackageResponse
from ...services.credit_package_service import CreditPackageService

router = APIRouter(tags=["credit-packages-v1"])


@router.post("", response_model=CreditPackageResponse, status_code=status.HTTP_201_CREATED)
def grant_package(
    payload: CreditPackageCreate,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    package_service: CreditPackageService = Depends(get_credit_package_service),
) -> CreditPackageResponse:
    """Sell a package to a student and add its credits to their balance."""
    package = package_service.grant_package(
        organization_id=principal.organization_id,
        student_id=payload.student_id,
        amount=payload.amount,
        days_valid=payload.days_valid,
        name=payload.name,
    )
    return CreditPackageResponse.model_validate(package)


@router.get("/me", response_model=List[CreditPackageResponse])
def list_my_packages(
    principal: CurrentPrincipal = Depends(require_roles(MembershipRole.STUDENT)),
    package_service: CreditPackageService = Depends(get_credit_package_service),
) -> List[CreditPackageResponse]:
    packages = package_service.list_for_student(principal.organization_id, principal.user_id)
    return [CreditPackageResponse.model_validate(p) for p in packages]


@router.get("/student/{student_id}", response_model=List[CreditPackageResponse])
def list_student_packages(
    student_id: str,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    package_service: CreditPackageService = Depends(get_credit_package_service),
) -> List[CreditPackageResponse]:
    packages = package_service.list_for_student(principal.organization_id, student_id)
    return [CreditPackageResponse.model_validate(p) for p in packages]
