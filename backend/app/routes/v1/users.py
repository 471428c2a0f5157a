"""Profile routes for the authenticated user - API v1."""

from fastapi import APIRouter, Depends

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_user_service
from ...principal import CurrentPrincipal
from ...schemas.user import UserProfileResponse, UserProfileUpdate
from ...services.user_service import UserService

router = APIRouter(tags=["users-v1"])


@router.get("/me", response_model=UserProfileResponse)
def read_my_profile(
    principal: CurrentPrincipal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service),
) -> UserProfileResponse:
    return UserProfileResponse.model_validate(user_service.get_profile(principal.user_id))


@router.patch("/me", response_model=UserProfileResponse)
def update_my_profile(
    payload: UserProfileUpdate,
    principal: CurrentPrincipal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service),
) -> UserProfileResponse:
    user = user_service.update_profile(
        principal.user_id, full_name=payload.full_name, password=payload.password
    )
    return UserProfileResponse.model_validate(user)
