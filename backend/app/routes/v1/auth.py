# backend/app/routes/v1/auth.py
"""
Authentication routes - API v1.

Owner sign-up, student self-registration via a gym link, login, the
public gym lookup and the current principal.
"""

import logging

from fastapi import APIRouter, Depends, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_auth_service
from ...principal import CurrentPrincipal
from ...schemas.auth import (
    GymInfoResponse,
    LoginRequest,
    LoginResponse,
    PrincipalResponse,
    RegisterOwnerRequest,
    RegisterOwnerResponse,
    RegisterStudentRequest,
    RegisterStudentResponse,
)
from ...services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth-v1"])


@router.post(
    "/register", response_model=RegisterOwnerResponse, status_code=status.HTTP_201_CREATED
)
def register_owner(
    payload: RegisterOwnerRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterOwnerResponse:
    """Register a gym owner and create their organization."""
    user, organization = auth_service.register_owner(
        organization_name=payload.organization_name,
        full_name=payload.full_name,
        email=payload.email,
        password=payload.password,
    )
    return RegisterOwnerResponse(
        message="User registered successfully", user_id=user.id, slug=organization.slug
    )


@router.post(
    "/register/{slug}",
    response_model=RegisterStudentResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_student(
    slug: str,
    payload: RegisterStudentRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterStudentResponse:
    """Join a gym through its public registration link."""
    user, organization, linked = auth_service.register_student(
        slug=slug,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        category_id=payload.category_id,
    )
    message = (
        f"Account linked! Welcome to {organization.name}"
        if linked
        else f"Registered successfully. Welcome to {organization.name}"
    )
    return RegisterStudentResponse(message=message, user_id=user.id, linked=linked)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Exchange credentials for a bearer token."""
    return LoginResponse(**auth_service.login(payload.email, payload.password))


@router.get("/gym-info/{slug}", response_model=GymInfoResponse)
def gym_info(
    slug: str,
    auth_service: AuthService = Depends(get_auth_service),
) -> GymInfoResponse:
    """Public gym details for the registration page."""
    return GymInfoResponse.model_validate(auth_service.get_gym_info(slug))


@router.get("/me", response_model=PrincipalResponse)
def read_principal(
    principal: CurrentPrincipal = Depends(get_current_principal),
) -> PrincipalResponse:
    return PrincipalResponse(
        user_id=principal.user_id,
        email=principal.email,
        role=principal.role,
        organization_id=principal.organization_id,
    )
