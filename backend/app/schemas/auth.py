"""Request and response schemas for authentication routes."""

from typing import List, Optional

from pydantic import ConfigDict, EmailStr, Field

from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import MembershipRole
from ._strict_base import StrictModel, StrictRequestModel


class RegisterOwnerRequest(StrictRequestModel):
    """Owner sign-up; creates the gym as well."""

    organization_name: str = Field(..., min_length=1, max_length=120)
    full_name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class RegisterOwnerResponse(StrictModel):
    message: str
    user_id: str
    slug: str


class RegisterStudentRequest(StrictRequestModel):
    """Self-registration through a gym's public link."""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    category_id: Optional[int] = None


class RegisterStudentResponse(StrictModel):
    message: str
    user_id: str
    linked: bool


class LoginRequest(StrictRequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginUser(StrictModel):
    id: str
    email: EmailStr
    full_name: str
    role: MembershipRole
    organization_id: Optional[str] = None


class LoginResponse(StrictModel):
    access_token: str
    token_type: str = "bearer"
    user: LoginUser


class GymCategory(StrictModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True, **StrictModel.model_config)


class GymInfoResponse(StrictModel):
    """Public information shown on a gym's registration page."""

    id: str
    name: str
    categories: List[GymCategory]

    model_config = ConfigDict(from_attributes=True, **StrictModel.model_config)


class PrincipalResponse(StrictModel):
    user_id: str
    email: str
    role: Optional[MembershipRole] = None
    organization_id: Optional[str] = None


__all__ = [
    "GymInfoResponse",
    "LoginRequest",
    "LoginResponse",
    "PrincipalResponse",
    "RegisterOwnerRequest",
    "RegisterOwnerResponse",
    "RegisterStudentRequest",
    "RegisterStudentResponse",
]
