"""Schemas for the student roster."""

from typing import Optional

from pydantic import EmailStr, Field

from ..core.enums import MembershipRole
from ._strict_base import StrictModel, StrictRequestModel, UTCDateTime


class StudentCreate(StrictRequestModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=120)
    category_id: Optional[int] = None


class StudentCategoryUpdate(StrictRequestModel):
    """``category_id`` of ``null`` clears the assignment."""

    category_id: Optional[int]


class StudentResponse(StrictModel):
    id: str
    membership_id: str
    full_name: str
    email: EmailStr
    role: MembershipRole
    credits: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    joined_at: Optional[UTCDateTime] = None


class StudentSummaryResponse(StrictModel):
    id: str
    full_name: str
    email: str
    role: Optional[MembershipRole] = None
    credits: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None
