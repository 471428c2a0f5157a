# backend/app/routes/v1/students.py
"""
Student roster routes - API v1.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.authz import require_roles
from ...api.dependencies.services import get_student_service
from ...core.enums import MANAGER_ROLES, STAFF_ROLES
from ...principal import CurrentPrincipal
from ...schemas.student import (
    StudentCategoryUpdate,
    StudentCreate,
    StudentResponse,
    StudentSummaryResponse,
)
from ...services.student_service import StudentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["students-v1"])


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentCreate,
    principal: CurrentPrincipal = Depends(require_roles(*STAFF_ROLES)),
    student_service: StudentService = Depends(get_student_service),
) -> StudentResponse:
    """
    Enrol a student by email.

    Unknown emails get a new account with the default password.
    """
    summary = student_service.create_student(
        organization_id=principal.organization_id,
        email=payload.email,
        full_name=payload.full_name,
        category_id=payload.category_id,
    )
    return StudentResponse.model_validate(summary)


@router.get("", response_model=List[StudentResponse])
def list_students(
    principal: CurrentPrincipal = Depends(require_roles(*STAFF_ROLES)),
    student_service: StudentService = Depends(get_student_service),
) -> List[StudentResponse]:
    return [
        StudentResponse.model_validate(s)
        for s in student_service.list_students(principal.organization_id)
    ]


@router.get("/me", response_model=StudentSummaryResponse)
def read_my_summary(
    principal: CurrentPrincipal = Depends(get_current_principal),
    student_service: StudentService = Depends(get_student_service),
) -> StudentSummaryResponse:
    summary = student_service.get_my_summary(principal.user_id, principal.organization_id)
    return StudentSummaryResponse.model_validate(summary)


@router.patch("/{student_id}", response_model=StudentResponse)
def assign_category(
    student_id: str,
    payload: StudentCategoryUpdate,
    principal: CurrentPrincipal = Depends(require_roles(*MANAGER_ROLES)),
    student_service: StudentService = Depends(get_student_service),
) -> StudentResponse:
    summary = student_service.assign_category(
        principal.organization_id, student_id, payload.category_id
    )
    return StudentResponse.model_validate(summary)
