# backend/app/api/dependencies/authz.py
"""
Role-based authorization helpers.

Roles are per organization, so every guard here works on the principal's
current membership role.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, HTTPException, status

from ...core.enums import MembershipRole
from ...principal import CurrentPrincipal
from .auth import get_current_principal

logger = logging.getLogger(__name__)


def require_roles(*roles: MembershipRole) -> Callable[..., CurrentPrincipal]:
    """
    Create a dependency that only lets the given roles through.

    Example:
        @router.post("", dependencies=[Depends(require_roles(MembershipRole.OWNER))])
    """
    allowed = tuple(roles)

    def role_checker(
        principal: CurrentPrincipal = Depends(get_current_principal),
    ) -> CurrentPrincipal:
        if not principal.has_role(*allowed):
            logger.info(
                "Role check denied",
                extra={
                    "user_id": principal.user_id,
                    "role": principal.role.value if principal.role else None,
                    "required": [r.value for r in allowed],
                },
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return principal

    return role_checker


def require_organization(
    principal: CurrentPrincipal = Depends(get_current_principal),
) -> CurrentPrincipal:
    """Reject principals that are not acting inside an organization."""
    if not principal.has_organization:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not part of any gym",
        )
    return principal
