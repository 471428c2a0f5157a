# backend/app/api/dependencies/auth.py
"""
Authentication dependencies.

Every authenticated request decodes the bearer token and then reloads the
user and their membership, so a deactivated account or a removed or
changed membership takes effect on the very next request.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from jwt import PyJWTError
from sqlalchemy.orm import Session

from ...auth import decode_access_token, oauth2_scheme_optional
from ...core.exceptions import UnauthorizedException
from ...database import get_db
from ...principal import CurrentPrincipal
from ...services.auth_service import AuthService

logger = logging.getLogger(__name__)


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme_optional),
    db: Session = Depends(get_db),
) -> CurrentPrincipal:
    """
    Resolve the authenticated principal.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired, the
            user is gone or inactive, or the membership no longer exists
    """
    if not token:
        raise _credentials_exception("Not authenticated")
    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.warning(f"JWT validation error: {str(e)}")
        raise _credentials_exception()

    user_id = payload.get("sub")
    if not isinstance(user_id, str):
        logger.warning("Token payload missing 'sub' field")
        raise _credentials_exception()

    organization_id = payload.get("org_id")
    try:
        return AuthService(db).resolve_principal(
            user_id, organization_id if isinstance(organization_id, str) else None
        )
    except UnauthorizedException as e:
        raise _credentials_exception(e.message)
