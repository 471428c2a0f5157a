# backend/app/services/auth_service.py
"""
Authentication Service for the CoachPlanner platform.

Handles owner sign-up (which creates the gym), student self-registration
through a gym's public link, login and per-request principal resolution.
Follows the service layer pattern to keep business logic out of routes.
"""

import logging
import random
import re
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import create_access_token, get_password_hash, verify_password
from ..core.constants import SLUG_MAX_ATTEMPTS, SLUG_SUFFIX_MAX
from ..core.enums import MembershipRole
from ..core.exceptions import (
    ConflictException,
    NotFoundException,
    RepositoryException,
    ServiceException,
    UnauthorizedException,
    ValidationException,
)
from ..core.ulid_helper import generate_ulid
from ..models.organization import Membership, Organization
from ..models.user import User
from ..principal import CurrentPrincipal
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lower-case ``name`` and collapse everything non-alphanumeric into ``-``."""
    base = _SLUG_SEPARATORS.sub("-", name.strip().lower()).strip("-")
    return base or "gym"


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(
        self,
        db: Session,
        user_repository: Any | None = None,
        organization_repository: Any | None = None,
        membership_repository: Any | None = None,
        category_repository: Any | None = None,
    ) -> None:
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.organization_repository = (
            organization_repository or RepositoryFactory.create_organization_repository(db)
        )
        self.membership_repository = (
            membership_repository or RepositoryFactory.create_membership_repository(db)
        )
        self.category_repository = (
            category_repository or RepositoryFactory.create_category_repository(db)
        )

    def _generate_unique_slug(self, organization_name: str) -> str:
        base = slugify(organization_name)
        for _ in range(SLUG_MAX_ATTEMPTS):
            candidate = f"{base}-{random.randint(0, SLUG_SUFFIX_MAX):03d}"
            if not self.organization_repository.slug_exists(candidate):
                return candidate
            self.logger.info("Slug collision, retrying", extra={"slug": candidate})
        # Every short suffix collided; fall back to a suffix that cannot repeat
        return f"{base}-{generate_ulid()[-8:].lower()}"

    @BaseService.measure_operation("register_owner")
    def register_owner(
        self, organization_name: str, full_name: str, email: str, password: str
    ) -> Tuple[User, Organization]:
        """
        Register a gym owner together with their organization.

        Raises:
            ConflictException: If the email is already registered
        """
        self.log_operation("register_owner", email=email)

        if self.user_repository.get_by_email(email):
            self.logger.warning(f"Registration failed - email already exists: {email}")
            raise ConflictException("Email already registered", code="EMAIL_TAKEN")

        hashed_password = get_password_hash(password)

        try:
            with self.transaction():
                user: User = self.user_repository.create(
                    email=email.strip().lower(),
                    full_name=full_name,
                    hashed_password=hashed_password,
                )
                organization: Organization = self.organization_repository.create(
                    name=organization_name,
                    slug=self._generate_unique_slug(organization_name),
                    owner_id=user.id,
                )
                self.membership_repository.create(
                    user_id=user.id,
                    organization_id=organization.id,
                    role=MembershipRole.OWNER.value,
                )
        except (RepositoryException, ServiceException) as exc:
            # A concurrent sign-up with the same email won the unique index
            if isinstance(exc.__cause__, IntegrityError) and self.user_repository.get_by_email(
                email
            ):
                self.logger.warning(f"Registration lost email race: {email}")
                raise ConflictException("Email already registered", code="EMAIL_TAKEN") from exc
            raise

        self.logger.info(
            "Owner registered",
            extra={"user_id": user.id, "organization_id": organization.id, "slug": organization.slug},
        )
        return user, organization

    @BaseService.measure_operation("register_student")
    def register_student(
        self,
        slug: str,
        name: str,
        email: str,
        password: str,
        category_id: Optional[int] = None,
    ) -> Tuple[User, Organization, bool]:
        """
        Join a gym through its public registration link.

        An existing account is linked when the supplied password matches it.

        Returns:
            (user, organization, linked) where ``linked`` tells whether an
            existing account was reused
        """
        organization = self.organization_repository.get_by_slug(slug)
        if not organization:
            raise NotFoundException("Gym not found", code="ORGANIZATION_NOT_FOUND")

        existing = self.user_repository.get_by_email(email)
        if existing:
            if not existing.hashed_password:
                raise ConflictException(
                    "This account exists but has no password set. Contact support.",
                    code="ACCOUNT_WITHOUT_PASSWORD",
                )
            if not verify_password(password, existing.hashed_password):
                raise ConflictException(
                    "This account already exists. Enter its current password to join this gym.",
                    code="ACCOUNT_EXISTS",
                )
            if self.membership_repository.get_for_user(existing.id, organization.id):
                raise ConflictException(
                    "You are already a member of this gym. Please log in.",
                    code="ALREADY_MEMBER",
                )

        if category_id is not None and not self.category_repository.get_in_organization(
            category_id, organization.id
        ):
            raise ValidationException("Category does not belong to this gym", code="INVALID_CATEGORY")

        with self.transaction():
            if existing:
                user = existing
            else:
                user = self.user_repository.create(
                    email=email.strip().lower(),
                    full_name=name,
                    hashed_password=get_password_hash(password),
                )
            self.membership_repository.create(
                user_id=user.id,
                organization_id=organization.id,
                role=MembershipRole.STUDENT.value,
                category_id=category_id,
            )

        self.logger.info(
            "Student joined organization",
            extra={
                "user_id": user.id,
                "organization_id": organization.id,
                "linked": existing is not None,
            },
        )
        return user, organization, existing is not None

    def _resolve_login_context(self, user: User) -> Tuple[MembershipRole, Optional[str]]:
        owned = self.organization_repository.get_first_owned_by(user.id)
        if owned:
            return MembershipRole.OWNER, owned.id
        membership: Optional[Membership] = self.membership_repository.get_oldest_for_user(user.id)
        if membership:
            return MembershipRole(membership.role), membership.organization_id
        return MembershipRole.STUDENT, None

    @BaseService.measure_operation("login")
    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate a user and issue an access token.

        Raises:
            UnauthorizedException: On unknown email, wrong password or inactive account
        """
        user = self.user_repository.get_by_email(email)
        password_ok = verify_password(password, user.hashed_password if user else None)
        if user is None or not password_ok:
            self.logger.warning("Failed login attempt", extra={"email": email})
            raise UnauthorizedException("Invalid credentials", code="INVALID_CREDENTIALS")
        if not user.is_active:
            raise UnauthorizedException("Invalid credentials", code="INVALID_CREDENTIALS")

        role, organization_id = self._resolve_login_context(user)
        token = create_access_token(
            {
                "sub": user.id,
                "email": user.email,
                "role": role.value,
                "org_id": organization_id,
            }
        )
        self.logger.info(
            "User logged in",
            extra={"user_id": user.id, "role": role.value, "organization_id": organization_id},
        )
        return {
            "access_token": token,
            "token_type": "bearer",
            "user": {
                "id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "role": role,
                "organization_id": organization_id,
            },
        }

    def get_gym_info(self, slug: str) -> Organization:
        organization = self.organization_repository.get_by_slug(slug)
        if not organization:
            raise NotFoundException("Gym not found", code="ORGANIZATION_NOT_FOUND")
        return organization

    def resolve_principal(self, user_id: str, organization_id: Optional[str]) -> CurrentPrincipal:
        """
        Build the request principal from token claims.

        The role comes from the membership as it is now, not from the token.
        """
        user = self.user_repository.get_by_id(user_id, load_relationships=False)
        if not user or not user.is_active:
            raise UnauthorizedException("Could not validate credentials")

        if organization_id is None:
            return CurrentPrincipal(
                user_id=user.id,
                email=user.email,
                role=MembershipRole.STUDENT,
                organization_id=None,
            )

        membership = self.membership_repository.get_for_user(user.id, organization_id)
        if not membership:
            raise UnauthorizedException(
                "Membership no longer exists", code="MEMBERSHIP_REVOKED"
            )
        return CurrentPrincipal(
            user_id=user.id,
            email=user.email,
            role=MembershipRole(membership.role),
            organization_id=organization_id,
        )
