"""Authenticated caller resolved from a bearer token and a fresh membership read."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.enums import MembershipRole


@dataclass(frozen=True)
class CurrentPrincipal:
    """
    The user making a request and the organization context they act in.

    ``role`` and ``organization_id`` are ``None`` for accounts that belong
    to no organization yet.
    """

    user_id: str
    email: str
    role: Optional[MembershipRole]
    organization_id: Optional[str]

    @property
    def id(self) -> str:
        return self.user_id

    @property
    def has_organization(self) -> bool:
        return self.organization_id is not None

    def has_role(self, *roles: MembershipRole) -> bool:
        return self.role is not None and self.role in roles
