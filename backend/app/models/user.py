# backend/app/models/user.py
"""
User model for the CoachPlanner platform.

A user is a global account identified by email. What a user may do inside a
gym is decided by their Membership in that organization, so the same
account can be a student in one studio and the owner of another.

Classes:
    User: Account used for authentication and profile data
"""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class User(Base):
    """
    Account used for authentication and profile management.

    Attributes:
        id: ULID primary key
        email: Unique email address used for login
        full_name: Display name
        hashed_password: Bcrypt hash (nullable for accounts created by staff
            before a password was set)
        is_active: Whether the account may log in
        created_at: Account creation timestamp
        updated_at: Last update timestamp

    Relationships:
        memberships: One-to-many with Membership
        organizations_owned: One-to-many with Organization
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(120), nullable=False)
    hashed_password = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    memberships = relationship(
        "Membership",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Membership.joined_at",
    )
    organizations_owned = relationship(
        "Organization",
        back_populates="owner",
        order_by="Organization.created_at",
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
