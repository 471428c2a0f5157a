# backend/app/models/organization.py
"""
Organization (tenant) and Membership models.

Every gym or studio is an Organization. Membership links a user to an
organization with a role and carries the student's credit balance.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import MembershipRole
from ..core.ulid_helper import generate_ulid
from ..database import Base


class Organization(Base):
    """A single gym/studio and its booking configuration."""

    __tablename__ = "organizations"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(120), nullable=False)
    slug = Column(String(140), unique=True, index=True, nullable=False)
    owner_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)

    # Calendar configuration
    slot_duration_minutes = Column(Integer, nullable=False, default=60)
    cancellation_window_hours = Column(Integer, nullable=False, default=2)
    open_hour = Column(Integer, nullable=False, default=7)
    close_hour = Column(Integer, nullable=False, default=22)
    timezone = Column(String(50), nullable=False, default="UTC")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="organizations_owned")
    memberships = relationship(
        "Membership", back_populates="organization", cascade="all, delete-orphan"
    )
    categories = relationship(
        "Category",
        back_populates="organization",
        cascade="all, delete-orphan",
        order_by="Category.name",
    )

    __table_args__ = (
        CheckConstraint("slot_duration_minutes >= 15", name="ck_organizations_slot_duration"),
        CheckConstraint(
            "cancellation_window_hours >= 0 AND cancellation_window_hours <= 72",
            name="ck_organizations_cancellation_window",
        ),
        CheckConstraint("open_hour < close_hour", name="ck_organizations_opening_hours"),
    )


class Membership(Base):
    """
    Join entity between a user and an organization.

    ``credits`` mirrors the sum of the remaining amounts of the membership's
    credit packages that have not yet been processed as expired.
    """

    __tablename__ = "memberships"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    organization_id = Column(
        String(26), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = Column(String(20), nullable=False, default=MembershipRole.STUDENT.value)
    credits = Column(Integer, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="memberships")
    organization = relationship("Organization", back_populates="memberships")
    category = relationship("Category")
    credit_packages = relationship(
        "CreditPackage",
        back_populates="membership",
        cascade="all, delete-orphan",
        order_by="CreditPackage.created_at.desc()",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "organization_id", name="uq_memberships_user_organization"),
        CheckConstraint(
            "role IN ('OWNER', 'ADMIN', 'INSTRUCTOR', 'STUDENT')", name="ck_memberships_role"
        ),
        CheckConstraint("credits >= 0", name="ck_memberships_credits_non_negative"),
    )
