# backend/app/models/credit_package.py
"""
CreditPackage model.

A purchased batch of class entitlements with an expiry date. Bookings draw
one credit at a time from the package that expires first.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class CreditPackage(Base):
    """Batch of credits owned by a membership."""

    __tablename__ = "credit_packages"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    membership_id = Column(
        String(26), ForeignKey("memberships.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(120), nullable=False)
    initial_amount = Column(Integer, nullable=False)
    remaining_amount = Column(Integer, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    # Stamps written by the daily maintenance so each package is handled once
    expiry_warning_sent_at = Column(DateTime(timezone=True), nullable=True)
    expired_processed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    membership = relationship("Membership", back_populates="credit_packages")

    __table_args__ = (
        CheckConstraint("initial_amount > 0", name="ck_credit_packages_initial_positive"),
        CheckConstraint(
            "remaining_amount >= 0 AND remaining_amount <= initial_amount",
            name="ck_credit_packages_remaining_bounds",
        ),
        Index("ix_credit_packages_membership_expires", "membership_id", "expires_at"),
    )
