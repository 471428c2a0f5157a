# backend/app/models/class_session.py
"""
ClassSession model.

A scheduled, capacity-bounded class belonging to an organization, a
category and an instructor. Cancelling a session keeps the row so that the
refunded bookings keep pointing at it.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class ClassSession(Base):
    """A single class instance students can book."""

    __tablename__ = "class_sessions"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    organization_id = Column(
        String(26), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    instructor_id = Column(String(26), ForeignKey("users.id"), nullable=False)

    title = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    capacity = Column(Integer, nullable=False)

    is_cancelled = Column(Boolean, nullable=False, default=False)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    organization = relationship("Organization")
    category = relationship("Category")
    instructor = relationship("User")
    bookings = relationship(
        "Booking",
        back_populates="class_session",
        cascade="all, delete-orphan",
        order_by="Booking.created_at",
    )

    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_class_sessions_capacity"),
        CheckConstraint("start_time < end_time", name="ck_class_sessions_time_order"),
        Index("ix_class_sessions_org_start", "organization_id", "start_time"),
    )
