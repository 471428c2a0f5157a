# backend/app/models/booking.py
"""
Booking model for the CoachPlanner platform.

A booking is a student's seat in a class session. It remembers which
credit package paid for it so a cancellation can return the credit to the
same package.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import BookingStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base


class Booking(Base):
    """Student reservation against a class session."""

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    class_session_id = Column(
        String(26), ForeignKey("class_sessions.id", ondelete="CASCADE"), nullable=False
    )
    credit_package_id = Column(
        String(26), ForeignKey("credit_packages.id", ondelete="SET NULL"), nullable=True
    )
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    attended_at = Column(DateTime(timezone=True), nullable=True)
    credit_refunded = Column(Boolean, nullable=False, default=False)

    user = relationship("User")
    class_session = relationship("ClassSession", back_populates="bookings")
    credit_package = relationship("CreditPackage")

    __table_args__ = (
        CheckConstraint(
            "status IN ('CONFIRMED', 'CANCELLED', 'ATTENDED')", name="ck_bookings_status"
        ),
        Index("ix_bookings_session_status", "class_session_id", "status"),
        Index("ix_bookings_user_status", "user_id", "status"),
    )
