# backend/tests/conftest.py
"""
Pytest configuration for the CoachPlanner backend.

Every test gets a fresh in-memory SQLite schema (single shared connection
via StaticPool) and a TestClient whose ``get_db`` dependency yields the
same session the fixtures write through.
"""

import os

# CRITICAL: Set testing mode BEFORE any app imports!
os.environ["IS_TESTING"] = "true"
os.environ.setdefault("TEST_DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta
from typing import Dict, Optional

from fastapi.testclient import TestClient
import pytest
import pytz
from sqlalchemy.orm import Session

from app.auth import create_access_token, get_password_hash
from app.core.config import settings
from app.core.enums import BookingStatus, MembershipRole
from app.database import Base, SessionLocal, engine, get_db
from app.main import app
from app.models import (
    Booking,
    Category,
    ClassSession,
    CreditPackage,
    Membership,
    Organization,
    User,
)

if settings.is_production_database(settings.get_database_url()):
    raise RuntimeError("CRITICAL: Refusing to run tests against a production database!")


# ============================================================================
# Database / client
# ============================================================================


@pytest.fixture(scope="function")
def db():
    """Create the schema, hand out a session, and drop everything afterwards."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session):
    """Create a test client bound to the test session."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


# ============================================================================
# Builders
# ============================================================================


def utc_in(**delta) -> datetime:
    return datetime.now(pytz.UTC) + timedelta(**delta)


def make_user(db: Session, email: str, full_name: str, password: str = "secret123") -> User:
    user = User(email=email, full_name=full_name, hashed_password=get_password_hash(password))
    db.add(user)
    db.flush()
    return user


def make_membership(
    db: Session,
    user: User,
    organization: Organization,
    role: MembershipRole = MembershipRole.STUDENT,
    credits: int = 0,
    category: Optional[Category] = None,
) -> Membership:
    membership = Membership(
        user_id=user.id,
        organization_id=organization.id,
        role=role.value,
        credits=credits,
        category_id=category.id if category else None,
    )
    db.add(membership)
    db.flush()
    return membership


def make_package(
    db: Session,
    membership: Membership,
    amount: int = 5,
    remaining: Optional[int] = None,
    expires_at: Optional[datetime] = None,
    name: str = "Monthly pack",
) -> CreditPackage:
    """Add a package and keep the membership balance in step with it."""
    remaining = amount if remaining is None else remaining
    package = CreditPackage(
        membership_id=membership.id,
        name=name,
        initial_amount=amount,
        remaining_amount=remaining,
        expires_at=expires_at or utc_in(days=30),
    )
    db.add(package)
    membership.credits = (membership.credits or 0) + remaining
    db.flush()
    return package


def make_class(
    db: Session,
    organization: Organization,
    instructor: User,
    start: Optional[datetime] = None,
    duration_minutes: int = 60,
    capacity: int = 10,
    title: str = "Morning Flow",
    category: Optional[Category] = None,
) -> ClassSession:
    start = start or utc_in(days=2)
    session = ClassSession(
        organization_id=organization.id,
        instructor_id=instructor.id,
        title=title,
        start_time=start,
        end_time=start + timedelta(minutes=duration_minutes),
        capacity=capacity,
        category_id=category.id if category else None,
    )
    db.add(session)
    db.flush()
    return session


def make_booking(
    db: Session,
    user: User,
    session: ClassSession,
    package: Optional[CreditPackage],
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> Booking:
    """Insert a booking that already consumed one credit from ``package``."""
    booking = Booking(
        user_id=user.id,
        class_session_id=session.id,
        credit_package_id=package.id if package else None,
        status=status.value,
    )
    db.add(booking)
    if package is not None:
        package.remaining_amount -= 1
        package.membership.credits -= 1
    db.flush()
    return booking


def token_for(user: User, organization: Optional[Organization], role: MembershipRole) -> str:
    return create_access_token(
        {
            "sub": user.id,
            "email": user.email,
            "role": role.value,
            "org_id": organization.id if organization else None,
        }
    )


def headers_for(
    user: User, organization: Optional[Organization], role: MembershipRole
) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user, organization, role)}"}


# ============================================================================
# Seeded gym
# ============================================================================


@pytest.fixture
def test_password() -> str:
    return "secret123"


@pytest.fixture
def owner(db: Session, test_password: str) -> User:
    user = make_user(db, "owner@example.com", "Olivia Owner", test_password)
    db.commit()
    return user


@pytest.fixture
def organization(db: Session, owner: User) -> Organization:
    org = Organization(name="Iron Temple", slug="iron-temple-042", owner_id=owner.id)
    db.add(org)
    db.flush()
    make_membership(db, owner, org, MembershipRole.OWNER)
    db.commit()
    return org


@pytest.fixture
def category(db: Session, organization: Organization) -> Category:
    cat = Category(organization_id=organization.id, name="Beginners")
    db.add(cat)
    db.commit()
    return cat


@pytest.fixture
def instructor(db: Session, organization: Organization, test_password: str) -> User:
    user = make_user(db, "coach@example.com", "Casey Coach", test_password)
    make_membership(db, user, organization, MembershipRole.INSTRUCTOR)
    db.commit()
    return user


@pytest.fixture
def student(db: Session, organization: Organization, test_password: str) -> User:
    user = make_user(db, "student@example.com", "Sam Student", test_password)
    make_membership(db, user, organization, MembershipRole.STUDENT)
    db.commit()
    return user


@pytest.fixture
def student_membership(db: Session, student: User, organization: Organization) -> Membership:
    return (
        db.query(Membership)
        .filter(Membership.user_id == student.id, Membership.organization_id == organization.id)
        .one()
    )


@pytest.fixture
def student_package(db: Session, student_membership: Membership) -> CreditPackage:
    package = make_package(db, student_membership, amount=5)
    db.commit()
    return package


@pytest.fixture
def upcoming_class(db: Session, organization: Organization, instructor: User) -> ClassSession:
    session = make_class(db, organization, instructor)
    db.commit()
    return session


@pytest.fixture
def auth_headers_owner(owner: User, organization: Organization) -> Dict[str, str]:
    return headers_for(owner, organization, MembershipRole.OWNER)


@pytest.fixture
def auth_headers_instructor(instructor: User, organization: Organization) -> Dict[str, str]:
    return headers_for(instructor, organization, MembershipRole.INSTRUCTOR)


@pytest.fixture
def auth_headers_student(student: User, organization: Organization) -> Dict[str, str]:
    return headers_for(student, organization, MembershipRole.STUDENT)
