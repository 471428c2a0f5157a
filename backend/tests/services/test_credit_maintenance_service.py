"""Tests for the daily credit maintenance sweep against a real session."""

from sqlalchemy.orm import Session

from app.models import CreditPackage, Membership, Notification
from app.repositories.factory import RepositoryFactory
from app.services.class_session_service import ClassSessionService
from app.services.credit_maintenance_service import CreditMaintenanceService
from conftest import make_booking, make_class, make_package, utc_in


def _titles(db: Session, user_id: str):
    return sorted(
        n.title for n in db.query(Notification).filter(Notification.user_id == user_id).all()
    )


def test_expired_package_forfeits_remaining_credits(
    db: Session, owner, student, student_membership
):
    expired = make_package(db, student_membership, amount=4, remaining=3, expires_at=utc_in(days=-1))
    live = make_package(db, student_membership, amount=5, expires_at=utc_in(days=30))
    db.commit()
    assert student_membership.credits == 8

    result = CreditMaintenanceService(db).run()

    assert result["expired_packages"] == 1
    assert result["credits_forfeited"] == 3
    assert result["owner_summaries"] == 1
    assert result["dry_run"] is False

    db.expire_all()
    assert db.get(Membership, student_membership.id).credits == 5
    processed = db.get(CreditPackage, expired.id)
    assert processed.expired_processed_at is not None
    assert processed.remaining_amount == 3
    assert db.get(CreditPackage, live.id).expired_processed_at is None

    repo = RepositoryFactory.create_credit_package_repository(db)
    assert repo.sum_active_remaining(student_membership.id) == 5

    assert _titles(db, student.id) == ["Credits expired"]
    assert _titles(db, owner.id) == ["Daily credit summary"]


def test_second_run_is_a_no_op(db: Session, owner, student, student_membership):
    make_package(db, student_membership, amount=2, expires_at=utc_in(days=-1))
    make_package(db, student_membership, amount=2, expires_at=utc_in(days=2))
    db.commit()

    first = CreditMaintenanceService(db).run()
    second = CreditMaintenanceService(db).run()

    assert first["expired_packages"] == 1
    assert first["expiry_warnings"] == 1
    assert second["expired_packages"] == 0
    assert second["expiry_warnings"] == 0
    assert second["owner_summaries"] == 0
    assert db.query(Notification).filter(Notification.user_id == student.id).count() == 2


def test_expiry_reminder_sent_once_inside_warning_window(
    db: Session, student, student_membership
):
    soon = make_package(db, student_membership, amount=3, expires_at=utc_in(days=2))
    make_package(db, student_membership, amount=3, expires_at=utc_in(days=10))
    db.commit()

    result = CreditMaintenanceService(db).run()

    assert result["expiry_warnings"] == 1
    assert result["expired_packages"] == 0
    db.expire_all()
    assert db.get(CreditPackage, soon.id).expiry_warning_sent_at is not None
    assert _titles(db, student.id) == ["Credits expiring soon"]


def test_used_up_packages_are_ignored(db: Session, student, student_membership):
    make_package(db, student_membership, amount=3, remaining=0, expires_at=utc_in(days=-1))
    make_package(db, student_membership, amount=3, remaining=0, expires_at=utc_in(days=1))
    db.commit()

    result = CreditMaintenanceService(db).run()

    assert result["expired_packages"] == 0
    assert result["expiry_warnings"] == 0
    assert db.query(Notification).count() == 0


def test_dry_run_counts_without_writing(db: Session, student, student_membership):
    make_package(db, student_membership, amount=3, expires_at=utc_in(days=-2))
    make_package(db, student_membership, amount=3, expires_at=utc_in(days=1))
    db.commit()

    result = CreditMaintenanceService(db).run(dry_run=True)

    assert result["dry_run"] is True
    assert result["expired_packages"] == 1
    assert result["credits_forfeited"] == 3
    assert result["expiry_warnings"] == 1
    assert result["owner_summaries"] == 0
    db.expire_all()
    assert db.get(Membership, student_membership.id).credits == 6
    assert db.query(Notification).count() == 0
    assert (
        db.query(CreditPackage).filter(CreditPackage.expired_processed_at.isnot(None)).count() == 0
    )


def test_explicit_reference_time(db: Session, organization, student, student_membership):
    package = make_package(db, student_membership, amount=2, expires_at=utc_in(days=5))
    db.commit()

    result = CreditMaintenanceService(db).run(now=utc_in(days=6))

    assert result["expired_packages"] == 1
    assert result["organizations"] == {
        organization.id: {"expired_packages": 1, "credits_forfeited": 2}
    }
    db.expire_all()
    assert db.get(CreditPackage, package.id).expired_processed_at is not None


def test_balance_matches_active_packages_after_class_cancel_and_sweep(
    db: Session, organization, instructor, student, student_membership
):
    lapsing = make_package(db, student_membership, amount=2, expires_at=utc_in(days=1))
    make_package(db, student_membership, amount=3, expires_at=utc_in(days=30))
    session = make_class(db, organization, instructor, start=utc_in(days=2))
    make_booking(db, student, session, lapsing)
    # The package lapses after booking but before the nightly sweep has seen it
    lapsing.expires_at = utc_in(minutes=-5)
    db.commit()

    result = ClassSessionService(db).cancel_class(organization.id, session.id)

    assert result["refunded"] == 1
    db.expire_all()
    assert db.get(CreditPackage, lapsing.id).remaining_amount == 2
    assert db.get(Membership, student_membership.id).credits == 5

    sweep = CreditMaintenanceService(db).run()

    assert sweep["expired_packages"] == 1
    assert sweep["credits_forfeited"] == 2
    db.expire_all()
    repo = RepositoryFactory.create_credit_package_repository(db)
    membership = db.get(Membership, student_membership.id)
    assert membership.credits == 3
    assert membership.credits == repo.sum_active_remaining(student_membership.id)
