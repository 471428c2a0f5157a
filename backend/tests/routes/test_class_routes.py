"""Tests for /api/v1/classes."""

from datetime import date, datetime, time, timedelta

from fastapi.testclient import TestClient
import pytz
from sqlalchemy.orm import Session

from app.core.enums import BookingStatus
from app.models import (
    Booking,
    ClassSession,
    CreditPackage,
    Membership,
    Notification,
    Organization,
)
from conftest import make_booking, make_class, make_membership, make_package, make_user, utc_in


def _iso(value: datetime) -> str:
    return value.isoformat()


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _next_monday() -> date:
    today = datetime.now(pytz.UTC).date()
    return today + timedelta(days=7 - today.weekday())


def _dst_change_monday(tz) -> date:
    """First upcoming Monday whose following Monday has a different UTC offset."""
    monday = _next_monday()
    for _ in range(60):
        before = tz.localize(datetime.combine(monday, time(12))).utcoffset()
        after = tz.localize(datetime.combine(monday + timedelta(days=7), time(12))).utcoffset()
        if before != after:
            return monday
        monday += timedelta(days=7)
    raise AssertionError(f"No offset change found for {tz}")


class TestCreateClass:
    def test_instructor_schedules_class_they_teach(
        self, client: TestClient, instructor, category, auth_headers_instructor
    ):
        start = utc_in(days=3).replace(microsecond=0)
        response = client.post(
            "/api/v1/classes",
            json={
                "title": "Evening Strength",
                "start_time": _iso(start),
                "end_time": _iso(start + timedelta(hours=1)),
                "capacity": 12,
                "category_id": category.id,
            },
            headers=auth_headers_instructor,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["instructor_id"] == instructor.id
        assert data["instructor_name"] == "Casey Coach"
        assert data["booked_count"] == 0
        assert data["category"] == {"id": category.id, "name": "Beginners"}
        assert data["is_cancelled"] is False

    def test_naive_times_are_read_as_utc(self, client: TestClient, auth_headers_owner):
        start = utc_in(days=3).replace(microsecond=0, tzinfo=None)
        response = client.post(
            "/api/v1/classes",
            json={
                "title": "Open Mat",
                "start_time": start.isoformat(),
                "end_time": (start + timedelta(minutes=90)).isoformat(),
                "capacity": 20,
            },
            headers=auth_headers_owner,
        )

        assert response.status_code == 201
        returned = _parse(response.json()["start_time"])
        assert returned == pytz.UTC.localize(start)

    def test_inverted_range_is_rejected(self, client: TestClient, auth_headers_owner):
        start = utc_in(days=3)
        response = client.post(
            "/api/v1/classes",
            json={
                "title": "Backwards",
                "start_time": _iso(start),
                "end_time": _iso(start - timedelta(hours=1)),
                "capacity": 5,
            },
            headers=auth_headers_owner,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TIME_RANGE"

    def test_past_class_is_rejected(self, client: TestClient, auth_headers_owner):
        start = utc_in(days=-1)
        response = client.post(
            "/api/v1/classes",
            json={
                "title": "Yesterday",
                "start_time": _iso(start),
                "end_time": _iso(start + timedelta(hours=1)),
                "capacity": 5,
            },
            headers=auth_headers_owner,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "CLASS_IN_PAST"

    def test_zero_capacity_is_validation_error(self, client: TestClient, auth_headers_owner):
        start = utc_in(days=1)
        response = client.post(
            "/api/v1/classes",
            json={
                "title": "Nobody",
                "start_time": _iso(start),
                "end_time": _iso(start + timedelta(hours=1)),
                "capacity": 0,
            },
            headers=auth_headers_owner,
        )

        assert response.status_code == 422

    def test_students_cannot_schedule(self, client: TestClient, auth_headers_student):
        start = utc_in(days=1)
        response = client.post(
            "/api/v1/classes",
            json={
                "title": "Sneaky",
                "start_time": _iso(start),
                "end_time": _iso(start + timedelta(hours=1)),
                "capacity": 5,
            },
            headers=auth_headers_student,
        )

        assert response.status_code == 403


class TestListAndSchedule:
    def test_staff_list_includes_cancelled_and_counts(
        self,
        client: TestClient,
        db: Session,
        organization,
        instructor,
        student,
        student_package,
        upcoming_class,
        auth_headers_owner,
    ):
        cancelled = make_class(db, organization, instructor, start=utc_in(days=4), title="Gone")
        cancelled.is_cancelled = True
        make_booking(db, student, upcoming_class, student_package)
        db.commit()

        response = client.get("/api/v1/classes", headers=auth_headers_owner)

        assert response.status_code == 200
        by_title = {item["title"]: item for item in response.json()}
        assert by_title["Morning Flow"]["booked_count"] == 1
        assert by_title["Gone"]["is_cancelled"] is True

    def test_window_filters_by_start_time(
        self, client: TestClient, db: Session, organization, instructor, auth_headers_owner
    ):
        make_class(db, organization, instructor, start=utc_in(days=1), title="Soon")
        make_class(db, organization, instructor, start=utc_in(days=10), title="Later")
        db.commit()

        response = client.get(
            "/api/v1/classes",
            params={"start": _iso(utc_in(days=5)), "end": _iso(utc_in(days=15))},
            headers=auth_headers_owner,
        )

        assert [item["title"] for item in response.json()] == ["Later"]

    def test_schedule_flags_availability_and_own_bookings(
        self,
        client: TestClient,
        db: Session,
        organization,
        instructor,
        student,
        student_package,
        auth_headers_student,
    ):
        tiny = make_class(db, organization, instructor, start=utc_in(days=1), capacity=1, title="Tiny")
        roomy = make_class(db, organization, instructor, start=utc_in(days=2), capacity=5, title="Roomy")
        hidden = make_class(db, organization, instructor, start=utc_in(days=3), title="Hidden")
        hidden.is_cancelled = True
        make_booking(db, student, tiny, student_package)
        db.commit()

        response = client.get("/api/v1/classes/schedule", headers=auth_headers_student)

        assert response.status_code == 200
        items = {item["id"]: item for item in response.json()}
        assert hidden.id not in items
        assert items[tiny.id]["is_full"] is True
        assert items[tiny.id]["available_slots"] == 0
        assert items[tiny.id]["is_booked_by_me"] is True
        assert items[roomy.id]["available_slots"] == 5
        assert items[roomy.id]["is_booked_by_me"] is False

    def test_other_gyms_classes_are_invisible(
        self, client: TestClient, db: Session, auth_headers_owner, upcoming_class
    ):
        rival_owner = make_user(db, "rival@example.com", "Rival Owner")
        rival = Organization(name="Rival", slug="rival-001", owner_id=rival_owner.id)
        db.add(rival)
        db.flush()
        foreign = make_class(db, rival, rival_owner, title="Their Class")
        db.commit()

        listed = client.get("/api/v1/classes", headers=auth_headers_owner).json()
        assert [item["id"] for item in listed] == [upcoming_class.id]

        response = client.get(f"/api/v1/classes/{foreign.id}", headers=auth_headers_owner)
        assert response.status_code == 404


class TestClassDetail:
    def test_detail_lists_roster(
        self,
        client: TestClient,
        db: Session,
        student,
        student_package,
        upcoming_class,
        auth_headers_instructor,
    ):
        make_booking(db, student, upcoming_class, student_package)
        db.commit()

        response = client.get(f"/api/v1/classes/{upcoming_class.id}", headers=auth_headers_instructor)

        assert response.status_code == 200
        data = response.json()
        assert data["booked_count"] == 1
        assert len(data["bookings"]) == 1
        assert data["bookings"][0]["student_name"] == "Sam Student"
        assert data["bookings"][0]["status"] == "CONFIRMED"


class TestDeleteClass:
    def test_delete_empty_class(self, client: TestClient, db: Session, upcoming_class, auth_headers_owner):
        response = client.delete(f"/api/v1/classes/{upcoming_class.id}", headers=auth_headers_owner)

        assert response.status_code == 204
        assert db.query(ClassSession).filter(ClassSession.id == upcoming_class.id).first() is None

    def test_delete_refused_with_confirmed_bookings(
        self, client: TestClient, db: Session, student, student_package, upcoming_class, auth_headers_owner
    ):
        make_booking(db, student, upcoming_class, student_package)
        db.commit()

        response = client.delete(f"/api/v1/classes/{upcoming_class.id}", headers=auth_headers_owner)

        assert response.status_code == 409
        assert response.json()["code"] == "CLASS_HAS_BOOKINGS"

    def test_instructor_cannot_delete(self, client: TestClient, upcoming_class, auth_headers_instructor):
        response = client.delete(
            f"/api/v1/classes/{upcoming_class.id}", headers=auth_headers_instructor
        )

        assert response.status_code == 403


class TestCancelClass:
    def test_cancel_refunds_every_confirmed_booking(
        self,
        client: TestClient,
        db: Session,
        organization,
        student,
        student_membership,
        student_package,
        upcoming_class,
        auth_headers_owner,
    ):
        other = make_user(db, "other@example.com", "Olga Other")
        other_membership = make_membership(db, other, organization)
        other_package = make_package(db, other_membership, amount=3)
        make_booking(db, student, upcoming_class, student_package)
        make_booking(db, other, upcoming_class, other_package)
        db.commit()
        assert student_membership.credits == 4

        response = client.patch(
            f"/api/v1/classes/{upcoming_class.id}/cancel", headers=auth_headers_owner
        )

        assert response.status_code == 200
        assert response.json() == {
            "class_id": upcoming_class.id,
            "cancelled_bookings": 2,
            "refunded": 2,
        }
        db.expire_all()
        assert db.get(Membership, student_membership.id).credits == 5
        assert db.get(CreditPackage, student_package.id).remaining_amount == 5
        statuses = {b.status for b in db.query(Booking).all()}
        assert statuses == {BookingStatus.CANCELLED.value}
        assert all(b.credit_refunded for b in db.query(Booking).all())

        warnings = db.query(Notification).filter(Notification.title == "Class cancelled").all()
        assert {n.user_id for n in warnings} == {student.id, other.id}
        assert all(n.type == "WARNING" for n in warnings)

    def test_cancel_twice_is_conflict(self, client: TestClient, upcoming_class, auth_headers_owner):
        first = client.patch(f"/api/v1/classes/{upcoming_class.id}/cancel", headers=auth_headers_owner)
        assert first.status_code == 200
        assert first.json()["cancelled_bookings"] == 0

        second = client.patch(
            f"/api/v1/classes/{upcoming_class.id}/cancel", headers=auth_headers_owner
        )
        assert second.status_code == 409
        assert second.json()["code"] == "CLASS_ALREADY_CANCELLED"

    def test_cannot_cancel_started_class(
        self, client: TestClient, db: Session, organization, instructor, auth_headers_owner
    ):
        running = make_class(db, organization, instructor, start=utc_in(minutes=-10))
        db.commit()

        response = client.patch(f"/api/v1/classes/{running.id}/cancel", headers=auth_headers_owner)

        assert response.status_code == 400
        assert response.json()["code"] == "CLASS_STARTED"


class TestCloneWeek:
    def test_clone_copies_classes_and_skips_existing(
        self, client: TestClient, db: Session, organization, instructor, auth_headers_owner
    ):
        source_monday = _next_monday()
        target_monday = source_monday + timedelta(days=7)
        start = pytz.UTC.localize(datetime.combine(source_monday, datetime.min.time())) + timedelta(
            days=1, hours=9
        )
        make_class(db, organization, instructor, start=start, title="Tuesday Flow")
        make_class(db, organization, instructor, start=start + timedelta(days=2), title="Thursday Lift")
        db.commit()

        payload = {
            "source_week_start": source_monday.isoformat(),
            "target_week_start": target_monday.isoformat(),
        }
        response = client.post("/api/v1/classes/clone-week", json=payload, headers=auth_headers_owner)

        assert response.status_code == 200
        data = response.json()
        assert data["created"] == 2
        assert data["skipped"] == 0
        starts = sorted(_parse(c["start_time"]) for c in data["classes"])
        assert starts[0] == start + timedelta(days=7)

        again = client.post("/api/v1/classes/clone-week", json=payload, headers=auth_headers_owner)
        assert again.json()["created"] == 0
        assert again.json()["skipped"] == 2

    def test_copies_that_would_start_in_the_past_are_skipped(
        self, client: TestClient, db: Session, organization, instructor, auth_headers_owner
    ):
        source_monday = _next_monday()
        start = pytz.UTC.localize(datetime.combine(source_monday, time(9)))
        make_class(db, organization, instructor, start=start, title="Monday Flow")
        make_class(db, organization, instructor, start=start + timedelta(days=3), title="Thursday Lift")
        db.commit()

        response = client.post(
            "/api/v1/classes/clone-week",
            json={
                "source_week_start": source_monday.isoformat(),
                "target_week_start": (source_monday - timedelta(days=14)).isoformat(),
            },
            headers=auth_headers_owner,
        )

        assert response.status_code == 200
        assert response.json()["created"] == 0
        assert response.json()["skipped"] == 2
        assert db.query(ClassSession).count() == 2

    def test_week_follows_gym_timezone_and_keeps_wall_clock(
        self, client: TestClient, db: Session, organization, instructor, auth_headers_owner
    ):
        tz = pytz.timezone("America/New_York")
        organization.timezone = "America/New_York"
        source_monday = _dst_change_monday(tz)
        target_monday = source_monday + timedelta(days=7)

        def local(day: date, hour: int, minute: int = 0) -> datetime:
            return tz.localize(datetime.combine(day, time(hour, minute))).astimezone(pytz.UTC)

        # Sunday night before the week: inside a UTC Monday window, outside the local one
        make_class(
            db,
            organization,
            instructor,
            start=local(source_monday - timedelta(days=1), 23, 30),
            title="Too Early",
        )
        make_class(
            db, organization, instructor, start=local(source_monday, 0, 30), title="Midnight Yoga"
        )
        # Last Sunday of the week: already next Monday in UTC
        make_class(
            db,
            organization,
            instructor,
            start=local(source_monday + timedelta(days=6), 22),
            title="Sunday Stretch",
        )
        db.commit()

        response = client.post(
            "/api/v1/classes/clone-week",
            json={
                "source_week_start": source_monday.isoformat(),
                "target_week_start": target_monday.isoformat(),
            },
            headers=auth_headers_owner,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["created"] == 2
        copies = {c["title"]: _parse(c["start_time"]) for c in data["classes"]}
        assert set(copies) == {"Midnight Yoga", "Sunday Stretch"}
        assert copies["Midnight Yoga"] == local(target_monday, 0, 30)
        assert copies["Sunday Stretch"] == local(target_monday + timedelta(days=6), 22)
        # The offset changes between the two weeks, so UTC moves while local time does not
        assert copies["Midnight Yoga"] - local(source_monday, 0, 30) != timedelta(days=7)
        assert copies["Midnight Yoga"].astimezone(tz).strftime("%a %H:%M") == "Mon 00:30"

    def test_same_week_is_rejected(self, client: TestClient, auth_headers_owner):
        monday = _next_monday().isoformat()
        response = client.post(
            "/api/v1/classes/clone-week",
            json={"source_week_start": monday, "target_week_start": monday},
            headers=auth_headers_owner,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "SAME_WEEK"
