"""Tests for the dashboard, notification inbox, health and root endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.enums import BookingStatus, MembershipRole, NotificationType
from app.models import Notification
from app.services.notification_service import NotificationService
from conftest import headers_for, make_booking, make_class, make_package, make_user, utc_in


class TestDashboard:
    def test_staff_cards(
        self,
        client: TestClient,
        db: Session,
        organization,
        instructor,
        student,
        student_membership,
        auth_headers_owner,
    ):
        make_package(db, student_membership, amount=3, expires_at=utc_in(days=2))
        make_package(db, student_membership, amount=3, expires_at=utc_in(days=40))
        db.commit()

        response = client.get("/api/v1/dashboard/stats", headers=auth_headers_owner)

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "OWNER"
        assert data["empty"] is False
        cards = data["cards"]
        assert cards["active_students"] == 1
        assert cards["expiring_packs"] == 1
        assert cards["register_slug"] == organization.slug
        assert cards["classes_today"] >= 0

    def test_student_cards(
        self,
        client: TestClient,
        db: Session,
        organization,
        instructor,
        student,
        student_package,
        upcoming_class,
        auth_headers_student,
    ):
        make_booking(db, student, upcoming_class, student_package)
        later = make_class(db, organization, instructor, start=utc_in(days=6), title="Later One")
        make_booking(db, student, later, student_package, status=BookingStatus.CANCELLED)
        db.commit()

        response = client.get("/api/v1/dashboard/stats", headers=auth_headers_student)

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "STUDENT"
        cards = data["cards"]
        assert cards["credits"] == 3
        assert cards["next_class"]["title"] == "Morning Flow"
        assert cards["next_expiration"] is not None
        assert cards["classes_this_month"] == 1

    def test_user_without_gym_gets_empty_state(self, client: TestClient, db: Session):
        user = make_user(db, "loner@example.com", "Lonely")
        db.commit()

        response = client.get(
            "/api/v1/dashboard/stats", headers=headers_for(user, None, MembershipRole.STUDENT)
        )

        assert response.status_code == 200
        assert response.json()["empty"] is True
        assert response.json()["message"] == "You are not part of any gym yet"
        assert response.json()["cards"] is None


class TestNotifications:
    def _seed(self, db: Session, user_id: str, count: int) -> None:
        service = NotificationService(db)
        for i in range(count):
            service.create(
                user_id=user_id,
                title=f"Notice {i}",
                message="Something happened",
                type=NotificationType.INFO,
            )
        db.commit()

    def test_list_is_capped_and_counts_unread(
        self, client: TestClient, db: Session, student, auth_headers_student
    ):
        self._seed(db, student.id, 25)

        response = client.get("/api/v1/notifications", headers=auth_headers_student)

        assert response.status_code == 200
        data = response.json()
        assert len(data["notifications"]) == 20
        assert data["unread_count"] == 25

    def test_mark_one_read(self, client: TestClient, db: Session, student, auth_headers_student):
        self._seed(db, student.id, 2)
        target = db.query(Notification).filter(Notification.user_id == student.id).first()

        response = client.patch(
            f"/api/v1/notifications/{target.id}/read", headers=auth_headers_student
        )

        assert response.status_code == 200
        assert response.json()["is_read"] is True
        listing = client.get("/api/v1/notifications", headers=auth_headers_student).json()
        assert listing["unread_count"] == 1

    def test_cannot_read_someone_elses_notification(
        self, client: TestClient, db: Session, owner, auth_headers_student
    ):
        self._seed(db, owner.id, 1)
        foreign = db.query(Notification).filter(Notification.user_id == owner.id).one()

        response = client.patch(
            f"/api/v1/notifications/{foreign.id}/read", headers=auth_headers_student
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOTIFICATION_NOT_FOUND"

    def test_mark_all_read(self, client: TestClient, db: Session, student, owner, auth_headers_student):
        self._seed(db, student.id, 3)
        self._seed(db, owner.id, 2)

        response = client.patch("/api/v1/notifications/read-all", headers=auth_headers_student)

        assert response.status_code == 200
        assert response.json() == {"updated": 3}
        db.expire_all()
        unread_owner = (
            db.query(Notification)
            .filter(Notification.user_id == owner.id, Notification.is_read.is_(False))
            .count()
        )
        assert unread_owner == 2

    def test_requires_authentication(self, client: TestClient, db: Session):
        assert client.get("/api/v1/notifications").status_code == 401


class TestHealthAndRoot:
    def test_health(self, client: TestClient, student):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "coachplanner-api"
        assert data["users"] == 2
        assert data["timestamp"].endswith("Z")

    def test_root(self, client: TestClient, db: Session):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"
        assert "CoachPlanner" in response.json()["message"]

    def test_unknown_path_is_problem_json(self, client: TestClient, db: Session):
        response = client.get("/api/v1/nowhere")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["instance"] == "/api/v1/nowhere"
