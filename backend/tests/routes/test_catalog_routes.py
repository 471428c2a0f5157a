"""Tests for categories, organization configuration and the user profile."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.auth import verify_password
from app.core.enums import MembershipRole
from app.models import Category, Membership, Organization
from conftest import headers_for, make_class, make_user


class TestCategories:
    def test_owner_creates_category(self, client: TestClient, db: Session, organization, auth_headers_owner):
        response = client.post(
            "/api/v1/categories", json={"name": "  Advanced  "}, headers=auth_headers_owner
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Advanced"
        assert data["organization_id"] == organization.id

    def test_duplicate_name_in_same_gym_is_conflict(
        self, client: TestClient, category, auth_headers_owner
    ):
        response = client.post(
            "/api/v1/categories", json={"name": "Beginners"}, headers=auth_headers_owner
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CATEGORY_EXISTS"

    def test_instructor_cannot_create_category(self, client: TestClient, auth_headers_instructor):
        response = client.post(
            "/api/v1/categories", json={"name": "Kids"}, headers=auth_headers_instructor
        )

        assert response.status_code == 403

    def test_members_list_only_their_gym(
        self, client: TestClient, db: Session, category, auth_headers_student
    ):
        other_owner = make_user(db, "rival@example.com", "Rival Owner")
        other_org = Organization(name="Rival Gym", slug="rival-gym-001", owner_id=other_owner.id)
        db.add(other_org)
        db.flush()
        db.add(Category(organization_id=other_org.id, name="Rival Category"))
        db.commit()

        response = client.get("/api/v1/categories", headers=auth_headers_student)

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Beginners"]

    def test_get_and_rename(self, client: TestClient, category, auth_headers_owner):
        response = client.get(f"/api/v1/categories/{category.id}", headers=auth_headers_owner)
        assert response.status_code == 200
        assert response.json()["name"] == "Beginners"

        response = client.patch(
            f"/api/v1/categories/{category.id}",
            json={"name": "Novices"},
            headers=auth_headers_owner,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Novices"

    def test_category_of_another_gym_is_not_found(
        self, client: TestClient, db: Session, auth_headers_owner, organization
    ):
        other_owner = make_user(db, "rival@example.com", "Rival Owner")
        other_org = Organization(name="Rival Gym", slug="rival-gym-001", owner_id=other_owner.id)
        db.add(other_org)
        db.flush()
        foreign = Category(organization_id=other_org.id, name="Secret")
        db.add(foreign)
        db.commit()

        response = client.get(f"/api/v1/categories/{foreign.id}", headers=auth_headers_owner)

        assert response.status_code == 404

    def test_delete_clears_member_assignments(
        self, client: TestClient, db: Session, category, student_membership, auth_headers_owner
    ):
        student_membership.category_id = category.id
        db.commit()

        response = client.delete(f"/api/v1/categories/{category.id}", headers=auth_headers_owner)

        assert response.status_code == 204
        db.expire_all()
        assert db.query(Category).filter(Category.id == category.id).first() is None
        membership = db.query(Membership).filter(Membership.id == student_membership.id).one()
        assert membership.category_id is None

    def test_delete_refused_while_classes_use_it(
        self, client: TestClient, db: Session, organization, instructor, category, auth_headers_owner
    ):
        make_class(db, organization, instructor, category=category)
        db.commit()

        response = client.delete(f"/api/v1/categories/{category.id}", headers=auth_headers_owner)

        assert response.status_code == 409
        assert response.json()["code"] == "CATEGORY_IN_USE"


class TestOrganizationConfig:
    def test_members_read_config_with_defaults(self, client: TestClient, auth_headers_student):
        response = client.get("/api/v1/organizations/config", headers=auth_headers_student)

        assert response.status_code == 200
        assert response.json() == {
            "name": "Iron Temple",
            "slug": "iron-temple-042",
            "slot_duration_minutes": 60,
            "cancellation_window_hours": 2,
            "open_hour": 7,
            "close_hour": 22,
            "timezone": "UTC",
        }

    def test_partial_update_keeps_other_fields(self, client: TestClient, auth_headers_owner):
        response = client.patch(
            "/api/v1/organizations/config",
            json={"cancellation_window_hours": 12, "timezone": "Europe/Madrid"},
            headers=auth_headers_owner,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["cancellation_window_hours"] == 12
        assert data["timezone"] == "Europe/Madrid"
        assert data["slot_duration_minutes"] == 60

    def test_inverted_opening_hours_rejected(self, client: TestClient, auth_headers_owner):
        response = client.patch(
            "/api/v1/organizations/config",
            json={"open_hour": 23},
            headers=auth_headers_owner,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_OPENING_HOURS"

    def test_out_of_range_values_are_validation_errors(self, client: TestClient, auth_headers_owner):
        for payload in (
            {"slot_duration_minutes": 5},
            {"cancellation_window_hours": 100},
            {"timezone": "Mars/Olympus_Mons"},
        ):
            response = client.patch(
                "/api/v1/organizations/config", json=payload, headers=auth_headers_owner
            )
            assert response.status_code == 422, payload

    def test_explicit_nulls_are_validation_errors(
        self, client: TestClient, db: Session, organization, auth_headers_owner
    ):
        for payload in ({"open_hour": None}, {"timezone": None}, {"slot_duration_minutes": None}):
            response = client.patch(
                "/api/v1/organizations/config", json=payload, headers=auth_headers_owner
            )
            assert response.status_code == 422, payload
            assert response.json()["code"] == "validation_error"

        db.refresh(organization)
        assert organization.timezone == "UTC"
        assert organization.open_hour == 7

    def test_students_cannot_update(self, client: TestClient, auth_headers_student):
        response = client.patch(
            "/api/v1/organizations/config",
            json={"cancellation_window_hours": 0},
            headers=auth_headers_student,
        )

        assert response.status_code == 403

    def test_user_without_gym_is_forbidden(self, client: TestClient, db: Session):
        user = make_user(db, "loner@example.com", "Lonely")
        db.commit()

        response = client.get(
            "/api/v1/organizations/config",
            headers=headers_for(user, None, MembershipRole.STUDENT),
        )

        assert response.status_code == 403


class TestUserProfile:
    def test_read_profile(self, client: TestClient, student, auth_headers_student):
        response = client.get("/api/v1/users/me", headers=auth_headers_student)

        assert response.status_code == 200
        assert response.json() == {
            "id": student.id,
            "email": "student@example.com",
            "full_name": "Sam Student",
        }

    def test_update_name_and_password(
        self, client: TestClient, db: Session, student, auth_headers_student
    ):
        response = client.patch(
            "/api/v1/users/me",
            json={"full_name": "Samantha Student", "password": "brand-new-pass"},
            headers=auth_headers_student,
        )

        assert response.status_code == 200
        assert response.json()["full_name"] == "Samantha Student"
        db.refresh(student)
        assert verify_password("brand-new-pass", student.hashed_password)

    def test_empty_update_is_rejected(self, client: TestClient, auth_headers_student):
        response = client.patch("/api/v1/users/me", json={}, headers=auth_headers_student)

        assert response.status_code == 422

    def test_unknown_fields_are_rejected(self, client: TestClient, auth_headers_student):
        response = client.patch(
            "/api/v1/users/me",
            json={"full_name": "Sam", "email": "new@example.com"},
            headers=auth_headers_student,
        )

        assert response.status_code == 422
