"""Unit tests for BookingService guard ordering, using mocked repositories."""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from app.core.exceptions import (
    CancellationWindowClosedException,
    ClassFullException,
    ConflictException,
    InsufficientCreditsException,
    NotFoundException,
)
from app.core.timezone_utils import utc_now
from app.services.booking_service import BookingService


def _service(**overrides) -> BookingService:
    repos = {
        "booking_repository": Mock(),
        "class_session_repository": Mock(),
        "membership_repository": Mock(),
        "credit_package_repository": Mock(),
        "organization_repository": Mock(),
        "notification_service": Mock(),
        "credit_package_service": Mock(),
    }
    repos.update(overrides)
    return BookingService(Mock(), **repos)


def _session(**fields):
    defaults = {
        "id": "class-1",
        "title": "Morning Flow",
        "capacity": 10,
        "is_cancelled": False,
        "category_id": None,
        "start_time": utc_now() + timedelta(days=1),
    }
    defaults.update(fields)
    return Mock(**defaults)


class TestCreateBookingGuards:
    def test_not_a_member(self):
        service = _service()
        service.membership_repository.get_for_user_for_update.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            service.create_booking("u1", "org1", "class-1")

        assert exc_info.value.code == "MEMBERSHIP_NOT_FOUND"
        service.db.rollback.assert_called_once()

    def test_balance_checked_before_class_lookup(self):
        service = _service()
        service.membership_repository.get_for_user_for_update.return_value = Mock(credits=0)

        with pytest.raises(InsufficientCreditsException):
            service.create_booking("u1", "org1", "class-1")

        service.class_session_repository.get_in_organization_for_update.assert_not_called()

    def test_capacity_checked_before_duplicate(self):
        service = _service()
        service.membership_repository.get_for_user_for_update.return_value = Mock(
            credits=3, category_id=None
        )
        service.class_session_repository.get_in_organization_for_update.return_value = _session(
            capacity=2
        )
        service.booking_repository.count_confirmed.return_value = 2

        with pytest.raises(ClassFullException):
            service.create_booking("u1", "org1", "class-1")

        service.booking_repository.get_confirmed_for_user.assert_not_called()

    def test_already_booked(self):
        service = _service()
        service.membership_repository.get_for_user_for_update.return_value = Mock(
            credits=3, category_id=None
        )
        service.class_session_repository.get_in_organization_for_update.return_value = _session()
        service.booking_repository.count_confirmed.return_value = 0
        service.booking_repository.get_confirmed_for_user.return_value = Mock()

        with pytest.raises(ConflictException) as exc_info:
            service.create_booking("u1", "org1", "class-1")

        assert exc_info.value.code == "ALREADY_BOOKED"

    def test_success_debits_package_and_membership(self):
        service = _service()
        membership = Mock(id="m1", credits=3, category_id=None)
        package = Mock(id="p1", remaining_amount=2)
        service.membership_repository.get_for_user_for_update.return_value = membership
        service.class_session_repository.get_in_organization_for_update.return_value = _session()
        service.booking_repository.count_confirmed.return_value = 0
        service.booking_repository.get_confirmed_for_user.return_value = None
        service.credit_package_repository.get_first_usable_for_update.return_value = package
        service.booking_repository.create.return_value = Mock(id="b1")

        booking = service.create_booking("u1", "org1", "class-1")

        assert booking.id == "b1"
        assert membership.credits == 2
        assert package.remaining_amount == 1
        service.notification_service.create.assert_called_once()
        service.db.commit.assert_called_once()


class TestCancelBookingWindow:
    def test_window_closed(self):
        service = _service()
        service.booking_repository.get_confirmed_for_user.return_value = Mock(id="b1")
        service.class_session_repository.get_in_organization.return_value = _session(
            start_time=utc_now() + timedelta(hours=1)
        )
        service.organization_repository.get_by_id.return_value = Mock(cancellation_window_hours=2)

        with pytest.raises(CancellationWindowClosedException) as exc_info:
            service.cancel_booking("u1", "org1", "class-1")

        assert exc_info.value.details == {"cancellation_window_hours": 2}
        service.credit_package_service.restore_credit.assert_not_called()

    def test_refund_flag_follows_restore(self):
        service = _service()
        booking = Mock(id="b1", credit_refunded=False)
        service.booking_repository.get_confirmed_for_user.return_value = booking
        service.class_session_repository.get_in_organization.return_value = _session()
        service.organization_repository.get_by_id.return_value = Mock(cancellation_window_hours=2)
        service.credit_package_service.restore_credit.return_value = False

        result = service.cancel_booking("u1", "org1", "class-1")

        assert result.status == "CANCELLED"
        assert result.credit_refunded is False
