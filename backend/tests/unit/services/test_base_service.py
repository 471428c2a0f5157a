"""Unit tests for the BaseService transaction and timing helpers."""

from unittest.mock import Mock, patch

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import ServiceException, ValidationException
from app.services.base import BaseService


class _SampleService(BaseService):
    @BaseService.measure_operation("sample")
    def sample(self, value):
        return value * 2


def test_transaction_commits_on_success():
    service = BaseService(Mock())

    with service.transaction():
        pass

    service.db.commit.assert_called_once()
    service.db.rollback.assert_not_called()


def test_database_errors_become_service_errors_with_cause():
    service = BaseService(Mock())
    failure = OperationalError("UPDATE organizations", {}, Exception("locked"))

    with pytest.raises(ServiceException) as exc_info:
        with service.transaction():
            raise failure

    assert exc_info.value.__cause__ is failure
    service.db.rollback.assert_called_once()


def test_domain_errors_roll_back_and_propagate():
    service = BaseService(Mock())

    with pytest.raises(ValidationException):
        with service.transaction():
            raise ValidationException("bad input")

    service.db.rollback.assert_called_once()
    service.db.commit.assert_not_called()


def test_slow_operations_are_logged():
    service = _SampleService(Mock())
    service.logger = Mock()

    with patch("app.services.base.time.time", side_effect=[0.0, 5.0]):
        assert service.sample(21) == 42

    service.logger.warning.assert_called_once()
    assert "sample" in service.logger.warning.call_args.args[0]


def test_fast_operations_are_not_logged():
    service = _SampleService(Mock())
    service.logger = Mock()

    with patch("app.services.base.time.time", side_effect=[0.0, 0.1]):
        service.sample(1)

    service.logger.warning.assert_not_called()
