from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from carebook.core.exceptions import NotFoundException, ServiceException
from carebook.services.base import BaseService


class LedgerService(BaseService):
    @BaseService.measure_operation("post_entry")
    def post_entry(self, fail_with=None):
        with self.transaction():
            if fail_with:
                raise fail_with
            return "ok"


@pytest.fixture
def service():
    return LedgerService(Mock(spec=Session))


def test_commit_on_success(service):
    assert service.post_entry() == "ok"
    service.db.commit.assert_called_once()
    service.db.rollback.assert_not_called()


def test_domain_errors_roll_back_and_propagate(service):
    with pytest.raises(NotFoundException):
        service.post_entry(fail_with=NotFoundException("missing"))
    service.db.rollback.assert_called_once()
    service.db.commit.assert_not_called()


def test_database_errors_become_service_exceptions(service):
    with pytest.raises(ServiceException):
        service.post_entry(fail_with=OperationalError("INSERT", {}, Exception("locked")))
    service.db.rollback.assert_called_once()


def test_measure_operation_counts_outcomes(service):
    before = service.get_metrics().get("post_entry", {}).copy()

    service.post_entry()
    with pytest.raises(NotFoundException):
        service.post_entry(fail_with=NotFoundException("missing"))

    after = service.get_metrics()["post_entry"]
    assert after["count"] == before.get("count", 0) + 2
    assert after["success_count"] == before.get("success_count", 0) + 1
    assert after["failure_count"] == before.get("failure_count", 0) + 1
