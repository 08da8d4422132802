# tests/test_approval_service.py

"""
Approval Service Tests - evaluator registration and pending decisions
"""

from uuid import uuid4

import pytest

from evalboard.core.exceptions import (
    DuplicateEntityException,
    EntityNotFoundException,
    NotPendingException,
)
from evalboard.models.enumerations import EvaluatorStatus
from evalboard.models.evaluator import EvaluatorCreate


@pytest.fixture
def pending_evaluator(approval_service):
    return approval_service.register(
        EvaluatorCreate(name="Alan Turing", email="Alan@Example.com", qualification="PhD")
    )


class TestRegister:

    def test_register_starts_pending(self, pending_evaluator):
        assert pending_evaluator.status is EvaluatorStatus.PENDING
        assert pending_evaluator.email == "alan@example.com"

    def test_duplicate_email_rejected(self, approval_service, pending_evaluator):
        with pytest.raises(DuplicateEntityException):
            approval_service.register(EvaluatorCreate(name="Someone Else", email="alan@example.com"))


class TestDecisions:

    def test_approve(self, approval_service, pending_evaluator):
        assert approval_service.approve(pending_evaluator.id).status is EvaluatorStatus.ACTIVE

    def test_reject(self, approval_service, pending_evaluator):
        assert approval_service.reject(pending_evaluator.id).status is EvaluatorStatus.REJECTED

    def test_approve_after_reject_fails(self, approval_service, pending_evaluator):
        approval_service.reject(pending_evaluator.id)
        with pytest.raises(NotPendingException) as exc_info:
            approval_service.approve(pending_evaluator.id)
        assert exc_info.value.status == "rejected"
        assert approval_service.get(pending_evaluator.id).status is EvaluatorStatus.REJECTED

    def test_approve_twice_fails(self, approval_service, pending_evaluator):
        approval_service.approve(pending_evaluator.id)
        with pytest.raises(NotPendingException):
            approval_service.approve(pending_evaluator.id)

    def test_lost_race_reports_not_pending(self, approval_service, evaluator_repo, pending_evaluator, monkeypatch):
        def other_admin_first(evaluator_id, expected, new_status):
            evaluator_repo.rows[evaluator_id]["status"] = EvaluatorStatus.REJECTED
            return False

        monkeypatch.setattr(evaluator_repo, "update_status_if", other_admin_first)
        with pytest.raises(NotPendingException) as exc_info:
            approval_service.approve(pending_evaluator.id)
        assert exc_info.value.status == "rejected"

    def test_unknown_evaluator(self, approval_service):
        with pytest.raises(EntityNotFoundException):
            approval_service.approve(uuid4())


class TestListing:

    def test_pending_and_active_lists(self, approval_service, evaluator_repo, pending_evaluator):
        evaluator_repo.add("Grace Hopper", qualification="Rear Admiral")

        assert [e.name for e in approval_service.list_pending()] == ["Alan Turing"]
        assert [e.name for e in approval_service.list_active()] == ["Grace Hopper"]
        assert [e.name for e in approval_service.list_active("admiral")] == ["Grace Hopper"]
        assert approval_service.list_active("turing") == []
        assert len(approval_service.list_all()) == 2
