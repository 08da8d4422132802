"""
Approval Service - EvalBoard
evalboard/services/approval_service.py

Evaluator accounts start pending and are approved (active) or rejected by
an administrator exactly once.
"""

from typing import List, Optional
from uuid import UUID

import structlog

from evalboard.core.exceptions import (
    DuplicateEntityException,
    EntityNotFoundException,
    NotPendingException,
)
from evalboard.models.enumerations import EvaluatorStatus
from evalboard.models.evaluator import Evaluator, EvaluatorCreate
from evalboard.repositories.evaluator_repository import EvaluatorRepository

logger = structlog.get_logger(__name__)


class ApprovalService:
    """Evaluator registration and the pending -> active | rejected decision."""

    def __init__(self, evaluator_repo: Optional[EvaluatorRepository] = None):
        self.evaluator_repo = evaluator_repo or EvaluatorRepository()

    def register(self, payload: EvaluatorCreate) -> Evaluator:
        row = self.evaluator_repo.create_if_email_free(
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            qualification=payload.qualification,
            experience=payload.experience,
        )
        if row is None:
            raise DuplicateEntityException(f"Evaluator with email {payload.email} already exists")
        evaluator = Evaluator(**row)
        logger.info("evaluator_registered", evaluator_id=str(evaluator.id))
        return evaluator

    def get(self, evaluator_id: UUID) -> Evaluator:
        row = self.evaluator_repo.get_by_id(evaluator_id)
        if row is None:
            raise EntityNotFoundException("Evaluator", evaluator_id)
        return Evaluator(**row)

    def list_all(self) -> List[Evaluator]:
        return [Evaluator(**row) for row in self.evaluator_repo.get_all()]

    def list_pending(self) -> List[Evaluator]:
        return [Evaluator(**row) for row in self.evaluator_repo.get_all(status=EvaluatorStatus.PENDING)]

    def list_active(self, search: Optional[str] = None) -> List[Evaluator]:
        active = [Evaluator(**row) for row in self.evaluator_repo.get_all(status=EvaluatorStatus.ACTIVE)]
        return [e for e in active if e.matches(search)]

    def approve(self, evaluator_id: UUID) -> Evaluator:
        return self._decide(evaluator_id, EvaluatorStatus.ACTIVE)

    def reject(self, evaluator_id: UUID) -> Evaluator:
        return self._decide(evaluator_id, EvaluatorStatus.REJECTED)

    def _decide(self, evaluator_id: UUID, decision: EvaluatorStatus) -> Evaluator:
        evaluator = self.get(evaluator_id)
        if evaluator.status is not EvaluatorStatus.PENDING:
            raise NotPendingException(evaluator_id, evaluator.status.value)

        if not self.evaluator_repo.update_status_if(evaluator_id, EvaluatorStatus.PENDING, decision):
            # Another admin decided first
            latest = self.get(evaluator_id)
            raise NotPendingException(evaluator_id, latest.status.value)

        logger.info("evaluator_decided", evaluator_id=str(evaluator_id), status=decision.value)
        return self.get(evaluator_id)
