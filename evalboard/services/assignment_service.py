"""
Assignment Service - EvalBoard
evalboard/services/assignment_service.py

Pairs active evaluators with submissions. The pair (submission, evaluator)
is unique: the insert-if-absent happens in one MERGE statement in the
repository, so two concurrent assigns of the same pair cannot both succeed.
"""

from typing import Iterable, List, Optional
from uuid import UUID

import structlog

from evalboard.core.exceptions import (
    AlreadyAssignedException,
    EntityNotFoundException,
    EvaluatorNotActiveException,
)
from evalboard.models.enumerations import (
    COMPLETED_EVALUATION_STATUSES,
    EvaluatorStatus,
    SubmissionEvaluationStatus,
    SubmissionStatus,
)
from evalboard.models.evaluation import Evaluation
from evalboard.models.evaluator import Evaluator
from evalboard.models.submission import SubmissionEvaluationStatusResponse
from evalboard.repositories.evaluation_repository import EvaluationRepository
from evalboard.repositories.evaluator_repository import EvaluatorRepository
from evalboard.services.submission_service import SubmissionService

logger = structlog.get_logger(__name__)


def rollup_status(evaluations: Iterable[Evaluation]) -> SubmissionEvaluationStatus:
    """
    Coarse progress of a submission: completed as soon as any evaluation is
    submitted or published, assigned if any evaluation exists, else not started.
    """
    evaluations = list(evaluations)
    if any(e.status in COMPLETED_EVALUATION_STATUSES for e in evaluations):
        return SubmissionEvaluationStatus.COMPLETED
    if evaluations:
        return SubmissionEvaluationStatus.ASSIGNED
    return SubmissionEvaluationStatus.NOT_STARTED


class AssignmentService:
    """Assign evaluators to submissions and report evaluation progress."""

    def __init__(
        self,
        evaluation_repo: Optional[EvaluationRepository] = None,
        evaluator_repo: Optional[EvaluatorRepository] = None,
        submission_service: Optional[SubmissionService] = None,
    ):
        self.evaluation_repo = evaluation_repo or EvaluationRepository()
        self.evaluator_repo = evaluator_repo or EvaluatorRepository()
        self.submission_service = submission_service or SubmissionService()

    def assign(self, submission_id: UUID, evaluator_id: UUID) -> Evaluation:
        """
        Create a draft evaluation for the pair.

        Raises:
            EntityNotFoundException: submission or evaluator missing
            EvaluatorNotActiveException: evaluator is pending or rejected
            AlreadyAssignedException: the pair already has an evaluation
        """
        self.submission_service.get(submission_id)

        row = self.evaluator_repo.get_by_id(evaluator_id)
        if row is None:
            raise EntityNotFoundException("Evaluator", evaluator_id)
        evaluator = Evaluator(**row)
        if evaluator.status is not EvaluatorStatus.ACTIVE:
            raise EvaluatorNotActiveException(evaluator_id, evaluator.status.value)

        created = self.evaluation_repo.create_if_absent(submission_id, evaluator_id)
        if created is None:
            raise AlreadyAssignedException(submission_id, evaluator_id)

        self.submission_service.advance(submission_id, SubmissionStatus.ASSIGNED)

        evaluation = Evaluation(**created)
        logger.info(
            "evaluator_assigned",
            evaluation_id=str(evaluation.id),
            submission_id=str(submission_id),
            evaluator_id=str(evaluator_id),
        )
        return evaluation

    def list_assignable(self, submission_id: UUID, search: Optional[str] = None) -> List[Evaluator]:
        """Active evaluators not yet holding an evaluation for the submission."""
        self.submission_service.get(submission_id)

        assigned = {
            row["evaluator_id"]
            for row in self.evaluation_repo.get_all(submission_id=submission_id)
        }
        active = [Evaluator(**row) for row in self.evaluator_repo.get_all(status=EvaluatorStatus.ACTIVE)]
        return [e for e in active if e.id not in assigned and e.matches(search)]

    def get_evaluation_status(self, submission_id: UUID) -> SubmissionEvaluationStatusResponse:
        self.submission_service.get(submission_id)
        evaluations = [
            Evaluation(**row) for row in self.evaluation_repo.get_all(submission_id=submission_id)
        ]
        return SubmissionEvaluationStatusResponse(
            submission_id=submission_id,
            status=rollup_status(evaluations),
            evaluation_count=len(evaluations),
            completed_count=sum(1 for e in evaluations if e.status in COMPLETED_EVALUATION_STATUSES),
        )
