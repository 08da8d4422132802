"""
Evaluation Service - EvalBoard
evalboard/services/evaluation_service.py

Drives an evaluation through draft -> submitted -> published.

Every mutating operation validates the whole request first and then issues a
single compare-and-set write, so a rejected request leaves the stored
evaluation untouched. When a write loses a race the evaluation is re-read:
if the other writer already reached the requested state the call succeeds,
otherwise it fails with the lifecycle error for the state actually found.
"""

from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

import structlog

from evalboard.config import get_settings
from evalboard.core.exceptions import (
    AlreadyAssignedException,
    EntityNotFoundException,
    EvaluatorNotActiveException,
    FeedbackTooShortException,
    InvalidScoreException,
    InvalidTransitionException,
    NotEditableException,
    NotOwnerException,
)
from evalboard.models.criteria import CRITERION_IDS
from evalboard.models.enumerations import (
    COMPLETED_EVALUATION_STATUSES,
    EvaluationStatus,
    EvaluatorStatus,
    SubmissionStatus,
)
from evalboard.models.evaluation import Evaluation, EvaluatorAssignments, TeamFeedbackItem
from evalboard.models.evaluator import Evaluator
from evalboard.repositories.evaluation_repository import EvaluationRepository
from evalboard.repositories.evaluator_repository import EvaluatorRepository
from evalboard.repositories.submission_repository import SubmissionRepository
from evalboard.repositories.team_repository import TeamRepository
from evalboard.scoring.lifecycle import check_transition, ensure_editable
from evalboard.scoring.score_calculator import ScoreCalculator, ScoreResult
from evalboard.services.submission_service import SubmissionService

logger = structlog.get_logger(__name__)


class EvaluationService:
    """Evaluation reads and lifecycle operations."""

    def __init__(
        self,
        evaluation_repo: Optional[EvaluationRepository] = None,
        submission_service: Optional[SubmissionService] = None,
        evaluator_repo: Optional[EvaluatorRepository] = None,
        team_repo: Optional[TeamRepository] = None,
        calculator: Optional[ScoreCalculator] = None,
        min_feedback_length: Optional[int] = None,
    ):
        self.evaluation_repo = evaluation_repo or EvaluationRepository()
        self.submission_service = submission_service or SubmissionService()
        self.evaluator_repo = evaluator_repo or EvaluatorRepository()
        self.team_repo = team_repo or TeamRepository()
        self.calculator = calculator or ScoreCalculator()
        if min_feedback_length is None:
            min_feedback_length = get_settings().MIN_FEEDBACK_LENGTH
        self.min_feedback_length = min_feedback_length

    @property
    def submission_repo(self) -> SubmissionRepository:
        return self.submission_service.submission_repo

    # ------------------------------------------------------------------ reads

    def get(self, evaluation_id: UUID) -> Evaluation:
        row = self.evaluation_repo.get_by_id(evaluation_id)
        if row is None:
            raise EntityNotFoundException("Evaluation", evaluation_id)
        return Evaluation(**row)

    def list(
        self,
        submission_id: Optional[UUID] = None,
        evaluator_id: Optional[UUID] = None,
        status: Optional[EvaluationStatus] = None,
    ) -> List[Evaluation]:
        rows = self.evaluation_repo.get_all(
            submission_id=submission_id,
            evaluator_id=evaluator_id,
            statuses=[status] if status else None,
        )
        return [Evaluation(**row) for row in rows]

    def list_for_submission(
        self, submission_id: UUID, evaluator_id: Optional[UUID] = None
    ) -> List[Evaluation]:
        self.submission_service.get(submission_id)
        return self.list(submission_id=submission_id, evaluator_id=evaluator_id)

    def assignments(self, evaluator_id: UUID) -> EvaluatorAssignments:
        """An evaluator's work split into drafts still to do and finished evaluations."""
        if self.evaluator_repo.get_by_id(evaluator_id) is None:
            raise EntityNotFoundException("Evaluator", evaluator_id)
        evaluations = self.list(evaluator_id=evaluator_id)
        return EvaluatorAssignments(
            pending=[e for e in evaluations if e.status is EvaluationStatus.DRAFT],
            completed=[e for e in evaluations if e.status in COMPLETED_EVALUATION_STATUSES],
        )

    def team_feedback(self, team_id: UUID) -> List[TeamFeedbackItem]:
        """Published evaluations of a team's submissions. Unpublished ones stay hidden."""
        if self.team_repo.get_by_id(team_id) is None:
            raise EntityNotFoundException("Team", team_id)

        submissions = {row["id"]: row for row in self.submission_repo.get_all(team_id=team_id)}
        if not submissions:
            return []

        rows = self.evaluation_repo.get_all(
            submission_ids=submissions.keys(),
            statuses=[EvaluationStatus.PUBLISHED],
        )
        evaluations = [Evaluation(**row) for row in rows]

        names: Dict[UUID, str] = {}
        for evaluator_id in {e.evaluator_id for e in evaluations}:
            evaluator = self.evaluator_repo.get_by_id(evaluator_id)
            names[evaluator_id] = evaluator["name"] if evaluator else "Evaluator"

        return [
            TeamFeedbackItem(
                evaluation_id=e.id,
                submission_id=e.submission_id,
                project_title=submissions[e.submission_id]["project_title"],
                evaluator_name=names[e.evaluator_id],
                average_score=e.display_average,
                total_score=e.total_score,
                feedback=e.feedback,
                published_at=e.published_at,
            )
            for e in evaluations
        ]

    # ------------------------------------------------------------- lifecycle

    def create(
        self,
        submission_id: UUID,
        evaluator_id: UUID,
        scores: Optional[Mapping[str, Any]] = None,
        feedback: Optional[str] = None,
    ) -> Evaluation:
        """
        Start the evaluation on an evaluator's first save for a submission,
        then record the given scores and feedback on the new draft.

        Raises:
            EntityNotFoundException: submission or evaluator missing
            EvaluatorNotActiveException: evaluator is pending or rejected
            InvalidScoreException: scores given but not valid (nothing is created)
            AlreadyAssignedException: the pair already has an evaluation
        """
        self.submission_service.get(submission_id)

        row = self.evaluator_repo.get_by_id(evaluator_id)
        if row is None:
            raise EntityNotFoundException("Evaluator", evaluator_id)
        evaluator = Evaluator(**row)
        if evaluator.status is not EvaluatorStatus.ACTIVE:
            raise EvaluatorNotActiveException(evaluator_id, evaluator.status.value)

        if scores is not None:
            self.calculator.calculate(scores)

        created = self.evaluation_repo.create_if_absent(submission_id, evaluator_id)
        if created is None:
            raise AlreadyAssignedException(submission_id, evaluator_id)
        self.submission_service.advance(submission_id, SubmissionStatus.ASSIGNED)

        evaluation = Evaluation(**created)
        logger.info(
            "evaluation_started",
            evaluation_id=str(evaluation.id),
            submission_id=str(submission_id),
            evaluator_id=str(evaluator_id),
        )
        if scores is None and feedback is None:
            return evaluation
        return self.update(evaluation.id, scores=scores, feedback=feedback, evaluator_id=evaluator_id)

    def record_score(
        self,
        evaluation_id: UUID,
        criterion_scores: Mapping[str, Any],
        feedback: Optional[str] = None,
        evaluator_id: Optional[UUID] = None,
    ) -> Evaluation:
        """
        Overwrite the scores (and optionally feedback) of a draft evaluation.

        Raises:
            NotEditableException: evaluation is no longer a draft
            InvalidScoreException: a criterion is missing, unknown or out of range
        """
        if criterion_scores is None:
            raise InvalidScoreException(missing=CRITERION_IDS)
        return self.update(
            evaluation_id,
            scores=criterion_scores,
            feedback=feedback,
            evaluator_id=evaluator_id,
        )

    def submit(self, evaluation_id: UUID, evaluator_id: Optional[UUID] = None) -> Evaluation:
        """Finalise a draft. Re-submitting a submitted evaluation is a no-op."""
        return self.update(evaluation_id, status=EvaluationStatus.SUBMITTED, evaluator_id=evaluator_id)

    def publish(self, evaluation_id: UUID) -> Evaluation:
        """Release a submitted evaluation to its team. Admin-only at the API layer."""
        evaluation = self.get(evaluation_id)
        changed = check_transition(evaluation.status, EvaluationStatus.PUBLISHED)
        result = self._transition(evaluation, EvaluationStatus.PUBLISHED)
        if changed:
            self.submission_service.advance(evaluation.submission_id, SubmissionStatus.PUBLISHED)
            logger.info(
                "evaluation_published",
                evaluation_id=str(evaluation_id),
                submission_id=str(evaluation.submission_id),
            )
        return result

    def update(
        self,
        evaluation_id: UUID,
        scores: Optional[Mapping[str, Any]] = None,
        feedback: Optional[str] = None,
        status: Optional[EvaluationStatus] = None,
        evaluator_id: Optional[UUID] = None,
    ) -> Evaluation:
        """
        Apply scores, feedback and a status move as one unit.

        Args:
            evaluation_id: Evaluation to change
            scores: Full criterion -> score mapping (None keeps stored scores)
            feedback: New feedback (None keeps stored feedback)
            status: Target status (None keeps the current one)
            evaluator_id: Calling evaluator; must own the evaluation when given
        """
        evaluation = self.get(evaluation_id)
        if evaluator_id is not None and evaluation.evaluator_id != evaluator_id:
            raise NotOwnerException(evaluation_id)

        current = evaluation.status
        target = EvaluationStatus(status) if status is not None else current
        content_change = scores is not None or feedback is not None

        changed = check_transition(current, target)
        if content_change:
            ensure_editable(evaluation_id, current)

        if not changed and not content_change:
            return self._transition(evaluation, target)

        if target is EvaluationStatus.PUBLISHED:
            return self.publish(evaluation_id)

        result: Optional[ScoreResult] = None
        if scores is not None:
            result = self.calculator.calculate(scores)

        if target is EvaluationStatus.SUBMITTED:
            if result is None:
                if not evaluation.scores:
                    raise InvalidScoreException(
                        missing=CRITERION_IDS,
                        message="Scores must be recorded before submitting",
                    )
                result = self.calculator.calculate(evaluation.scores)
            final_feedback = feedback if feedback is not None else evaluation.feedback
            length = len((final_feedback or "").strip())
            if length < self.min_feedback_length:
                raise FeedbackTooShortException(self.min_feedback_length, length)

        updated = self.evaluation_repo.update_draft(
            evaluation_id,
            scores=result.scores if result else None,
            total_score=result.total_score if result else None,
            average_score=result.average_score if result else None,
            feedback=feedback,
            new_status=target,
        )
        if not updated:
            latest = self.get(evaluation_id)
            if not content_change and latest.status is target:
                return latest
            if content_change:
                raise NotEditableException("Evaluation", evaluation_id, latest.status.value)
            raise InvalidTransitionException(latest.status.value, target.value)

        if target is EvaluationStatus.SUBMITTED:
            self.submission_service.advance(evaluation.submission_id, SubmissionStatus.COMPLETED)
            logger.info(
                "evaluation_submitted",
                evaluation_id=str(evaluation_id),
                submission_id=str(evaluation.submission_id),
                total_score=result.total_score,
            )
        else:
            logger.info(
                "evaluation_scored",
                evaluation_id=str(evaluation_id),
                total_score=result.total_score if result else None,
            )
        return self.get(evaluation_id)

    def _transition(self, evaluation: Evaluation, target: EvaluationStatus) -> Evaluation:
        """Compare-and-set evaluation.status -> target, settling lost races by re-reading."""
        if not self.evaluation_repo.transition(evaluation.id, evaluation.status, target):
            latest = self.get(evaluation.id)
            if latest.status is target:
                logger.info("evaluation_transition_idempotent", evaluation_id=str(evaluation.id), status=target.value)
                return latest
            raise InvalidTransitionException(latest.status.value, target.value)
        return self.get(evaluation.id)
