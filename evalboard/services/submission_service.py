"""
Submission Service - EvalBoard
evalboard/services/submission_service.py

Team submissions: creation (one active submission per team), edits while
editable, and the single forward-only status advance used by assignment and
the evaluation lifecycle.
"""

from typing import List, Optional
from uuid import UUID

import structlog

from evalboard.core.exceptions import (
    ActiveSubmissionExistsException,
    EntityNotFoundException,
    InvalidTransitionException,
    NotEditableException,
)
from evalboard.models.enumerations import SubmissionStatus
from evalboard.models.submission import Submission, SubmissionCreate, SubmissionUpdate
from evalboard.repositories.submission_repository import SubmissionRepository
from evalboard.repositories.team_repository import TeamRepository

logger = structlog.get_logger(__name__)

EDITABLE_STATUSES = [s for s in SubmissionStatus if s.is_editable]


class SubmissionService:
    """Create, edit and advance team submissions."""

    def __init__(
        self,
        submission_repo: Optional[SubmissionRepository] = None,
        team_repo: Optional[TeamRepository] = None,
    ):
        self.submission_repo = submission_repo or SubmissionRepository()
        self.team_repo = team_repo or TeamRepository()

    def get(self, submission_id: UUID) -> Submission:
        row = self.submission_repo.get_by_id(submission_id)
        if row is None:
            raise EntityNotFoundException("Submission", submission_id)
        return Submission(**row)

    def list(self) -> List[Submission]:
        return [Submission(**row) for row in self.submission_repo.get_all()]

    def list_for_team(self, team_id: UUID) -> List[Submission]:
        if self.team_repo.get_by_id(team_id) is None:
            raise EntityNotFoundException("Team", team_id)
        return [Submission(**row) for row in self.submission_repo.get_all(team_id=team_id)]

    def create(self, payload: SubmissionCreate) -> Submission:
        """
        Create a submission for a team.

        Raises:
            EntityNotFoundException: team does not exist
            ActiveSubmissionExistsException: the team already has a
                non-terminal submission
        """
        if self.team_repo.get_by_id(payload.team_id) is None:
            raise EntityNotFoundException("Team", payload.team_id)

        status = SubmissionStatus.DRAFT if payload.draft else SubmissionStatus.SUBMITTED
        row = self.submission_repo.create_if_no_active(
            team_id=payload.team_id,
            project_title=payload.project_title,
            description=payload.description,
            learning_outcomes=payload.learning_outcomes,
            video_link=payload.video_link,
            status=status,
        )
        if row is None:
            active = self.submission_repo.get_active_for_team(payload.team_id)
            raise ActiveSubmissionExistsException(payload.team_id, active["id"] if active else None)

        submission = Submission(**row)
        logger.info(
            "submission_created",
            submission_id=str(submission.id),
            team_id=str(submission.team_id),
            status=submission.status.value,
        )
        return submission

    def update(self, submission_id: UUID, payload: SubmissionUpdate) -> Submission:
        """
        Apply a partial edit. Only draft, pending and submitted submissions
        can be edited; the only status change accepted here is moving a
        draft forward to submitted.
        """
        current = self.get(submission_id)
        if not current.status.is_editable:
            raise NotEditableException("Submission", submission_id, current.status.value)

        data = payload.model_dump(exclude_unset=True)
        for text_field in ("description", "learning_outcomes"):
            if text_field in data and data[text_field] is None:
                data[text_field] = ""
        data = {k: v for k, v in data.items() if v is not None}

        new_status = data.get("status")
        if new_status is not None:
            new_status = SubmissionStatus(new_status)
            if new_status is current.status:
                data.pop("status")
            elif new_status is not SubmissionStatus.SUBMITTED or current.status.order > new_status.order:
                raise InvalidTransitionException(current.status.value, new_status.value, "submission")

        if not data:
            return current

        if not self.submission_repo.update_if_status(submission_id, data, EDITABLE_STATUSES):
            latest = self.get(submission_id)
            raise NotEditableException("Submission", submission_id, latest.status.value)

        logger.info("submission_updated", submission_id=str(submission_id), fields=sorted(data))
        return self.get(submission_id)

    def advance(self, submission_id: UUID, target: SubmissionStatus) -> bool:
        """
        Move a submission forward to target. A submission already at or past
        target is left alone, so status never regresses.

        Returns:
            True if the status changed
        """
        target = SubmissionStatus(target)
        row = self.submission_repo.get_by_id(submission_id)
        if row is None:
            logger.warning("submission_advance_missing", submission_id=str(submission_id))
            return False
        current = SubmissionStatus(row["status"])
        if current.order >= target.order:
            return False

        earlier = [s for s in SubmissionStatus if s.order < target.order]
        advanced = self.submission_repo.update_if_status(submission_id, {"status": target}, earlier)
        if advanced:
            logger.info(
                "submission_advanced",
                submission_id=str(submission_id),
                from_status=current.value,
                to_status=target.value,
            )
        return advanced
