"""
Dashboard Service - EvalBoard
evalboard/services/dashboard_service.py

Read-only administrator overview: headline counts and per-submission
evaluation progress.
"""

from collections import defaultdict
from typing import Dict, List, Optional
from uuid import UUID

from evalboard.models.common import DashboardStats, SubmissionProgress
from evalboard.models.enumerations import COMPLETED_EVALUATION_STATUSES, EvaluatorStatus
from evalboard.models.evaluation import Evaluation
from evalboard.models.submission import Submission
from evalboard.repositories.evaluation_repository import EvaluationRepository
from evalboard.repositories.evaluator_repository import EvaluatorRepository
from evalboard.repositories.submission_repository import SubmissionRepository
from evalboard.repositories.team_repository import TeamRepository
from evalboard.services.assignment_service import rollup_status


class DashboardService:
    def __init__(
        self,
        team_repo: Optional[TeamRepository] = None,
        evaluator_repo: Optional[EvaluatorRepository] = None,
        submission_repo: Optional[SubmissionRepository] = None,
        evaluation_repo: Optional[EvaluationRepository] = None,
    ):
        self.team_repo = team_repo or TeamRepository()
        self.evaluator_repo = evaluator_repo or EvaluatorRepository()
        self.submission_repo = submission_repo or SubmissionRepository()
        self.evaluation_repo = evaluation_repo or EvaluationRepository()

    def stats(self) -> DashboardStats:
        evaluator_counts = self.evaluator_repo.count_by_status()
        evaluations = [Evaluation(**row) for row in self.evaluation_repo.get_all()]
        completed = sum(1 for e in evaluations if e.status in COMPLETED_EVALUATION_STATUSES)
        percentage = round(completed / len(evaluations) * 100, 1) if evaluations else 0.0

        return DashboardStats(
            total_teams=self.team_repo.count(),
            total_evaluators=sum(evaluator_counts.values()),
            pending_evaluators=evaluator_counts.get(EvaluatorStatus.PENDING.value, 0),
            total_submissions=self.submission_repo.count(),
            total_evaluations=len(evaluations),
            completed_evaluations=completed,
            evaluations_complete_percentage=percentage,
        )

    def evaluation_progress(self) -> List[SubmissionProgress]:
        submissions = [Submission(**row) for row in self.submission_repo.get_all()]
        teams = {row["id"]: row["name"] for row in self.team_repo.get_many({s.team_id for s in submissions})}

        by_submission: Dict[UUID, List[Evaluation]] = defaultdict(list)
        for row in self.evaluation_repo.get_all():
            evaluation = Evaluation(**row)
            by_submission[evaluation.submission_id].append(evaluation)

        progress = []
        for submission in submissions:
            evaluations = by_submission.get(submission.id, [])
            totals = [e.total_score for e in evaluations if e.status in COMPLETED_EVALUATION_STATUSES]
            progress.append(
                SubmissionProgress(
                    submission_id=submission.id,
                    project_title=submission.project_title,
                    team_name=teams.get(submission.team_id, "Unknown team"),
                    status=rollup_status(evaluations),
                    assigned_count=len(evaluations),
                    completed_count=len(totals),
                    average_total_score=round(sum(totals) / len(totals), 2) if totals else None,
                )
            )
        return progress
