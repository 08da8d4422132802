# evalboard/scoring/leaderboard.py
"""
Leaderboard Aggregation
-----------------------
Derives a ranked leaderboard from evaluation records.

    qualifying  = status ∈ {submitted, published}  AND  Σ scores > 0
    one row per qualifying evaluation (a team evaluated twice appears twice)
    order       = stable sort by total_score descending
    rank        = index + 1

Rows are not merged per team; whether they should be summed or averaged per
team is an open product decision.
"""
import structlog
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence
from uuid import UUID

from evalboard.models.criteria import CRITERIA
from evalboard.models.enumerations import COMPLETED_EVALUATION_STATUSES
from evalboard.models.evaluation import Evaluation
from evalboard.models.leaderboard import CriterionBreakdown, LeaderboardEntry
from evalboard.models.submission import Submission
from evalboard.models.team import Team

logger = structlog.get_logger(__name__)


@dataclass
class _Row:
    team_id: UUID
    team_name: str
    total_score: float
    average_score: float
    project_title: Optional[str]
    submission_id: UUID
    evaluation_id: UUID


def is_qualifying(evaluation: Evaluation) -> bool:
    """Completed (submitted or published) and carrying a positive score sum."""
    return (
        evaluation.status in COMPLETED_EVALUATION_STATUSES
        and sum(evaluation.scores.values()) > 0
    )


def rank_entries(rows: Iterable[_Row]) -> List[LeaderboardEntry]:
    """Sort rows by descending total (stable for ties) and number them from 1."""
    ordered = sorted(rows, key=lambda r: r.total_score, reverse=True)
    return [
        LeaderboardEntry(
            rank=index + 1,
            team_id=row.team_id,
            team_name=row.team_name,
            total_score=row.total_score,
            average_score=row.average_score,
            project_title=row.project_title,
            submission_id=row.submission_id,
            evaluation_id=row.evaluation_id,
        )
        for index, row in enumerate(ordered)
    ]


def derive_leaderboard(
    evaluations: Sequence[Evaluation],
    submissions: Mapping[UUID, Submission],
    teams: Mapping[UUID, Team],
) -> List[LeaderboardEntry]:
    """
    Args:
        evaluations: Evaluation records in a deterministic order
                     (ties keep this order).
        submissions: Submissions by id, covering the evaluations' submissions.
        teams: Teams by id, covering the submissions' teams.

    Returns:
        Ranked leaderboard entries, one per qualifying evaluation.
    """
    rows: List[_Row] = []
    for evaluation in evaluations:
        if not is_qualifying(evaluation):
            continue
        submission = submissions.get(evaluation.submission_id)
        team = teams.get(submission.team_id) if submission else None
        if submission is None or team is None:
            logger.warning(
                "leaderboard_row_skipped",
                evaluation_id=str(evaluation.id),
                submission_id=str(evaluation.submission_id),
                reason="submission missing" if submission is None else "team missing",
            )
            continue
        total = sum(evaluation.scores.values())
        rows.append(
            _Row(
                team_id=team.id,
                team_name=team.name,
                total_score=total,
                average_score=evaluation.average_score,
                project_title=submission.project_title,
                submission_id=submission.id,
                evaluation_id=evaluation.id,
            )
        )

    entries = rank_entries(rows)
    logger.info("leaderboard_derived", evaluations=len(evaluations), entries=len(entries))
    return entries


def criteria_breakdown(evaluations: Sequence[Evaluation]) -> List[CriterionBreakdown]:
    """Mean score per criterion over the qualifying evaluations."""
    qualifying = [e for e in evaluations if is_qualifying(e)]
    totals: Dict[str, int] = {c.id: 0 for c in CRITERIA}
    counts: Dict[str, int] = {c.id: 0 for c in CRITERIA}
    for evaluation in qualifying:
        for criterion_id, score in evaluation.scores.items():
            if criterion_id in totals:
                totals[criterion_id] += score
                counts[criterion_id] += 1

    return [
        CriterionBreakdown(
            criterion_id=c.id,
            label=c.label,
            weightage=c.weightage,
            average_score=round(totals[c.id] / counts[c.id], 2) if counts[c.id] else None,
        )
        for c in CRITERIA
    ]
