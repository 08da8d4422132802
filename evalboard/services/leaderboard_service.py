"""
Leaderboard Service - EvalBoard
evalboard/services/leaderboard_service.py

Two sources, in order:
  1. the persisted leaderboard written by the last publish (returned as-is,
     ordered by stored rank)
  2. a leaderboard derived on read from completed evaluations, used only
     while nothing has been published

Teams only ever see source 1. Publishing re-derives from current data and
replaces the persisted rows in one transaction.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

import redis
import structlog

from evalboard.models.enumerations import COMPLETED_EVALUATION_STATUSES, LeaderboardSource
from evalboard.models.evaluation import Evaluation
from evalboard.models.leaderboard import (
    CriteriaBreakdownResponse,
    LeaderboardEntry,
    LeaderboardResponse,
)
from evalboard.models.submission import Submission
from evalboard.models.team import Team
from evalboard.repositories.evaluation_repository import EvaluationRepository
from evalboard.repositories.leaderboard_repository import LeaderboardRepository
from evalboard.repositories.submission_repository import SubmissionRepository
from evalboard.repositories.team_repository import TeamRepository
from evalboard.scoring.leaderboard import criteria_breakdown, derive_leaderboard, is_qualifying
from evalboard.services.cache import KEY_LEADERBOARD, TTL_LEADERBOARD, get_cache
from evalboard.services.exporters import leaderboard_to_csv
from evalboard.services.redis_cache import RedisCache

logger = structlog.get_logger(__name__)


class LeaderboardService:
    """Read, derive and publish the competition leaderboard."""

    def __init__(
        self,
        leaderboard_repo: Optional[LeaderboardRepository] = None,
        evaluation_repo: Optional[EvaluationRepository] = None,
        submission_repo: Optional[SubmissionRepository] = None,
        team_repo: Optional[TeamRepository] = None,
        cache_factory: Callable[[], Optional[RedisCache]] = get_cache,
    ):
        self.leaderboard_repo = leaderboard_repo or LeaderboardRepository()
        self.evaluation_repo = evaluation_repo or EvaluationRepository()
        self.submission_repo = submission_repo or SubmissionRepository()
        self.team_repo = team_repo or TeamRepository()
        self.cache_factory = cache_factory

    def get_leaderboard(self) -> LeaderboardResponse:
        """Persisted leaderboard if one exists, otherwise derived from evaluations."""
        published = self._published()
        if published is not None:
            return published
        return LeaderboardResponse(source=LeaderboardSource.DERIVED, entries=self.derive())

    def get_public(self) -> LeaderboardResponse:
        """Team-facing view: empty until an administrator publishes."""
        published = self._published()
        if published is not None:
            return published
        return LeaderboardResponse(source=LeaderboardSource.PUBLISHED, entries=[])

    def derive(self) -> List[LeaderboardEntry]:
        evaluations = self._completed_evaluations()
        submissions = {
            row["id"]: Submission(**row)
            for row in self.submission_repo.get_many({e.submission_id for e in evaluations})
        }
        teams = {
            row["id"]: Team(**row)
            for row in self.team_repo.get_many({s.team_id for s in submissions.values()})
        }
        return derive_leaderboard(evaluations, submissions, teams)

    def publish(self) -> LeaderboardResponse:
        """
        Derive from current data and atomically replace the persisted
        leaderboard. Publishing twice over unchanged data stores the same rows.
        """
        entries = self.derive()
        published_at = datetime.now(timezone.utc)
        self.leaderboard_repo.replace_all(entries, published_at)
        self._invalidate()

        logger.info("leaderboard_published", entries=len(entries))
        return LeaderboardResponse(
            source=LeaderboardSource.PUBLISHED,
            published_at=published_at,
            entries=entries,
        )

    def criteria_breakdown(self) -> CriteriaBreakdownResponse:
        evaluations = self._completed_evaluations()
        return CriteriaBreakdownResponse(
            evaluation_count=sum(1 for e in evaluations if is_qualifying(e)),
            criteria=criteria_breakdown(evaluations),
        )

    def export_csv(self) -> str:
        return leaderboard_to_csv(self.get_leaderboard().entries)

    def _completed_evaluations(self) -> List[Evaluation]:
        rows = self.evaluation_repo.get_all(statuses=COMPLETED_EVALUATION_STATUSES)
        return [Evaluation(**row) for row in rows]

    def _published(self) -> Optional[LeaderboardResponse]:
        cache = self.cache_factory()
        if cache:
            try:
                cached = cache.get(KEY_LEADERBOARD, LeaderboardResponse)
                if cached:
                    return cached
            except redis.RedisError as e:
                logger.warning("cache_read_failed", key=KEY_LEADERBOARD, error=str(e))

        rows = self.leaderboard_repo.get_all()
        if not rows:
            return None

        response = LeaderboardResponse(
            source=LeaderboardSource.PUBLISHED,
            published_at=rows[0]["published_at"],
            entries=[
                LeaderboardEntry(**{k: v for k, v in row.items() if k != "published_at"})
                for row in rows
            ],
        )

        if cache:
            try:
                cache.set(KEY_LEADERBOARD, response, TTL_LEADERBOARD)
            except redis.RedisError as e:
                logger.warning("cache_write_failed", key=KEY_LEADERBOARD, error=str(e))
        return response

    def _invalidate(self) -> None:
        cache = self.cache_factory()
        if cache:
            try:
                cache.delete(KEY_LEADERBOARD)
            except redis.RedisError as e:
                logger.warning("cache_invalidate_failed", key=KEY_LEADERBOARD, error=str(e))
