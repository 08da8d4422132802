"""
Repositories Package - EvalBoard
evalboard/repositories/__init__.py

Data access layer for Snowflake database operations.
"""

from evalboard.repositories.base import BaseRepository
from evalboard.repositories.evaluation_repository import EvaluationRepository
from evalboard.repositories.evaluator_repository import EvaluatorRepository
from evalboard.repositories.leaderboard_repository import LeaderboardRepository
from evalboard.repositories.submission_repository import SubmissionRepository
from evalboard.repositories.team_repository import TeamRepository

__all__ = [
    "BaseRepository",
    "EvaluationRepository",
    "EvaluatorRepository",
    "LeaderboardRepository",
    "SubmissionRepository",
    "TeamRepository",
]
