"""
Dependencies - EvalBoard
evalboard/core/dependencies.py

FastAPI dependency injection for repositories, services and caller identity.
Tests swap any of these through app.dependency_overrides.
"""

from functools import lru_cache
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from pydantic import BaseModel

from evalboard.config import get_settings
from evalboard.core.exceptions import AuthenticationRequiredException, PermissionDeniedException
from evalboard.models.enumerations import UserRole
from evalboard.repositories.evaluation_repository import EvaluationRepository
from evalboard.repositories.evaluator_repository import EvaluatorRepository
from evalboard.repositories.leaderboard_repository import LeaderboardRepository
from evalboard.repositories.submission_repository import SubmissionRepository
from evalboard.repositories.team_repository import TeamRepository
from evalboard.services.approval_service import ApprovalService
from evalboard.services.assignment_service import AssignmentService
from evalboard.services.dashboard_service import DashboardService
from evalboard.services.evaluation_service import EvaluationService
from evalboard.services.leaderboard_service import LeaderboardService
from evalboard.services.submission_service import SubmissionService
from evalboard.services.team_service import TeamService


#  Repositories

@lru_cache()
def get_team_repository() -> TeamRepository:
    """Get cached TeamRepository instance."""
    return TeamRepository()


@lru_cache()
def get_submission_repository() -> SubmissionRepository:
    """Get cached SubmissionRepository instance."""
    return SubmissionRepository()


@lru_cache()
def get_evaluator_repository() -> EvaluatorRepository:
    """Get cached EvaluatorRepository instance."""
    return EvaluatorRepository()


@lru_cache()
def get_evaluation_repository() -> EvaluationRepository:
    """Get cached EvaluationRepository instance."""
    return EvaluationRepository()


@lru_cache()
def get_leaderboard_repository() -> LeaderboardRepository:
    """Get cached LeaderboardRepository instance."""
    return LeaderboardRepository()


#  Services

@lru_cache()
def get_team_service() -> TeamService:
    return TeamService(get_team_repository())


@lru_cache()
def get_submission_service() -> SubmissionService:
    return SubmissionService(get_submission_repository(), get_team_repository())


@lru_cache()
def get_evaluation_service() -> EvaluationService:
    return EvaluationService(
        evaluation_repo=get_evaluation_repository(),
        submission_service=get_submission_service(),
        evaluator_repo=get_evaluator_repository(),
        team_repo=get_team_repository(),
        min_feedback_length=get_settings().MIN_FEEDBACK_LENGTH,
    )


@lru_cache()
def get_assignment_service() -> AssignmentService:
    return AssignmentService(
        evaluation_repo=get_evaluation_repository(),
        evaluator_repo=get_evaluator_repository(),
        submission_service=get_submission_service(),
    )


@lru_cache()
def get_approval_service() -> ApprovalService:
    return ApprovalService(get_evaluator_repository())


@lru_cache()
def get_leaderboard_service() -> LeaderboardService:
    return LeaderboardService(
        leaderboard_repo=get_leaderboard_repository(),
        evaluation_repo=get_evaluation_repository(),
        submission_repo=get_submission_repository(),
        team_repo=get_team_repository(),
    )


@lru_cache()
def get_dashboard_service() -> DashboardService:
    return DashboardService(
        team_repo=get_team_repository(),
        evaluator_repo=get_evaluator_repository(),
        submission_repo=get_submission_repository(),
        evaluation_repo=get_evaluation_repository(),
    )


#  Caller identity (set by the upstream gateway)

class Caller(BaseModel):
    user_id: UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


def get_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Caller:
    if not x_user_id or not x_user_role:
        raise AuthenticationRequiredException()
    try:
        return Caller(user_id=UUID(x_user_id), role=UserRole(x_user_role.strip().lower()))
    except ValueError:
        raise AuthenticationRequiredException("Caller identity headers are malformed")


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_admin:
        raise PermissionDeniedException(UserRole.ADMIN.value, caller.role.value)
    return caller


def require_evaluator(caller: Caller = Depends(get_caller)) -> Caller:
    if caller.role is not UserRole.EVALUATOR:
        raise PermissionDeniedException(UserRole.EVALUATOR.value, caller.role.value)
    return caller


def require_team_or_admin(caller: Caller = Depends(get_caller)) -> Caller:
    if caller.role is UserRole.EVALUATOR:
        raise PermissionDeniedException(UserRole.TEAM.value, caller.role.value)
    return caller


def require_staff(caller: Caller = Depends(get_caller)) -> Caller:
    """Admins and evaluators; team callers see evaluations only as published feedback."""
    if caller.role is UserRole.TEAM:
        raise PermissionDeniedException(UserRole.EVALUATOR.value, caller.role.value)
    return caller
