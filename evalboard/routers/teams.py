"""
Team Router - EvalBoard
evalboard/routers/teams.py

Team registration, membership, and the feedback a team can see (published
evaluations only). Team callers may act only on teams they belong to.
"""

import asyncio
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from evalboard.config import settings
from evalboard.core.dependencies import (
    Caller,
    get_evaluation_service,
    get_team_service,
    require_admin,
    require_team_or_admin,
)
from evalboard.core.exceptions import NotTeamMemberException
from evalboard.models.evaluation import TeamFeedbackItem
from evalboard.models.team import Team, TeamCreate, TeamMember, TeamUpdate
from evalboard.routers.responses import error_responses
from evalboard.services.evaluation_service import EvaluationService
from evalboard.services.team_service import TeamService

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/teams", tags=["Teams"])


async def _check_member(service: TeamService, team_id: UUID, caller: Caller) -> None:
    if not caller.is_admin:
        await asyncio.to_thread(service.ensure_member, team_id, caller.user_id)


@router.get(
    "",
    response_model=List[Team],
    responses=error_responses(401, 403),
    summary="List teams",
)
async def list_teams(
    _admin: Caller = Depends(require_admin),
    service: TeamService = Depends(get_team_service),
) -> List[Team]:
    return await asyncio.to_thread(service.list)


@router.post(
    "",
    response_model=Team,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(401, 403, 422),
    summary="Register a team",
    description="The leader, when given, must be one of the members. "
                "A team caller must list themselves as a member.",
)
async def create_team(
    payload: TeamCreate,
    caller: Caller = Depends(require_team_or_admin),
    service: TeamService = Depends(get_team_service),
) -> Team:
    if not caller.is_admin and all(m.id != caller.user_id for m in payload.members):
        raise NotTeamMemberException("new team", caller.user_id)
    return await asyncio.to_thread(service.create, payload)


@router.get(
    "/{team_id}",
    response_model=Team,
    responses=error_responses(404, 422),
    summary="Get team by ID",
)
async def get_team(
    team_id: UUID,
    service: TeamService = Depends(get_team_service),
) -> Team:
    return await asyncio.to_thread(service.get, team_id)


@router.put(
    "/{team_id}",
    response_model=Team,
    responses=error_responses(401, 403, 404, 409, 422),
    summary="Rename a team or change its leader",
)
async def update_team(
    team_id: UUID,
    payload: TeamUpdate,
    caller: Caller = Depends(require_team_or_admin),
    service: TeamService = Depends(get_team_service),
) -> Team:
    await _check_member(service, team_id, caller)
    return await asyncio.to_thread(service.update, team_id, payload)


@router.post(
    "/{team_id}/members",
    response_model=Team,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(401, 403, 404, 409, 422),
    summary="Add a team member",
)
async def add_team_member(
    team_id: UUID,
    member: TeamMember,
    caller: Caller = Depends(require_team_or_admin),
    service: TeamService = Depends(get_team_service),
) -> Team:
    await _check_member(service, team_id, caller)
    return await asyncio.to_thread(service.add_member, team_id, member)


@router.delete(
    "/{team_id}/members/{member_id}",
    response_model=Team,
    responses=error_responses(401, 403, 404, 409, 422),
    summary="Remove a team member",
    description="The leader cannot be removed; hand leadership to another member first.",
)
async def remove_team_member(
    team_id: UUID,
    member_id: UUID,
    caller: Caller = Depends(require_team_or_admin),
    service: TeamService = Depends(get_team_service),
) -> Team:
    await _check_member(service, team_id, caller)
    return await asyncio.to_thread(service.remove_member, team_id, member_id)


@router.get(
    "/{team_id}/feedback",
    response_model=List[TeamFeedbackItem],
    responses=error_responses(401, 403, 404, 422),
    summary="Published feedback for a team",
    description="Visible to administrators and to the team's own members.",
)
async def get_team_feedback(
    team_id: UUID,
    caller: Caller = Depends(require_team_or_admin),
    team_service: TeamService = Depends(get_team_service),
    service: EvaluationService = Depends(get_evaluation_service),
) -> List[TeamFeedbackItem]:
    await _check_member(team_service, team_id, caller)
    return await asyncio.to_thread(service.team_feedback, team_id)
