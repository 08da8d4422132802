"""
Public Router - EvalBoard
evalboard/routers/leaderboard.py

Team-facing leaderboard and the criterion catalog.
"""

import asyncio
from typing import List

from fastapi import APIRouter, Depends

from evalboard.config import settings
from evalboard.core.dependencies import get_leaderboard_service
from evalboard.models.criteria import Criterion, list_criteria
from evalboard.models.leaderboard import LeaderboardResponse
from evalboard.routers.responses import error_responses
from evalboard.services.leaderboard_service import LeaderboardService

router = APIRouter(prefix=settings.API_V1_PREFIX, tags=["Leaderboard"])


@router.get(
    "/leaderboard",
    response_model=LeaderboardResponse,
    responses=error_responses(),
    summary="Published leaderboard",
    description="Empty until an administrator publishes the leaderboard.",
)
async def get_public_leaderboard(
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    return await asyncio.to_thread(service.get_public)


@router.get(
    "/criteria",
    response_model=List[Criterion],
    summary="Judging criteria",
    description="The ten fixed criteria with their display weightages (sum 100).",
)
async def get_criteria() -> List[Criterion]:
    return list_criteria()
