"""
Admin Router - EvalBoard
evalboard/routers/admin.py

Administrator-only views and actions: leaderboard management, dashboard,
evaluation progress and evaluator approval. Every route requires
X-User-Role: admin.
"""

import asyncio
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from evalboard.config import settings
from evalboard.core.dependencies import (
    get_approval_service,
    get_dashboard_service,
    get_leaderboard_service,
    require_admin,
)
from evalboard.models.common import DashboardStats, SubmissionProgress
from evalboard.models.evaluator import Evaluator
from evalboard.models.leaderboard import CriteriaBreakdownResponse, LeaderboardResponse
from evalboard.routers.responses import error_responses
from evalboard.services.approval_service import ApprovalService
from evalboard.services.dashboard_service import DashboardService
from evalboard.services.leaderboard_service import LeaderboardService

router = APIRouter(
    prefix=f"{settings.API_V1_PREFIX}/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
    responses=error_responses(401, 403),
)


#  Leaderboard


@router.get(
    "/leaderboard",
    response_model=LeaderboardResponse,
    summary="Leaderboard (published or derived)",
    description="The published leaderboard if one exists; otherwise one derived from "
                "completed evaluations, one row per evaluation.",
)
async def get_leaderboard(
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    return await asyncio.to_thread(service.get_leaderboard)


@router.put(
    "/leaderboard/publish",
    response_model=LeaderboardResponse,
    summary="Publish the leaderboard",
    description="Re-derives the leaderboard from current evaluations and replaces the "
                "published one atomically.",
)
async def publish_leaderboard(
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    return await asyncio.to_thread(service.publish)


@router.get(
    "/leaderboard/export",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}, "description": "Leaderboard as CSV"}},
    summary="Export the leaderboard as CSV",
)
async def export_leaderboard(
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> Response:
    body = await asyncio.to_thread(service.export_csv)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="leaderboard.csv"'},
    )


@router.get(
    "/leaderboard/criteria",
    response_model=CriteriaBreakdownResponse,
    summary="Per-criterion average scores",
)
async def get_criteria_breakdown(
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> CriteriaBreakdownResponse:
    return await asyncio.to_thread(service.criteria_breakdown)


#  Dashboard


@router.get("/dashboard", response_model=DashboardStats, summary="Competition overview counts")
async def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStats:
    return await asyncio.to_thread(service.stats)


@router.get(
    "/evaluation-progress",
    response_model=List[SubmissionProgress],
    summary="Evaluation progress per submission",
)
async def get_evaluation_progress(
    service: DashboardService = Depends(get_dashboard_service),
) -> List[SubmissionProgress]:
    return await asyncio.to_thread(service.evaluation_progress)


#  Evaluator approval


@router.get("/evaluators/pending", response_model=List[Evaluator], summary="Evaluators awaiting approval")
async def list_pending_evaluators(
    service: ApprovalService = Depends(get_approval_service),
) -> List[Evaluator]:
    return await asyncio.to_thread(service.list_pending)


@router.put(
    "/evaluators/{evaluator_id}/approve",
    response_model=Evaluator,
    responses=error_responses(404, 409, 422),
    summary="Approve a pending evaluator",
)
async def approve_evaluator(
    evaluator_id: UUID,
    service: ApprovalService = Depends(get_approval_service),
) -> Evaluator:
    return await asyncio.to_thread(service.approve, evaluator_id)


@router.put(
    "/evaluators/{evaluator_id}/reject",
    response_model=Evaluator,
    responses=error_responses(404, 409, 422),
    summary="Reject a pending evaluator",
)
async def reject_evaluator(
    evaluator_id: UUID,
    service: ApprovalService = Depends(get_approval_service),
) -> Evaluator:
    return await asyncio.to_thread(service.reject, evaluator_id)
