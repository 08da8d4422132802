"""
Submission Router - EvalBoard
evalboard/routers/submissions.py

Team submissions, their evaluation rollup, and evaluator assignment.
"""

import asyncio
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from evalboard.config import settings
from evalboard.core.dependencies import (
    Caller,
    get_assignment_service,
    get_submission_service,
    get_team_service,
    require_admin,
    require_team_or_admin,
)
from evalboard.models.evaluation import Evaluation
from evalboard.models.evaluator import Evaluator
from evalboard.models.submission import (
    Submission,
    SubmissionCreate,
    SubmissionEvaluationStatusResponse,
    SubmissionUpdate,
)
from evalboard.routers.responses import error_responses
from evalboard.services.assignment_service import AssignmentService
from evalboard.services.submission_service import SubmissionService
from evalboard.services.team_service import TeamService

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/submissions", tags=["Submissions"])


@router.get(
    "",
    response_model=List[Submission],
    responses=error_responses(),
    summary="List submissions",
    description="Returns every submission, newest first.",
)
async def list_submissions(
    service: SubmissionService = Depends(get_submission_service),
) -> List[Submission]:
    return await asyncio.to_thread(service.list)


@router.post(
    "",
    response_model=Submission,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 409, 422),
    summary="Create a submission",
    description="Creates a submission for a team (status 'submitted', or 'draft' when draft=true). "
                "A team may hold only one active submission. Team callers submit for their own team.",
)
async def create_submission(
    payload: SubmissionCreate,
    caller: Caller = Depends(require_team_or_admin),
    team_service: TeamService = Depends(get_team_service),
    service: SubmissionService = Depends(get_submission_service),
) -> Submission:
    if not caller.is_admin:
        await asyncio.to_thread(team_service.ensure_member, payload.team_id, caller.user_id)
    return await asyncio.to_thread(service.create, payload)


@router.get(
    "/team/{team_id}",
    response_model=List[Submission],
    responses=error_responses(404, 422),
    summary="List a team's submissions",
)
async def list_team_submissions(
    team_id: UUID,
    service: SubmissionService = Depends(get_submission_service),
) -> List[Submission]:
    return await asyncio.to_thread(service.list_for_team, team_id)


@router.get(
    "/{submission_id}",
    response_model=Submission,
    responses=error_responses(404, 422),
    summary="Get submission by ID",
)
async def get_submission(
    submission_id: UUID,
    service: SubmissionService = Depends(get_submission_service),
) -> Submission:
    return await asyncio.to_thread(service.get, submission_id)


@router.put(
    "/{submission_id}",
    response_model=Submission,
    responses=error_responses(400, 401, 403, 404, 409, 422),
    summary="Update a submission",
    description="Edits a draft, pending or submitted submission. The only status change "
                "accepted is draft -> submitted.",
)
async def update_submission(
    submission_id: UUID,
    payload: SubmissionUpdate,
    caller: Caller = Depends(require_team_or_admin),
    team_service: TeamService = Depends(get_team_service),
    service: SubmissionService = Depends(get_submission_service),
) -> Submission:
    if not caller.is_admin:
        current = await asyncio.to_thread(service.get, submission_id)
        await asyncio.to_thread(team_service.ensure_member, current.team_id, caller.user_id)
    return await asyncio.to_thread(service.update, submission_id, payload)


@router.get(
    "/{submission_id}/evaluation-status",
    response_model=SubmissionEvaluationStatusResponse,
    responses=error_responses(404, 422),
    summary="Evaluation progress of a submission",
    description="not-started, assigned (evaluations exist) or completed (any evaluation submitted or published).",
)
async def get_evaluation_status(
    submission_id: UUID,
    service: AssignmentService = Depends(get_assignment_service),
) -> SubmissionEvaluationStatusResponse:
    return await asyncio.to_thread(service.get_evaluation_status, submission_id)


@router.get(
    "/{submission_id}/assignable-evaluators",
    response_model=List[Evaluator],
    responses=error_responses(401, 403, 404, 422),
    summary="Evaluators that can still be assigned",
    description="Active evaluators without an evaluation for this submission, optionally "
                "filtered by a case-insensitive search over name, email and qualification.",
)
async def list_assignable_evaluators(
    submission_id: UUID,
    search: Optional[str] = Query(default=None, max_length=255),
    service: AssignmentService = Depends(get_assignment_service),
    _admin: Caller = Depends(require_admin),
) -> List[Evaluator]:
    return await asyncio.to_thread(service.list_assignable, submission_id, search)


@router.post(
    "/{submission_id}/evaluators/{evaluator_id}",
    response_model=Evaluation,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(401, 403, 404, 409, 422),
    summary="Assign an evaluator",
    description="Creates a draft evaluation for the (submission, evaluator) pair. "
                "The evaluator must be active and not already assigned.",
)
async def assign_evaluator(
    submission_id: UUID,
    evaluator_id: UUID,
    service: AssignmentService = Depends(get_assignment_service),
    _admin: Caller = Depends(require_admin),
) -> Evaluation:
    return await asyncio.to_thread(service.assign, submission_id, evaluator_id)
