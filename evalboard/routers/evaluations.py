"""
Evaluation Router - EvalBoard
evalboard/routers/evaluations.py

Evaluation reads and the lifecycle entry points (start, score, submit,
publish). Administrators see every evaluation, evaluators only their own;
teams read published feedback through the team routes instead.
"""

import asyncio
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from evalboard.config import settings
from evalboard.core.dependencies import (
    Caller,
    get_evaluation_service,
    require_admin,
    require_evaluator,
    require_staff,
)
from evalboard.core.exceptions import NotOwnerException, PermissionDeniedException
from evalboard.models.enumerations import EvaluationStatus, UserRole
from evalboard.models.evaluation import (
    Evaluation,
    EvaluationCreate,
    EvaluationUpdate,
    EvaluatorAssignments,
)
from evalboard.routers.responses import error_responses
from evalboard.services.evaluation_service import EvaluationService

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/evaluations", tags=["Evaluations"])


def _own_scope(caller: Caller) -> Optional[UUID]:
    """Evaluator id that reads are restricted to, or None for an admin."""
    return None if caller.is_admin else caller.user_id


@router.get(
    "",
    response_model=List[Evaluation],
    responses=error_responses(401, 403, 422),
    summary="List evaluations",
    description="Optional filters: submission_id, evaluator_id, status. "
                "Evaluators only ever see their own evaluations.",
)
async def list_evaluations(
    submission_id: Optional[UUID] = Query(default=None),
    evaluator_id: Optional[UUID] = Query(default=None),
    status_filter: Optional[EvaluationStatus] = Query(default=None, alias="status"),
    caller: Caller = Depends(require_staff),
    service: EvaluationService = Depends(get_evaluation_service),
) -> List[Evaluation]:
    scope = _own_scope(caller)
    if scope is not None:
        if evaluator_id is not None and evaluator_id != scope:
            raise PermissionDeniedException(UserRole.ADMIN.value, caller.role.value)
        evaluator_id = scope
    return await asyncio.to_thread(service.list, submission_id, evaluator_id, status_filter)


@router.post(
    "",
    response_model=Evaluation,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(401, 403, 404, 409, 422),
    summary="Start an evaluation",
    description="First save of scores and feedback by the calling evaluator for a submission. "
                "Creates the draft evaluation; a second start for the same pair is rejected.",
)
async def create_evaluation(
    payload: EvaluationCreate,
    caller: Caller = Depends(require_evaluator),
    service: EvaluationService = Depends(get_evaluation_service),
) -> Evaluation:
    return await asyncio.to_thread(
        service.create,
        payload.submission_id,
        caller.user_id,
        payload.scores,
        payload.feedback,
    )


# Fixed paths are declared before /{evaluation_id}
@router.get(
    "/evaluator/assignments",
    response_model=EvaluatorAssignments,
    responses=error_responses(401, 403, 404),
    summary="Calling evaluator's assignments",
    description="Drafts still to complete under 'pending'; submitted and published under 'completed'.",
)
async def get_my_assignments(
    caller: Caller = Depends(require_evaluator),
    service: EvaluationService = Depends(get_evaluation_service),
) -> EvaluatorAssignments:
    return await asyncio.to_thread(service.assignments, caller.user_id)


@router.get(
    "/submission/{submission_id}",
    response_model=List[Evaluation],
    responses=error_responses(401, 403, 404, 422),
    summary="Evaluations of a submission",
)
async def list_submission_evaluations(
    submission_id: UUID,
    caller: Caller = Depends(require_staff),
    service: EvaluationService = Depends(get_evaluation_service),
) -> List[Evaluation]:
    return await asyncio.to_thread(service.list_for_submission, submission_id, _own_scope(caller))


@router.get(
    "/{evaluation_id}",
    response_model=Evaluation,
    responses=error_responses(401, 403, 404, 422),
    summary="Get evaluation by ID",
)
async def get_evaluation(
    evaluation_id: UUID,
    caller: Caller = Depends(require_staff),
    service: EvaluationService = Depends(get_evaluation_service),
) -> Evaluation:
    evaluation = await asyncio.to_thread(service.get, evaluation_id)
    scope = _own_scope(caller)
    if scope is not None and evaluation.evaluator_id != scope:
        raise NotOwnerException(evaluation_id)
    return evaluation


@router.put(
    "/{evaluation_id}",
    response_model=Evaluation,
    responses=error_responses(400, 401, 403, 404, 409, 422),
    summary="Score, edit or submit an evaluation",
    description="Scores and feedback can change only while the evaluation is a draft. "
                "status='submitted' finalises it; status='published' is admin-only. "
                "Nothing is written unless the whole request is valid.",
)
async def update_evaluation(
    evaluation_id: UUID,
    payload: EvaluationUpdate,
    caller: Caller = Depends(require_staff),
    service: EvaluationService = Depends(get_evaluation_service),
) -> Evaluation:
    if payload.status is EvaluationStatus.PUBLISHED and not caller.is_admin:
        raise PermissionDeniedException(UserRole.ADMIN.value, caller.role.value)

    evaluator_id = caller.user_id if caller.role is UserRole.EVALUATOR else None
    return await asyncio.to_thread(
        service.update,
        evaluation_id,
        payload.scores,
        payload.feedback,
        payload.status,
        evaluator_id,
    )


@router.put(
    "/{evaluation_id}/publish",
    response_model=Evaluation,
    responses=error_responses(401, 403, 404, 409, 422),
    summary="Publish an evaluation",
    description="Moves a submitted evaluation to published, making it visible to the team.",
)
async def publish_evaluation(
    evaluation_id: UUID,
    _admin: Caller = Depends(require_admin),
    service: EvaluationService = Depends(get_evaluation_service),
) -> Evaluation:
    return await asyncio.to_thread(service.publish, evaluation_id)
