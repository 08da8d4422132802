"""
Evaluator Router - EvalBoard
evalboard/routers/evaluators.py

Evaluator registration and lookup. Approval lives under /admin/evaluators.
"""

import asyncio
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from evalboard.config import settings
from evalboard.core.dependencies import Caller, get_approval_service, require_admin
from evalboard.models.evaluator import Evaluator, EvaluatorCreate
from evalboard.routers.responses import error_responses
from evalboard.services.approval_service import ApprovalService

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/evaluators", tags=["Evaluators"])


@router.get(
    "",
    response_model=List[Evaluator],
    responses=error_responses(401, 403),
    summary="List all evaluators",
)
async def list_evaluators(
    _admin: Caller = Depends(require_admin),
    service: ApprovalService = Depends(get_approval_service),
) -> List[Evaluator]:
    return await asyncio.to_thread(service.list_all)


@router.post(
    "",
    response_model=Evaluator,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 409, 422),
    summary="Register as an evaluator",
    description="New evaluators start pending until an administrator approves them. "
                "Email addresses are unique.",
)
async def register_evaluator(
    payload: EvaluatorCreate,
    service: ApprovalService = Depends(get_approval_service),
) -> Evaluator:
    return await asyncio.to_thread(service.register, payload)


@router.get(
    "/active",
    response_model=List[Evaluator],
    responses=error_responses(401, 403, 422),
    summary="Active evaluators",
    description="Optional case-insensitive search over name, email and qualification.",
)
async def list_active_evaluators(
    search: Optional[str] = Query(default=None, max_length=255),
    _admin: Caller = Depends(require_admin),
    service: ApprovalService = Depends(get_approval_service),
) -> List[Evaluator]:
    return await asyncio.to_thread(service.list_active, search)


@router.get(
    "/{evaluator_id}",
    response_model=Evaluator,
    responses=error_responses(404, 422),
    summary="Get evaluator by ID",
)
async def get_evaluator(
    evaluator_id: UUID,
    service: ApprovalService = Depends(get_approval_service),
) -> Evaluator:
    return await asyncio.to_thread(service.get, evaluator_id)
