from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from evalboard.models.enumerations import SubmissionEvaluationStatus


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(..., description="Error occurrence timestamp")


class DashboardStats(BaseModel):
    total_teams: int
    total_evaluators: int
    pending_evaluators: int
    total_submissions: int
    total_evaluations: int
    completed_evaluations: int
    evaluations_complete_percentage: float


class SubmissionProgress(BaseModel):
    submission_id: UUID
    project_title: str
    team_name: str
    status: SubmissionEvaluationStatus
    assigned_count: int
    completed_count: int
    average_total_score: Optional[float] = None
