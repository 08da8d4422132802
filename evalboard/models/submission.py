from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import Optional

from evalboard.models.enumerations import SubmissionEvaluationStatus, SubmissionStatus


class SubmissionBase(BaseModel):
    """
    Base Pydantic model for Submission.
    """

    project_title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Project title"
    )

    description: str = Field(
        default="",
        max_length=10000,
        description="Project description"
    )

    learning_outcomes: str = Field(
        default="",
        max_length=10000,
        description="What the team learned"
    )

    video_link: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Link to the project video"
    )

    @field_validator("project_title", "video_link")
    @classmethod
    def strip_required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class SubmissionCreate(SubmissionBase):
    """
    Model for creating a new submission.
    """

    team_id: UUID = Field(..., description="Submitting team")

    draft: bool = Field(default=False, description="Save as draft instead of submitting")


class SubmissionUpdate(BaseModel):
    """
    Partial update of an editable submission.
    """

    project_title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=10000)
    learning_outcomes: Optional[str] = Field(default=None, max_length=10000)
    video_link: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    status: Optional[SubmissionStatus] = Field(
        default=None,
        description="Only draft -> submitted is accepted from team edits"
    )

    @field_validator("project_title", "video_link")
    @classmethod
    def strip_optional_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class Submission(SubmissionBase):
    """
    Model returned in API responses.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique submission identifier"
    )

    team_id: UUID = Field(..., description="Submitting team")

    status: SubmissionStatus = Field(
        default=SubmissionStatus.SUBMITTED,
        description="Current submission status"
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Record creation timestamp (UTC)"
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Record last update timestamp (UTC)"
    )

    model_config = ConfigDict(from_attributes=True)

    @field_validator("description", "learning_outcomes", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else value


class SubmissionEvaluationStatusResponse(BaseModel):
    """
    Rollup of a submission's evaluations.
    """

    submission_id: UUID
    status: SubmissionEvaluationStatus
    evaluation_count: int
    completed_count: int
