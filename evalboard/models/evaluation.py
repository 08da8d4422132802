import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from evalboard.models.criteria import NUMBER_OF_CRITERIA
from evalboard.models.enumerations import EvaluationStatus


class Evaluation(BaseModel):
    """
    One evaluator's assessment of one submission.

    This is the parse boundary for evaluation rows: scores stored as JSON text
    are decoded, legacy status literals are normalised and the totals are
    recomputed from the scores so that downstream code can rely on them.
    """

    id: UUID = Field(default_factory=uuid4, description="Unique evaluation identifier")

    submission_id: UUID = Field(..., description="Evaluated submission")

    evaluator_id: UUID = Field(..., description="Assigned evaluator")

    scores: Dict[str, int] = Field(
        default_factory=dict,
        description="Criterion id -> integer score (1-10); empty until recorded",
    )

    feedback: Optional[str] = Field(default=None, description="Free-text feedback")

    total_score: int = Field(default=0, ge=0, description="Sum of criterion scores")

    average_score: float = Field(default=0.0, ge=0, description="total_score / number of criteria")

    status: EvaluationStatus = Field(
        default=EvaluationStatus.DRAFT,
        description="Lifecycle state (draft, submitted, published)"
    )

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    submitted_at: Optional[datetime] = None
    published_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("scores", mode="before")
    @classmethod
    def decode_scores(cls, value: Any) -> Any:
        if value is None or value == "":
            return {}
        if isinstance(value, (str, bytes)):
            return json.loads(value)
        return value

    @model_validator(mode="after")
    def recompute_totals(self):
        """Keep total/average consistent with the stored criterion scores."""
        total = sum(self.scores.values())
        self.total_score = total
        self.average_score = total / NUMBER_OF_CRITERIA if self.scores else 0.0
        return self

    @computed_field
    @property
    def display_average(self) -> float:
        """Average rounded to one decimal place for display."""
        return round(self.average_score, 1)


class EvaluationUpdate(BaseModel):
    """
    Body of PUT /evaluations/{id}.

    Scores are accepted untyped so that the scoring model reports range and
    type problems as INVALID_SCORE rather than a generic validation error.
    """

    scores: Optional[Dict[str, Any]] = Field(default=None, description="Criterion id -> score (1-10)")

    feedback: Optional[str] = Field(default=None, max_length=5000, description="Evaluator feedback")

    status: Optional[EvaluationStatus] = Field(
        default=None,
        description="Target lifecycle state (submitted to finalise)"
    )


class EvaluationCreate(BaseModel):
    """
    Body of POST /evaluations: an evaluator's first save for a submission.
    """

    submission_id: UUID = Field(..., description="Submission being evaluated")

    scores: Optional[Dict[str, Any]] = Field(default=None, description="Criterion id -> score (1-10)")

    feedback: Optional[str] = Field(default=None, max_length=5000, description="Evaluator feedback")


class EvaluatorAssignments(BaseModel):
    """Evaluations assigned to one evaluator, split by progress."""

    pending: List[Evaluation]
    completed: List[Evaluation]


class TeamFeedbackItem(BaseModel):
    """A published evaluation as shown to the submitting team."""

    evaluation_id: UUID
    submission_id: UUID
    project_title: str
    evaluator_name: str
    average_score: float
    total_score: int
    feedback: Optional[str] = None
    published_at: Optional[datetime] = None
