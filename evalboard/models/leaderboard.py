from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from evalboard.models.enumerations import LeaderboardSource


class LeaderboardEntry(BaseModel):
    """
    One ranked leaderboard row.

    Derived rows always carry total_score. Persisted rows may come from an
    older publish that only stored the average, so the displayed score falls
    back to average_score.
    """

    rank: int = Field(..., ge=1, description="1-based position")

    team_id: UUID = Field(..., description="Team reference")

    team_name: str = Field(..., description="Displayed team name")

    total_score: Optional[float] = Field(default=None, ge=0)

    average_score: Optional[float] = Field(default=None, ge=0)

    project_title: Optional[str] = Field(default=None)

    submission_id: Optional[UUID] = None

    evaluation_id: Optional[UUID] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def score(self) -> Optional[float]:
        return self.total_score if self.total_score is not None else self.average_score


class LeaderboardResponse(BaseModel):
    source: LeaderboardSource
    published_at: Optional[datetime] = None
    entries: List[LeaderboardEntry]


class CriterionBreakdown(BaseModel):
    criterion_id: str
    label: str
    weightage: int
    average_score: Optional[float] = Field(
        default=None,
        description="Mean score across qualifying evaluations (None when there are none)"
    )


class CriteriaBreakdownResponse(BaseModel):
    evaluation_count: int
    criteria: List[CriterionBreakdown]
