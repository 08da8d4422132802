"""
Criterion Catalog - EvalBoard
evalboard/models/criteria.py

The ten fixed judging criteria. Each carries a human label and a display
weightage (percent, sums to 100). Weightages are shown to administrators in
the criteria breakdown only; they are never applied to evaluation totals.
"""

from typing import List, Tuple

from pydantic import BaseModel, Field


class Criterion(BaseModel):
    """One fixed axis of judgment, scored 1-10."""

    id: str = Field(..., description="Criterion key used in score mappings")
    label: str = Field(..., description="Human-readable label")
    weightage: int = Field(..., ge=0, le=100, description="Display-only weightage (percent)")

    model_config = {"frozen": True}


MIN_CRITERION_SCORE = 1
MAX_CRITERION_SCORE = 10

CRITERIA: Tuple[Criterion, ...] = (
    Criterion(id="relevance", label="Relevance", weightage=5),
    Criterion(id="innovation", label="Innovation", weightage=15),
    Criterion(id="clarity", label="Clarity", weightage=10),
    Criterion(id="depth", label="Depth", weightage=5),
    Criterion(id="engagement", label="Engagement", weightage=25),
    Criterion(id="techUse", label="Tech Use", weightage=5),
    Criterion(id="scalability", label="Scalability", weightage=10),
    Criterion(id="ethics", label="Ethics", weightage=5),
    Criterion(id="practicality", label="Practicality", weightage=10),
    Criterion(id="videoQuality", label="Video Quality", weightage=10),
)

CRITERION_IDS: Tuple[str, ...] = tuple(c.id for c in CRITERIA)

NUMBER_OF_CRITERIA = len(CRITERIA)

def list_criteria() -> List[Criterion]:
    return list(CRITERIA)


def total_weightage() -> int:
    return sum(c.weightage for c in CRITERIA)
