# evalboard/scoring/score_calculator.py
"""
Score Calculator
----------------
Validates per-criterion inputs and derives an evaluation's totals.

Formula:
    total_score   = Σ score_i          over the 10 fixed criteria, score_i ∈ [1, 10]
    average_score = total_score / 10   stored at full precision

The catalog weightages are display metadata and are deliberately NOT part of
this formula; totals are an unweighted sum.
"""
import structlog
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from evalboard.core.exceptions import InvalidScoreException
from evalboard.models.criteria import (
    CRITERION_IDS,
    MAX_CRITERION_SCORE,
    MIN_CRITERION_SCORE,
    NUMBER_OF_CRITERIA,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScoreResult:
    """Output of ScoreCalculator.calculate()."""
    scores: Dict[str, int]   # Validated criterion -> score, catalog order
    total_score: int         # In [10, 100]
    average_score: float     # total_score / 10

    @property
    def display_average(self) -> float:
        return round(self.average_score, 1)


def _is_valid_score(value: Any) -> bool:
    # bool is an int subclass; True must not count as 1
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_CRITERION_SCORE <= value <= MAX_CRITERION_SCORE


class ScoreCalculator:
    """Validate criterion scores and compute totals."""

    def validate(self, criterion_scores: Mapping[str, Any]) -> Dict[str, int]:
        """
        Check that every criterion is present exactly once with an integer in
        [1, 10] and that no unknown criterion keys are supplied.

        Returns:
            The scores re-keyed in catalog order.

        Raises:
            InvalidScoreException listing every problem found.
        """
        if criterion_scores is None:
            raise InvalidScoreException(missing=CRITERION_IDS)

        keys = set(criterion_scores)
        missing = [c for c in CRITERION_IDS if c not in keys]
        unknown = [k for k in keys if k not in CRITERION_IDS]
        out_of_range = {
            c: criterion_scores[c]
            for c in CRITERION_IDS
            if c in keys and not _is_valid_score(criterion_scores[c])
        }

        if missing or unknown or out_of_range:
            raise InvalidScoreException(missing=missing, unknown=unknown, out_of_range=out_of_range)

        return {c: int(criterion_scores[c]) for c in CRITERION_IDS}

    def calculate(self, criterion_scores: Mapping[str, Any]) -> ScoreResult:
        """
        Args:
            criterion_scores: Mapping of criterion id -> integer score (1-10).

        Returns:
            ScoreResult with validated scores, total and average.
        """
        scores = self.validate(criterion_scores)
        total = sum(scores.values())
        average = total / NUMBER_OF_CRITERIA

        logger.debug("scores_calculated", total_score=total, average_score=average)

        return ScoreResult(scores=scores, total_score=total, average_score=average)
