# evalboard/scoring/lifecycle.py
"""
Evaluation Lifecycle
--------------------
    draft ──submit──▶ submitted ──publish──▶ published

Moves are strictly forward and one step at a time. Re-entering the current
state is an accepted no-op. Scores and feedback may only change in draft.
"""
from typing import Any

from evalboard.core.exceptions import InvalidTransitionException, NotEditableException
from evalboard.models.enumerations import EvaluationStatus

INITIAL_STATE = EvaluationStatus.DRAFT
TERMINAL_STATE = EvaluationStatus.PUBLISHED


def check_transition(current: EvaluationStatus, target: EvaluationStatus) -> bool:
    """
    Validate a lifecycle move.

    Returns:
        True if the move changes state, False if it re-enters the current state.

    Raises:
        InvalidTransitionException for reverse moves and skipped states.
    """
    current = EvaluationStatus(current)
    target = EvaluationStatus(target)
    step = target.order - current.order
    if step == 0:
        return False
    if step != 1:
        raise InvalidTransitionException(current.value, target.value)
    return True


def ensure_editable(evaluation_id: Any, status: EvaluationStatus) -> None:
    """Raise NotEditableException unless the evaluation is still a draft."""
    if EvaluationStatus(status) is not EvaluationStatus.DRAFT:
        raise NotEditableException("Evaluation", evaluation_id, EvaluationStatus(status).value)
