# tests/test_lifecycle.py

"""
Evaluation Lifecycle Tests - forward-only state machine
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from evalboard.core.exceptions import InvalidTransitionException, NotEditableException
from evalboard.models.enumerations import EvaluationStatus
from evalboard.scoring.lifecycle import (
    INITIAL_STATE,
    TERMINAL_STATE,
    check_transition,
    ensure_editable,
)

DRAFT = EvaluationStatus.DRAFT
SUBMITTED = EvaluationStatus.SUBMITTED
PUBLISHED = EvaluationStatus.PUBLISHED


class TestCheckTransition:

    @pytest.mark.parametrize("current,target", [(DRAFT, SUBMITTED), (SUBMITTED, PUBLISHED)])
    def test_single_forward_step_allowed(self, current, target):
        assert check_transition(current, target) is True

    @pytest.mark.parametrize("state", list(EvaluationStatus))
    def test_reentering_state_is_noop(self, state):
        assert check_transition(state, state) is False

    @pytest.mark.parametrize(
        "current,target",
        [(PUBLISHED, SUBMITTED), (SUBMITTED, DRAFT), (PUBLISHED, DRAFT), (DRAFT, PUBLISHED)],
    )
    def test_reverse_and_skip_rejected(self, current, target):
        with pytest.raises(InvalidTransitionException) as exc_info:
            check_transition(current, target)
        assert exc_info.value.details == {"current": current.value, "target": target.value}

    def test_legacy_literals_accepted(self):
        # "pending" is a draft, "completed" is submitted
        assert check_transition("pending", "completed") is True

    def test_initial_and_terminal(self):
        assert INITIAL_STATE is DRAFT
        assert TERMINAL_STATE is PUBLISHED


class TestEnsureEditable:

    def test_draft_is_editable(self):
        ensure_editable("e1", DRAFT)

    @pytest.mark.parametrize("state", [SUBMITTED, PUBLISHED])
    def test_non_draft_not_editable(self, state):
        with pytest.raises(NotEditableException) as exc_info:
            ensure_editable("e1", state)
        assert exc_info.value.status == state.value


class TestLifecycleProperties:

    @given(path=st.lists(st.sampled_from(list(EvaluationStatus)), max_size=12))
    def test_status_never_regresses(self, path):
        """Apply arbitrary requested moves; accepted ones never go backwards."""
        state = INITIAL_STATE
        for target in path:
            try:
                changed = check_transition(state, target)
            except InvalidTransitionException:
                continue
            if changed:
                assert target.order == state.order + 1
                state = target
            else:
                assert target is state
