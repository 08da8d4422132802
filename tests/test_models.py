# tests/test_models.py

"""
Model Validation Tests - Tests for Pydantic model validations
"""

import json
from uuid import uuid4

import pytest
from pydantic import ValidationError

from evalboard.models.criteria import CRITERIA, CRITERION_IDS, NUMBER_OF_CRITERIA, list_criteria
from evalboard.models.enumerations import EvaluationStatus, SubmissionStatus
from evalboard.models.evaluation import Evaluation, EvaluationUpdate
from evalboard.models.evaluator import EvaluatorCreate
from evalboard.models.leaderboard import LeaderboardEntry
from evalboard.models.submission import Submission, SubmissionCreate, SubmissionUpdate
from evalboard.models.team import Team, TeamCreate, TeamMember



# ENUMERATION TESTS


class TestEvaluationStatusEnum:

    @pytest.mark.parametrize(
        "literal,expected",
        [
            ("draft", EvaluationStatus.DRAFT),
            ("pending", EvaluationStatus.DRAFT),
            ("completed", EvaluationStatus.SUBMITTED),
            ("SUBMITTED", EvaluationStatus.SUBMITTED),
            (" published ", EvaluationStatus.PUBLISHED),
        ],
    )
    def test_legacy_and_cased_literals(self, literal, expected):
        assert EvaluationStatus(literal) is expected

    def test_unknown_literal_rejected(self):
        with pytest.raises(ValueError):
            EvaluationStatus("archived")

    def test_order_is_forward(self):
        orders = [s.order for s in EvaluationStatus]
        assert orders == sorted(orders)


class TestSubmissionStatusEnum:

    @pytest.mark.parametrize(
        "literal,expected",
        [
            ("pending-assignment", SubmissionStatus.SUBMITTED),
            ("under_review", SubmissionStatus.UNDER_REVIEW),
            ("Assigned", SubmissionStatus.ASSIGNED),
        ],
    )
    def test_legacy_literals(self, literal, expected):
        assert SubmissionStatus(literal) is expected

    def test_editable_and_terminal(self):
        assert SubmissionStatus.DRAFT.is_editable
        assert not SubmissionStatus.ASSIGNED.is_editable
        assert SubmissionStatus.COMPLETED.is_terminal
        assert not SubmissionStatus.UNDER_REVIEW.is_terminal



# CRITERIA


class TestCriteria:

    def test_ten_criteria_in_display_order(self):
        assert NUMBER_OF_CRITERIA == 10
        assert CRITERION_IDS[0] == "relevance"
        assert CRITERION_IDS[-1] == "videoQuality"

    def test_weightages_sum_to_100(self):
        assert sum(c.weightage for c in CRITERIA) == 100

    def test_catalog_listing_follows_ids(self):
        assert tuple(c.id for c in list_criteria()) == CRITERION_IDS



# EVALUATION MODEL


class TestEvaluationModel:

    def test_scores_decoded_from_json_text(self, scenario_scores):
        evaluation = Evaluation(
            submission_id=uuid4(), evaluator_id=uuid4(), scores=json.dumps(scenario_scores)
        )
        assert evaluation.scores == scenario_scores

    def test_totals_recomputed_from_scores(self, scenario_scores):
        evaluation = Evaluation(
            submission_id=uuid4(),
            evaluator_id=uuid4(),
            scores=scenario_scores,
            total_score=3,
            average_score=0.3,
        )
        assert evaluation.total_score == 78
        assert evaluation.average_score == pytest.approx(7.8)
        assert evaluation.display_average == 7.8

    def test_empty_scores(self):
        evaluation = Evaluation(submission_id=uuid4(), evaluator_id=uuid4(), scores=None, status="pending")
        assert evaluation.scores == {}
        assert evaluation.total_score == 0
        assert evaluation.status is EvaluationStatus.DRAFT

    def test_update_accepts_untyped_scores(self):
        update = EvaluationUpdate(scores={"relevance": "eight"})
        assert update.scores == {"relevance": "eight"}

    def test_update_feedback_max_length(self):
        with pytest.raises(ValidationError):
            EvaluationUpdate(feedback="x" * 5001)



# SUBMISSION MODEL


class TestSubmissionModel:

    def test_create_strips_title(self):
        created = SubmissionCreate(team_id=uuid4(), project_title="  Demo  ", video_link=" https://v ")
        assert created.project_title == "Demo"
        assert created.video_link == "https://v"
        assert created.draft is False

    @pytest.mark.parametrize("field", ["project_title", "video_link"])
    def test_blank_required_text_rejected(self, field):
        data = {"team_id": uuid4(), "project_title": "Demo", "video_link": "https://v", field: "   "}
        with pytest.raises(ValidationError):
            SubmissionCreate(**data)

    def test_update_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            SubmissionUpdate(project_title="  ")

    def test_update_allows_omitted_fields(self):
        assert SubmissionUpdate().model_dump(exclude_unset=True) == {}

    def test_null_text_columns_become_empty(self):
        submission = Submission(
            team_id=uuid4(),
            project_title="Demo",
            video_link="https://v",
            description=None,
            learning_outcomes=None,
            status="pending-assignment",
        )
        assert submission.description == ""
        assert submission.learning_outcomes == ""
        assert submission.status is SubmissionStatus.SUBMITTED



# EVALUATOR / TEAM / LEADERBOARD


class TestOtherModels:

    def test_evaluator_email_normalised(self):
        assert EvaluatorCreate(name="Ada", email=" Ada@Example.COM ").email == "ada@example.com"

    def test_evaluator_email_format(self):
        with pytest.raises(ValidationError):
            EvaluatorCreate(name="Ada", email="not-an-email")

    def test_team_members_decoded(self):
        member = {"id": str(uuid4()), "name": "Grace", "email": "grace@example.com"}
        team = Team(id=uuid4(), name="Alpha", members=json.dumps([member]))
        assert team.members[0].name == "Grace"

    def test_team_member_email_normalised(self):
        member = TeamMember(id=uuid4(), name=" Grace ", email=" Grace@Example.com ")
        assert member.name == "Grace"
        assert member.email == "grace@example.com"

    def test_team_create_rejects_repeated_member(self):
        member = {"id": uuid4(), "name": "Grace", "email": "grace@example.com"}
        with pytest.raises(ValidationError):
            TeamCreate(name="Alpha", members=[member, member])

    def test_leaderboard_score_falls_back_to_average(self):
        entry = LeaderboardEntry(rank=1, team_id=uuid4(), team_name="Alpha", average_score=7.5)
        assert entry.score == 7.5
        assert entry.model_dump()["score"] == 7.5

    def test_leaderboard_rank_is_one_based(self):
        with pytest.raises(ValidationError):
            LeaderboardEntry(rank=0, team_id=uuid4(), team_name="Alpha", total_score=10)
