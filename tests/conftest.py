# tests/conftest.py

"""
Pytest Fixtures - shared fakes, services and API client

The repositories are replaced by in-memory fakes with the same method
signatures and the same atomic contracts as the Snowflake versions:
insert-if-absent returns None on conflict, compare-and-set updates return
False when the stored status no longer matches.
"""

import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from evalboard.core import dependencies
from evalboard.core.exceptions import RepositoryException
from evalboard.models.enumerations import (
    EvaluationStatus,
    EvaluatorStatus,
    SubmissionStatus,
)
from evalboard.services.approval_service import ApprovalService
from evalboard.services.assignment_service import AssignmentService
from evalboard.services.dashboard_service import DashboardService
from evalboard.services.evaluation_service import EvaluationService
from evalboard.services.leaderboard_service import LeaderboardService
from evalboard.services.submission_service import SubmissionService
from evalboard.services.team_service import TeamService


# =============================================================================
# SCORE FIXTURES
# =============================================================================

# Totals 78 / average 7.8
SCENARIO_SCORES = {
    "relevance": 8,
    "innovation": 9,
    "clarity": 7,
    "depth": 6,
    "engagement": 9,
    "techUse": 8,
    "scalability": 7,
    "ethics": 9,
    "practicality": 8,
    "videoQuality": 7,
}

# Total 92
HIGH_SCORES = {
    "relevance": 10,
    "innovation": 10,
    "clarity": 9,
    "depth": 9,
    "engagement": 9,
    "techUse": 9,
    "scalability": 9,
    "ethics": 9,
    "practicality": 9,
    "videoQuality": 9,
}


@pytest.fixture
def scenario_scores():
    return dict(SCENARIO_SCORES)


@pytest.fixture
def high_scores():
    return dict(HIGH_SCORES)


# =============================================================================
# IN-MEMORY REPOSITORIES
# =============================================================================

_EPOCH = datetime(2026, 3, 1, tzinfo=timezone.utc)


class _Clock:
    """Strictly increasing timestamps so ordering by created_at is deterministic."""

    def __init__(self):
        self.ticks = 0

    def now(self) -> datetime:
        self.ticks += 1
        return _EPOCH + timedelta(seconds=self.ticks)


class FakeTeamRepository:
    def __init__(self, clock: _Clock):
        self.clock = clock
        self.rows: Dict[UUID, Dict[str, Any]] = {}

    def add(
        self,
        name: str,
        members: Optional[List[Dict[str, Any]]] = None,
        leader_id: Optional[UUID] = None,
    ) -> Dict[str, Any]:
        row = {"id": uuid4(), "name": name, "leader_id": leader_id, "members": members or [], "version": 1}
        self.rows[row["id"]] = row
        return copy.deepcopy(row)

    def create(
        self,
        name: str,
        members: Sequence[Dict[str, Any]],
        leader_id: Optional[UUID] = None,
    ) -> Dict[str, Any]:
        return self.add(name, members=copy.deepcopy(list(members)), leader_id=leader_id)

    def get_by_id(self, team_id: UUID) -> Optional[Dict[str, Any]]:
        row = self.rows.get(team_id)
        return copy.deepcopy(row) if row else None

    def get_many(self, team_ids: Iterable[UUID]) -> List[Dict[str, Any]]:
        return [copy.deepcopy(self.rows[t]) for t in set(team_ids) if t in self.rows]

    def get_all(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(r) for r in sorted(self.rows.values(), key=lambda r: r["name"])]

    def update_if_version(
        self,
        team_id: UUID,
        expected_version: int,
        name: Optional[str] = None,
        leader_id: Optional[UUID] = None,
        members: Optional[Sequence[Dict[str, Any]]] = None,
    ) -> bool:
        row = self.rows.get(team_id)
        if row is None or row["version"] != expected_version:
            return False
        if name is not None:
            row["name"] = name
        if leader_id is not None:
            row["leader_id"] = leader_id
        if members is not None:
            row["members"] = copy.deepcopy(list(members))
        row["version"] += 1
        return True

    def count(self) -> int:
        return len(self.rows)


class FakeSubmissionRepository:
    def __init__(self, clock: _Clock):
        self.clock = clock
        self.rows: Dict[UUID, Dict[str, Any]] = {}

    def create_if_no_active(
        self,
        team_id: UUID,
        project_title: str,
        description: str,
        learning_outcomes: str,
        video_link: str,
        status: SubmissionStatus,
    ) -> Optional[Dict[str, Any]]:
        if self.get_active_for_team(team_id):
            return None
        now = self.clock.now()
        row = {
            "id": uuid4(),
            "team_id": team_id,
            "project_title": project_title,
            "description": description,
            "learning_outcomes": learning_outcomes,
            "video_link": video_link,
            "status": SubmissionStatus(status).value,
            "created_at": now,
            "updated_at": now,
        }
        self.rows[row["id"]] = row
        return copy.deepcopy(row)

    def get_by_id(self, submission_id: UUID) -> Optional[Dict[str, Any]]:
        row = self.rows.get(submission_id)
        return copy.deepcopy(row) if row else None

    def get_many(self, submission_ids: Iterable[UUID]) -> List[Dict[str, Any]]:
        return [copy.deepcopy(self.rows[s]) for s in set(submission_ids) if s in self.rows]

    def get_all(self, team_id: Optional[UUID] = None) -> List[Dict[str, Any]]:
        rows = [r for r in self.rows.values() if team_id is None or r["team_id"] == team_id]
        rows.sort(key=lambda r: str(r["id"]))
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return copy.deepcopy(rows)

    def get_active_for_team(self, team_id: UUID) -> Optional[Dict[str, Any]]:
        for row in self.get_all(team_id=team_id):
            if not SubmissionStatus(row["status"]).is_terminal:
                return row
        return None

    def update_if_status(
        self,
        submission_id: UUID,
        update_data: Dict[str, Any],
        allowed_statuses: Sequence[SubmissionStatus],
    ) -> bool:
        row = self.rows.get(submission_id)
        if row is None or SubmissionStatus(row["status"]) not in set(allowed_statuses):
            return False
        for key, value in update_data.items():
            row[key] = value.value if isinstance(value, SubmissionStatus) else value
        row["updated_at"] = self.clock.now()
        return True

    def count(self) -> int:
        return len(self.rows)


class FakeEvaluatorRepository:
    def __init__(self, clock: _Clock):
        self.clock = clock
        self.rows: Dict[UUID, Dict[str, Any]] = {}

    def add(
        self,
        name: str,
        email: Optional[str] = None,
        status: EvaluatorStatus = EvaluatorStatus.ACTIVE,
        qualification: Optional[str] = None,
    ) -> Dict[str, Any]:
        row = self.create_if_email_free(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            qualification=qualification,
        )
        self.rows[row["id"]]["status"] = status
        return self.get_by_id(row["id"])

    def create_if_email_free(
        self,
        name: str,
        email: str,
        phone: Optional[str] = None,
        qualification: Optional[str] = None,
        experience: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        if any(r["email"] == email for r in self.rows.values()):
            return None
        row = {
            "id": uuid4(),
            "name": name,
            "email": email,
            "phone": phone,
            "qualification": qualification,
            "experience": experience,
            "status": EvaluatorStatus.PENDING,
            "created_at": self.clock.now(),
        }
        self.rows[row["id"]] = row
        return copy.deepcopy(row)

    def get_by_id(self, evaluator_id: UUID) -> Optional[Dict[str, Any]]:
        row = self.rows.get(evaluator_id)
        return copy.deepcopy(row) if row else None

    def get_all(self, status: Optional[EvaluatorStatus] = None) -> List[Dict[str, Any]]:
        rows = [r for r in self.rows.values() if status is None or r["status"] is status]
        rows.sort(key=lambda r: (r["name"], str(r["id"])))
        return copy.deepcopy(rows)

    def update_status_if(
        self,
        evaluator_id: UUID,
        expected: EvaluatorStatus,
        new_status: EvaluatorStatus,
    ) -> bool:
        row = self.rows.get(evaluator_id)
        if row is None or row["status"] is not expected:
            return False
        row["status"] = new_status
        return True

    def count_by_status(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for row in self.rows.values():
            counts[row["status"].value] = counts.get(row["status"].value, 0) + 1
        return counts


class FakeEvaluationRepository:
    def __init__(self, clock: _Clock):
        self.clock = clock
        self.rows: Dict[UUID, Dict[str, Any]] = {}

    def add(
        self,
        submission_id: UUID,
        evaluator_id: UUID,
        scores: Optional[Dict[str, int]] = None,
        status: str = "draft",
        feedback: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Seed a row directly; status may be a legacy literal."""
        row = self.create_if_absent(submission_id, evaluator_id)
        stored = self.rows[row["id"]]
        stored["scores"] = dict(scores or {})
        stored["total_score"] = sum(stored["scores"].values())
        stored["average_score"] = stored["total_score"] / 10
        stored["status"] = status
        stored["feedback"] = feedback
        return self.get_by_id(row["id"])

    def create_if_absent(self, submission_id: UUID, evaluator_id: UUID) -> Optional[Dict[str, Any]]:
        for row in self.rows.values():
            if row["submission_id"] == submission_id and row["evaluator_id"] == evaluator_id:
                return None
        now = self.clock.now()
        row = {
            "id": uuid4(),
            "submission_id": submission_id,
            "evaluator_id": evaluator_id,
            "scores": {},
            "feedback": None,
            "total_score": 0,
            "average_score": 0.0,
            "status": EvaluationStatus.DRAFT.value,
            "created_at": now,
            "updated_at": now,
            "submitted_at": None,
            "published_at": None,
        }
        self.rows[row["id"]] = row
        return copy.deepcopy(row)

    def get_by_id(self, evaluation_id: UUID) -> Optional[Dict[str, Any]]:
        row = self.rows.get(evaluation_id)
        return copy.deepcopy(row) if row else None

    def get_all(
        self,
        submission_id: Optional[UUID] = None,
        evaluator_id: Optional[UUID] = None,
        statuses: Optional[Iterable[EvaluationStatus]] = None,
        submission_ids: Optional[Iterable[UUID]] = None,
    ) -> List[Dict[str, Any]]:
        wanted = {EvaluationStatus(s) for s in statuses} if statuses is not None else None
        allowed_submissions = set(submission_ids) if submission_ids is not None else None
        rows = [
            r for r in self.rows.values()
            if (submission_id is None or r["submission_id"] == submission_id)
            and (evaluator_id is None or r["evaluator_id"] == evaluator_id)
            and (wanted is None or EvaluationStatus(r["status"]) in wanted)
            and (allowed_submissions is None or r["submission_id"] in allowed_submissions)
        ]
        rows.sort(key=lambda r: (r["created_at"], str(r["id"])))
        return copy.deepcopy(rows)

    def update_draft(
        self,
        evaluation_id: UUID,
        scores: Optional[Dict[str, int]],
        total_score: Optional[int],
        average_score: Optional[float],
        feedback: Optional[str],
        new_status: EvaluationStatus,
    ) -> bool:
        row = self.rows.get(evaluation_id)
        if row is None or EvaluationStatus(row["status"]) is not EvaluationStatus.DRAFT:
            return False
        now = self.clock.now()
        if scores is not None:
            row["scores"] = dict(scores)
        if total_score is not None:
            row["total_score"] = total_score
        if average_score is not None:
            row["average_score"] = average_score
        if feedback is not None:
            row["feedback"] = feedback
        row["status"] = new_status.value
        row["updated_at"] = now
        if new_status is EvaluationStatus.SUBMITTED:
            row["submitted_at"] = now
        return True

    def transition(
        self,
        evaluation_id: UUID,
        expected: EvaluationStatus,
        target: EvaluationStatus,
    ) -> bool:
        row = self.rows.get(evaluation_id)
        if row is None or EvaluationStatus(row["status"]) is not expected:
            return False
        now = self.clock.now()
        row["updated_at"] = now
        if expected is not target:
            row["status"] = target.value
            if target is EvaluationStatus.SUBMITTED:
                row["submitted_at"] = now
            elif target is EvaluationStatus.PUBLISHED:
                row["published_at"] = now
        return True


class FakeLeaderboardRepository:
    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.fail_next_replace = False
        self.replace_calls = 0

    def get_all(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(sorted(self.rows, key=lambda r: r["rank"]))

    def replace_all(self, entries, published_at: datetime) -> None:
        self.replace_calls += 1
        if self.fail_next_replace:
            self.fail_next_replace = False
            raise RepositoryException("Database error: simulated failure")
        self.rows = [
            {**entry.model_dump(exclude={"score"}), "published_at": published_at}
            for entry in entries
        ]


# =============================================================================
# REPOSITORY / SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def clock():
    return _Clock()


@pytest.fixture
def team_repo(clock):
    return FakeTeamRepository(clock)


@pytest.fixture
def submission_repo(clock):
    return FakeSubmissionRepository(clock)


@pytest.fixture
def evaluator_repo(clock):
    return FakeEvaluatorRepository(clock)


@pytest.fixture
def evaluation_repo(clock):
    return FakeEvaluationRepository(clock)


@pytest.fixture
def leaderboard_repo():
    return FakeLeaderboardRepository()


@pytest.fixture
def team_service(team_repo):
    return TeamService(team_repo)


@pytest.fixture
def submission_service(submission_repo, team_repo):
    return SubmissionService(submission_repo, team_repo)


@pytest.fixture
def evaluation_service(evaluation_repo, submission_service, evaluator_repo, team_repo):
    return EvaluationService(
        evaluation_repo=evaluation_repo,
        submission_service=submission_service,
        evaluator_repo=evaluator_repo,
        team_repo=team_repo,
        min_feedback_length=0,
    )


@pytest.fixture
def assignment_service(evaluation_repo, evaluator_repo, submission_service):
    return AssignmentService(
        evaluation_repo=evaluation_repo,
        evaluator_repo=evaluator_repo,
        submission_service=submission_service,
    )


@pytest.fixture
def approval_service(evaluator_repo):
    return ApprovalService(evaluator_repo)


@pytest.fixture
def leaderboard_service(leaderboard_repo, evaluation_repo, submission_repo, team_repo):
    return LeaderboardService(
        leaderboard_repo=leaderboard_repo,
        evaluation_repo=evaluation_repo,
        submission_repo=submission_repo,
        team_repo=team_repo,
        cache_factory=lambda: None,
    )


@pytest.fixture
def dashboard_service(team_repo, evaluator_repo, submission_repo, evaluation_repo):
    return DashboardService(
        team_repo=team_repo,
        evaluator_repo=evaluator_repo,
        submission_repo=submission_repo,
        evaluation_repo=evaluation_repo,
    )


# =============================================================================
# DOMAIN FIXTURES
# =============================================================================

@pytest.fixture
def team_member():
    return {"id": uuid4(), "name": "Grace Hopper", "email": "grace@example.com"}


@pytest.fixture
def team(team_repo, team_member):
    return team_repo.add("Team Alpha", members=[team_member], leader_id=team_member["id"])


@pytest.fixture
def submission(submission_repo, team):
    return submission_repo.create_if_no_active(
        team_id=team["id"],
        project_title="Demo Project",
        description="A demo",
        learning_outcomes="Lots",
        video_link="https://videos.example.com/demo",
        status=SubmissionStatus.SUBMITTED,
    )


@pytest.fixture
def active_evaluator(evaluator_repo):
    return evaluator_repo.add("Ada Lovelace", qualification="PhD Computing")


@pytest.fixture
def draft_evaluation(evaluation_repo, submission, active_evaluator):
    return evaluation_repo.add(submission["id"], active_evaluator["id"])


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def client(
    team_service,
    submission_service,
    evaluation_service,
    assignment_service,
    approval_service,
    leaderboard_service,
    dashboard_service,
):
    """TestClient wired to the in-memory services."""
    from evalboard.main import app

    app.dependency_overrides = {
        dependencies.get_team_service: lambda: team_service,
        dependencies.get_submission_service: lambda: submission_service,
        dependencies.get_evaluation_service: lambda: evaluation_service,
        dependencies.get_assignment_service: lambda: assignment_service,
        dependencies.get_approval_service: lambda: approval_service,
        dependencies.get_leaderboard_service: lambda: leaderboard_service,
        dependencies.get_dashboard_service: lambda: dashboard_service,
    }
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


@pytest.fixture
def admin_headers():
    return {"X-User-Id": str(uuid4()), "X-User-Role": "admin"}


@pytest.fixture
def evaluator_headers(active_evaluator):
    return {"X-User-Id": str(active_evaluator["id"]), "X-User-Role": "evaluator"}


@pytest.fixture
def team_headers(team_member):
    return {"X-User-Id": str(team_member["id"]), "X-User-Role": "team"}
