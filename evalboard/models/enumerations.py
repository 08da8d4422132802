from enum import Enum

class EvaluationStatus(str, Enum):
    DRAFT = "draft"          # Assigned, scores editable by the evaluator
    SUBMITTED = "submitted"  # Finalised by the evaluator
    PUBLISHED = "published"  # Approved by an admin, visible to the team

    @classmethod
    def _missing_(cls, value):
        # Legacy literals still present in older records
        legacy = {"completed": cls.SUBMITTED, "pending": cls.DRAFT}
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
            return legacy.get(normalized)
        return None

    @property
    def order(self) -> int:
        return _EVALUATION_ORDER[self]

_EVALUATION_ORDER = {
    EvaluationStatus.DRAFT: 0,
    EvaluationStatus.SUBMITTED: 1,
    EvaluationStatus.PUBLISHED: 2,
}

# Statuses counted as a finished assessment
COMPLETED_EVALUATION_STATUSES = frozenset({EvaluationStatus.SUBMITTED, EvaluationStatus.PUBLISHED})


class SubmissionStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    SUBMITTED = "submitted"
    ASSIGNED = "assigned"
    UNDER_REVIEW = "under-review"
    COMPLETED = "completed"
    PUBLISHED = "published"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            if normalized == "pending-assignment":
                return cls.SUBMITTED
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def order(self) -> int:
        return list(SubmissionStatus).index(self)

    @property
    def is_editable(self) -> bool:
        return self in (SubmissionStatus.DRAFT, SubmissionStatus.PENDING, SubmissionStatus.SUBMITTED)

    @property
    def is_terminal(self) -> bool:
        return self in (SubmissionStatus.COMPLETED, SubmissionStatus.PUBLISHED)


class SubmissionEvaluationStatus(str, Enum):
    NOT_STARTED = "not-started"
    ASSIGNED = "assigned"
    COMPLETED = "completed"


class EvaluatorStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class UserRole(str, Enum):
    ADMIN = "admin"
    EVALUATOR = "evaluator"
    TEAM = "team"


class LeaderboardSource(str, Enum):
    PUBLISHED = "published"  # Persisted by an admin publish
    DERIVED = "derived"      # Computed on read from evaluations
