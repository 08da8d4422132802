"""
Custom Exceptions - EvalBoard
evalboard/core/exceptions.py

Repository exceptions (persistence collaborator failures) and competition
domain exceptions (validation and lifecycle rule violations).
"""

from typing import Any, Dict, Iterable, Optional


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in database."""

    def __init__(self, entity_type: str, entity_id: Any):
        self.entity_type = entity_type
        self.entity_id = str(entity_id)
        super().__init__(f"{entity_type} with ID {entity_id} not found")

    @property
    def error_code(self) -> str:
        return f"{self.entity_type.upper()}_NOT_FOUND"


class DuplicateEntityException(RepositoryException):
    """Duplicate entity violation."""

    def __init__(self, message: str = "Entity already exists"):
        self.message = message
        super().__init__(message)


class DatabaseConnectionException(RepositoryException):
    """Database connection failure. Transient: the caller may retry."""

    def __init__(self, message: str = "Database connection failed"):
        self.message = message
        super().__init__(message)


class ForeignKeyViolationException(RepositoryException):
    """Foreign key constraint violation."""

    def __init__(self, message: str = "Foreign key constraint violation"):
        self.message = message
        super().__init__(message)


class CompetitionException(Exception):
    """Base exception for competition rule violations.

    Recoverable: the message and details tell the caller how to correct the
    request. Never retried inside the core.
    """

    error_code = "COMPETITION_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class InvalidScoreException(CompetitionException):
    """Criterion scores missing, unknown or outside [1, 10]."""

    error_code = "INVALID_SCORE"

    def __init__(
        self,
        missing: Iterable[str] = (),
        unknown: Iterable[str] = (),
        out_of_range: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        self.missing = sorted(missing)
        self.unknown = sorted(unknown)
        self.out_of_range = dict(out_of_range or {})
        parts = []
        if self.missing:
            parts.append(f"missing criteria: {', '.join(self.missing)}")
        if self.unknown:
            parts.append(f"unknown criteria: {', '.join(self.unknown)}")
        if self.out_of_range:
            parts.append(f"scores must be integers 1-10: {', '.join(sorted(self.out_of_range))}")
        super().__init__(
            message or "Invalid scores (" + "; ".join(parts) + ")",
            details={
                "missing": self.missing,
                "unknown": self.unknown,
                "out_of_range": {k: repr(v) for k, v in self.out_of_range.items()},
            },
        )


class InvalidTransitionException(CompetitionException):
    """Illegal evaluation lifecycle move (skip or reverse)."""

    error_code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str, entity_type: str = "evaluation"):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move {entity_type} from '{current}' to '{target}'",
            details={"current": current, "target": target},
        )


class NotEditableException(CompetitionException):
    """Mutation attempted on a record outside its editable states."""

    error_code = "NOT_EDITABLE"

    def __init__(self, entity_type: str, entity_id: Any, status: str):
        self.entity_type = entity_type
        self.entity_id = str(entity_id)
        self.status = status
        super().__init__(
            f"{entity_type} {entity_id} is not editable in status '{status}'",
            details={"entity_id": str(entity_id), "status": status},
        )


class AlreadyAssignedException(CompetitionException):
    """An evaluation already exists for the (submission, evaluator) pair."""

    error_code = "ALREADY_ASSIGNED"

    def __init__(self, submission_id: Any, evaluator_id: Any):
        super().__init__(
            f"Evaluator {evaluator_id} is already assigned to submission {submission_id}",
            details={"submission_id": str(submission_id), "evaluator_id": str(evaluator_id)},
        )


class NotPendingException(CompetitionException):
    """Approval action on an evaluator that is no longer pending."""

    error_code = "NOT_PENDING"

    def __init__(self, evaluator_id: Any, status: str):
        self.status = status
        super().__init__(
            f"Evaluator {evaluator_id} is not pending (status '{status}')",
            details={"evaluator_id": str(evaluator_id), "status": status},
        )


class EvaluatorNotActiveException(CompetitionException):
    """Assignment attempted with an evaluator that is not active."""

    error_code = "EVALUATOR_NOT_ACTIVE"

    def __init__(self, evaluator_id: Any, status: str):
        super().__init__(
            f"Evaluator {evaluator_id} is not active (status '{status}')",
            details={"evaluator_id": str(evaluator_id), "status": status},
        )


class ActiveSubmissionExistsException(CompetitionException):
    """The team already holds a non-terminal submission."""

    error_code = "ACTIVE_SUBMISSION_EXISTS"

    def __init__(self, team_id: Any, submission_id: Any):
        super().__init__(
            f"Team {team_id} already has an active submission",
            details={"team_id": str(team_id), "submission_id": str(submission_id)},
        )


class NotOwnerException(CompetitionException):
    """An evaluator tried to change an evaluation assigned to someone else."""

    error_code = "NOT_OWNER"

    def __init__(self, evaluation_id: Any):
        super().__init__(
            f"Evaluation {evaluation_id} is assigned to another evaluator",
            details={"evaluation_id": str(evaluation_id)},
        )


class FeedbackTooShortException(CompetitionException):
    """Evaluation submitted with less feedback than the configured minimum."""

    error_code = "FEEDBACK_TOO_SHORT"

    def __init__(self, min_length: int, actual_length: int):
        super().__init__(
            f"Feedback must be at least {min_length} characters",
            details={"min_length": min_length, "length": actual_length},
        )


class AuthenticationRequiredException(CompetitionException):
    """Caller identity headers missing or malformed."""

    error_code = "AUTHENTICATION_REQUIRED"

    def __init__(self, message: str = "Caller identity headers X-User-Id and X-User-Role are required"):
        super().__init__(message)


class PermissionDeniedException(CompetitionException):
    """Caller's role may not perform the operation."""

    error_code = "FORBIDDEN"

    def __init__(self, required_role: str, role: Optional[str]):
        super().__init__(
            f"This operation requires the '{required_role}' role",
            details={"required_role": required_role, "role": role},
        )


class NotTeamMemberException(CompetitionException):
    """A team caller acted on a team they do not belong to."""

    error_code = "NOT_TEAM_MEMBER"

    def __init__(self, team_id: Any, user_id: Any):
        super().__init__(
            f"User {user_id} is not a member of team {team_id}",
            details={"team_id": str(team_id), "user_id": str(user_id)},
        )


class LeaderNotMemberException(CompetitionException):
    """The team leader would not be one of the team's members."""

    error_code = "LEADER_NOT_MEMBER"

    def __init__(self, team_id: Any, leader_id: Any):
        super().__init__(
            f"Leader {leader_id} must be a member of team {team_id}",
            details={"team_id": str(team_id), "leader_id": str(leader_id)},
        )


class ConcurrentModificationException(CompetitionException):
    """Another request changed the entity between read and write."""

    error_code = "CONCURRENT_MODIFICATION"

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            f"{entity_type} {entity_id} was changed by another request; reload and try again",
            details={"entity_type": entity_type.lower(), "id": str(entity_id)},
        )
