"""
Core Package - EvalBoard
evalboard/core/__init__.py

Core infrastructure: exceptions, logging, error handlers, dependencies.
"""

from evalboard.core.exceptions import (
    ActiveSubmissionExistsException,
    AlreadyAssignedException,
    CompetitionException,
    ConcurrentModificationException,
    DatabaseConnectionException,
    DuplicateEntityException,
    EntityNotFoundException,
    EvaluatorNotActiveException,
    FeedbackTooShortException,
    ForeignKeyViolationException,
    InvalidScoreException,
    InvalidTransitionException,
    LeaderNotMemberException,
    NotEditableException,
    NotOwnerException,
    NotPendingException,
    NotTeamMemberException,
    RepositoryException,
)
from evalboard.core.logging import configure_logging

__all__ = [
    # Exceptions
    "ActiveSubmissionExistsException",
    "AlreadyAssignedException",
    "CompetitionException",
    "ConcurrentModificationException",
    "DatabaseConnectionException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "EvaluatorNotActiveException",
    "FeedbackTooShortException",
    "ForeignKeyViolationException",
    "InvalidScoreException",
    "InvalidTransitionException",
    "LeaderNotMemberException",
    "NotEditableException",
    "NotOwnerException",
    "NotPendingException",
    "NotTeamMemberException",
    "RepositoryException",
    # Logging
    "configure_logging",
]
