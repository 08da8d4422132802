"""
Exception Handlers - EvalBoard
evalboard/core/error_handlers.py

Renders every error with the ErrorResponse envelope
{error_code, message, details, timestamp}.
Register with register_exception_handlers(app) in main.py.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from evalboard.core.exceptions import (
    ActiveSubmissionExistsException,
    AlreadyAssignedException,
    AuthenticationRequiredException,
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
    PermissionDeniedException,
    RepositoryException,
)

logger = structlog.get_logger(__name__)

COMPETITION_STATUS_CODES: Dict[Type[CompetitionException], int] = {
    InvalidScoreException: status.HTTP_422_UNPROCESSABLE_ENTITY,
    FeedbackTooShortException: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidTransitionException: status.HTTP_409_CONFLICT,
    NotEditableException: status.HTTP_409_CONFLICT,
    AlreadyAssignedException: status.HTTP_409_CONFLICT,
    NotPendingException: status.HTTP_409_CONFLICT,
    EvaluatorNotActiveException: status.HTTP_409_CONFLICT,
    ActiveSubmissionExistsException: status.HTTP_409_CONFLICT,
    NotOwnerException: status.HTTP_403_FORBIDDEN,
    NotTeamMemberException: status.HTTP_403_FORBIDDEN,
    LeaderNotMemberException: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ConcurrentModificationException: status.HTTP_409_CONFLICT,
    PermissionDeniedException: status.HTTP_403_FORBIDDEN,
    AuthenticationRequiredException: status.HTTP_401_UNAUTHORIZED,
}


FIELD_MESSAGES = {
    "team_id": {
        "missing": "Team ID is required",
        "uuid_parsing": "Team ID must be a valid UUID format",
    },
    "project_title": {
        "missing": "Project title is required",
        "string_too_short": "Project title must not be empty",
        "string_too_long": "Project title must not exceed 255 characters",
        "value_error": "Project title must not be blank",
    },
    "video_link": {
        "missing": "Video link is required",
        "string_too_short": "Video link must not be empty",
        "value_error": "Video link must not be blank",
    },
    "email": {
        "missing": "Email is required",
        "string_pattern_mismatch": "Email must be a valid email address",
    },
    "name": {
        "missing": "Name is required",
        "string_too_short": "Name must not be empty",
    },
    "feedback": {
        "string_too_long": "Feedback must not exceed 5000 characters",
        "string_type": "Feedback must be a string",
    },
    "status": {
        "enum": "Status has an invalid value",
    },
}

DEFAULT_MESSAGES = {
    "missing": "Field '{field}' is required",
    "string_too_short": "Field '{field}' is too short",
    "string_too_long": "Field '{field}' is too long",
    "string_pattern_mismatch": "Field '{field}' has invalid format",
    "less_than_equal": "Field '{field}' exceeds maximum allowed value",
    "greater_than_equal": "Field '{field}' is below minimum allowed value",
    "uuid_parsing": "Field '{field}' must be a valid UUID",
    "uuid_type": "Field '{field}' must be a valid UUID",
    "string_type": "Field '{field}' must be a string",
    "dict_type": "Field '{field}' must be an object",
    "bool_parsing": "Field '{field}' must be a boolean",
    "enum": "Field '{field}' has an invalid value",
    "extra_forbidden": "Unknown field '{field}' is not allowed",
}


def get_validation_message(field: str, error_type: str) -> str:
    if field in FIELD_MESSAGES:
        field_msgs = FIELD_MESSAGES[field]
        for key in field_msgs:
            if key in error_type:
                return field_msgs[key]

    for key, template in DEFAULT_MESSAGES.items():
        if key in error_type:
            return template.format(field=field)

    return f"Invalid value for field '{field}'"


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()

    if not errors:
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", "Request validation failed"
        )

    err = errors[0]
    error_type = err.get("type", "")
    loc = err.get("loc", [])

    if "json_invalid" in error_type:
        return error_response(status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST", "Malformed JSON request body")

    field = ".".join(str(l) for l in loc if l not in ("body", "path", "query", "header"))
    if field:
        message = get_validation_message(field, error_type)
    else:
        message = err.get("msg") or "Request validation failed"

    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        message,
        {"field": field, "type": error_type} if field else None,
    )


async def competition_exception_handler(request: Request, exc: CompetitionException):
    status_code = COMPETITION_STATUS_CODES.get(type(exc), status.HTTP_409_CONFLICT)
    logger.info(
        "request_rejected",
        path=request.url.path,
        error_code=exc.error_code,
        status_code=status_code,
    )
    return error_response(status_code, exc.error_code, exc.message, exc.details)


async def not_found_exception_handler(request: Request, exc: EntityNotFoundException):
    return error_response(
        status.HTTP_404_NOT_FOUND,
        exc.error_code,
        f"{exc.entity_type} not found",
        {"id": exc.entity_id},
    )


async def duplicate_exception_handler(request: Request, exc: DuplicateEntityException):
    return error_response(status.HTTP_409_CONFLICT, "DUPLICATE_ENTITY", exc.message)


async def foreign_key_exception_handler(request: Request, exc: ForeignKeyViolationException):
    return error_response(status.HTTP_409_CONFLICT, "REFERENCE_VIOLATION", exc.message)


async def database_connection_exception_handler(request: Request, exc: DatabaseConnectionException):
    logger.error("database_unavailable", path=request.url.path, error=exc.message)
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "SERVICE_UNAVAILABLE",
        "Database temporarily unavailable",
        {"retryable": True},
    )


async def repository_exception_handler(request: Request, exc: RepositoryException):
    logger.error("repository_error", path=request.url.path, error=str(exc))
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR", "Unexpected server error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    # Starlette resolves handlers along the exception's MRO, so subclasses of
    # RepositoryException reach their own handler first.
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(CompetitionException, competition_exception_handler)
    app.add_exception_handler(EntityNotFoundException, not_found_exception_handler)
    app.add_exception_handler(DuplicateEntityException, duplicate_exception_handler)
    app.add_exception_handler(ForeignKeyViolationException, foreign_key_exception_handler)
    app.add_exception_handler(DatabaseConnectionException, database_connection_exception_handler)
    app.add_exception_handler(RepositoryException, repository_exception_handler)
