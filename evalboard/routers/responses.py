"""
Shared OpenAPI error response declarations for the routers.
"""

from typing import Any, Dict

from evalboard.models.common import ErrorResponse

_EXAMPLES = {
    400: ("Invalid request", "INVALID_REQUEST", "Malformed JSON request body"),
    401: ("Missing caller identity", "AUTHENTICATION_REQUIRED", "Caller identity headers X-User-Id and X-User-Role are required"),
    403: ("Caller not allowed", "FORBIDDEN", "This operation requires the 'admin' role"),
    404: ("Entity not found", "SUBMISSION_NOT_FOUND", "Submission not found"),
    409: ("Conflicts with current state", "INVALID_TRANSITION", "Cannot move evaluation from 'published' to 'submitted'"),
    422: ("Validation error", "VALIDATION_ERROR", "Field 'project_title' is required"),
    503: ("Database unavailable", "SERVICE_UNAVAILABLE", "Database temporarily unavailable"),
}


def error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """responses= mapping for the given error status codes."""
    responses: Dict[int, Dict[str, Any]] = {}
    for code in (*status_codes, 503):
        description, error_code, message = _EXAMPLES[code]
        responses[code] = {
            "model": ErrorResponse,
            "description": description,
            "content": {
                "application/json": {
                    "example": {
                        "error_code": error_code,
                        "message": message,
                        "details": None,
                        "timestamp": "2026-01-28T12:00:00Z",
                    }
                }
            },
        }
    return responses
