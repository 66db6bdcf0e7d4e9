import uuid
from typing import Any, Sequence

from fastapi.responses import JSONResponse

from app.api.payloads.error import APIError, ErrorDetail

FIELD_MESSAGES = {
    "email": "Please enter a valid email address",
}


def create_error_response(
    error_type: str, message: str, status_code: int, fields: dict[str, str] | None = None
) -> JSONResponse:
    """
    Create a structured error response.

    Args:
        error_type: The type of error (e.g., "invalid_data", "entity_not_found")
        message: Human-readable error message
        status_code: HTTP status code
        fields: Optional per-field validation messages

    Returns:
        JSONResponse with structured error format
    """
    error_response = APIError(
        request_id=str(uuid.uuid4()), error=ErrorDetail(type=error_type, message=message, fields=fields)
    )
    return JSONResponse(status_code=status_code, content=error_response.model_dump(exclude_none=True))


def field_errors(errors: Sequence[Any]) -> dict[str, str]:
    """Map request validation errors to one message per offending body field."""
    fields: dict[str, str] = {}
    for error in errors:
        location = [part for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        if not location:
            continue
        name = str(location[0])
        fields.setdefault(name, FIELD_MESSAGES.get(name, error.get("msg", "Invalid value")))
    return fields
