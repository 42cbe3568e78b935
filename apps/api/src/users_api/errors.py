"""Mapping of handler failures onto HTTP responses."""

from fastapi import status
from fastapi.responses import JSONResponse
from users_common.models.outcome import ErrorKind, UserError

from users_api.models.error import ErrorResponse

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Documented on every users route that can fail
ERROR_RESPONSES: dict[int | str, dict] = {
    code: {"model": ErrorResponse} for code in STATUS_BY_KIND.values()
}


def error_response(error: UserError, headers: dict[str, str] | None = None) -> JSONResponse:
    """Render a ``UserError`` as a JSON response with its mapped status code."""
    body = ErrorResponse(error=error.message, kind=error.kind)
    return JSONResponse(
        status_code=STATUS_BY_KIND[error.kind],
        content=body.model_dump(mode="json"),
        headers=headers,
    )
