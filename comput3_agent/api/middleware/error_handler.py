"""Exception handlers producing the agent's error body.

Every handled error is returned as::

    {"error": {"type": ..., "message": ..., "request_id": ..., "details": ...}}

``details`` is only present when there is something to report.
"""

from typing import Any

import structlog
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from comput3_agent.services.comput3_client import MissingCredentialError

logger = structlog.get_logger(__name__)


def error_response(
    request: Request,
    error_type: str,
    message: str,
    status_code: int,
    details: Any = None,
) -> JSONResponse:
    """Build an error response tagged with the request id.

    Args:
        request: Request that failed
        error_type: Machine-readable error type
        message: Human-readable message
        status_code: HTTP status code
        details: Extra error details (optional)

    Returns:
        JSONResponse carrying the error body
    """
    error: dict[str, Any] = {
        "type": error_type,
        "message": message,
        "request_id": getattr(request.state, "request_id", None),
    }
    if details:
        error["details"] = details

    return JSONResponse(status_code=status_code, content={"error": error})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject action requests whose body does not match the schema."""
    errors = jsonable_encoder(exc.errors())
    logger.warning("request_validation_failed", path=request.url.path, error_count=len(errors))

    return error_response(
        request,
        error_type="invalid_action_request",
        message="Action request failed validation",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        details=errors,
    )


async def missing_credential_handler(request: Request, exc: MissingCredentialError) -> JSONResponse:
    """Report that the Comput3 API key is not configured."""
    logger.error("missing_credential", path=request.url.path, error=str(exc))

    return error_response(
        request,
        error_type="missing_credential",
        message=str(exc),
        status_code=status.HTTP_412_PRECONDITION_FAILED,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn any other exception into a 500 without leaking its message."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )

    return error_response(
        request,
        error_type="internal_error",
        message="The agent failed to process the request. Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        details={"exception": type(exc).__name__},
    )
