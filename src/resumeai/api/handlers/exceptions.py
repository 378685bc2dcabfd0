"""
Exception Handlers for the ResumeAI API.

Maps request validation failures to 422 and ConfigurationError (unknown
workflow type, invalid ad-hoc workflow) to 400. Agent and workflow failures
are never raised here; they are reported on the returned results.
"""

from typing import Any, Dict, List

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from resumeai.utils.exceptions import ConfigurationError
from resumeai.utils.logger import get_logger

logger = get_logger(__name__)


def _describe_validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    # loc is e.g. ("body", "profileData", "profile", "id")
    return [
        {
            "field": " -> ".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def _error_response(status_code: int, detail: Any, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, "message": message})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject a malformed request body (missing profile data, wrong types...).

    Returns:
        JSONResponse 422:
            {
                "detail": [{"field": "body -> profileData", "message": "...", "type": "..."}],
                "message": "Invalid request: ..."
            }
    """
    details = _describe_validation_errors(exc)
    logger.warning(
        f" Rejected request to {request.url.path}",
        extra={"extra_fields": {"http_path": request.url.path, "validation_errors": details}},
    )
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        details,
        f"Invalid request: {len(details)} field(s) failed validation",
    )


async def configuration_exception_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    """Reject a request naming a workflow or definition the server does not know."""
    logger.warning(
        f" Configuration error on {request.url.path}: {exc}",
        extra={"extra_fields": {"http_path": request.url.path, "error_type": type(exc).__name__}},
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), "Configuration error")
