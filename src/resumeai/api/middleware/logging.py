"""
Request Logging Middleware.

Every request gets a request id (the caller's X-Request-ID, or a generated
one) that is set as the logging correlation id and echoed on the response.
"""

import time
import uuid
from typing import Any

from fastapi import Request

from resumeai.utils.logger import clear_correlation_ids, get_logger, set_correlation_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def get_client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if forwarded:
        return forwarded
    return request.client.host if request.client else "unknown"


async def log_requests_middleware(request: Request, call_next: Any) -> Any:
    """Tag the request with a correlation id and log its outcome."""
    clear_correlation_ids()
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:16]
    set_correlation_id(request_id=request_id)

    fields = {
        "http_method": request.method,
        "http_path": request.url.path,
        "client_ip": get_client_ip(request),
    }
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(" Unhandled error", extra={"extra_fields": fields})
        raise

    fields["http_status_code"] = response.status_code
    fields["duration_ms"] = round((time.perf_counter() - start) * 1000, 2)
    log = logger.warning if response.status_code >= 400 else logger.info
    log(f" {request.method} {request.url.path} -> {response.status_code}", extra={"extra_fields": fields})

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
