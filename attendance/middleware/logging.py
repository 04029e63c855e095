"""Logging middleware for request tracking."""
import re
import time
import uuid
from typing import Callable, Dict

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from attendance.core.rate_limit import get_client_ip

logger = structlog.get_logger(__name__)

_PATH_IDS = (
    ("session_id", re.compile(r"/(?:attend|sessions|sse/sessions)/([0-9a-fA-F-]{36})(?:/|$)")),
    ("claim_id", re.compile(r"/claims/([0-9a-fA-F-]{36})(?:/|$)")),
)


def path_ids(path: str) -> Dict[str, str]:
    """Session and claim ids named in the URL, for correlating log lines."""
    ids = {}
    for name, pattern in _PATH_IDS:
        match = pattern.search(path)
        if match:
            ids[name] = match.group(1).lower()
    return ids


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Bind a request id and the session/claim ids from the path to every log
    line of a request.

    Request bodies are never read here: they carry one-time codes and
    student identity fields, which must not reach the logs.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=get_client_ip(request) if request.client else None,
            **path_ids(request.url.path),
        )

        start_time = time.perf_counter()
        logger.info("request_started")

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                exception_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        response.headers["X-Request-ID"] = request_id

        if response.status_code == 429:
            # Rate limit or attempt lockout
            logger.warning("request_throttled", duration_ms=duration_ms)
        else:
            logger.info("request_completed", status_code=response.status_code, duration_ms=duration_ms)
        return response
