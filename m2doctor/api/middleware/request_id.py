"""Request ID middleware — tag every request's log lines with an id."""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger("m2doctor.api")

_HEADER = "X-Request-ID"


def _incoming_id(request: Request) -> str:
    raw = request.headers.get(_HEADER.lower(), "")
    try:
        return str(uuid.UUID(raw))
    except ValueError:
        return uuid.uuid4().hex


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind request_id/method/path into structlog contextvars for one request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _incoming_id(request)
        tokens = structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception("api.request_failed")
            raise
        else:
            log.info(
                "api.request",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
            )
            response.headers[_HEADER] = request_id
            return response
        finally:
            structlog.contextvars.reset_contextvars(**tokens)
