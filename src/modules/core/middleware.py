"""Request correlation for structured logs.

Every request gets a correlation id: the caller's ``X-Request-ID`` when it
is a well-formed token, otherwise a fresh UUID4.  The id, the HTTP method
and the path are bound into structlog's contextvars for the lifetime of
the request, so every log line emitted by services and repositories
carries them.  The id is echoed back in the ``X-Request-ID`` header.
"""

import re
import time
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Echoed into a response header, so only a bounded token charset is accepted.
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")


def resolve_request_id(raw: Optional[str]) -> str:
    """Return ``raw`` if it is an acceptable request id, else a new UUID4."""
    if raw and _REQUEST_ID_PATTERN.match(raw):
        return raw
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid,
            method=request.method,
            path=request.path,
        )

        started = time.monotonic()
        logger.info("request_started")
        try:
            response = self.get_response(request)
            logger.info(
                "request_finished",
                status_code=response.status_code,
                duration_ms=round((time.monotonic() - started) * 1000, 2),
            )
        finally:
            structlog.contextvars.clear_contextvars()
            correlation_id_var.reset(token)

        response[REQUEST_ID_HEADER] = cid
        return response
