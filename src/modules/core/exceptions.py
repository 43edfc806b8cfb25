"""Shared error primitives and the DRF exception handler.

``DomainError`` is the base of every business failure kind.  Each kind
carries a stable machine-readable ``code``, the HTTP ``status_code`` the
transport should use and a short human-readable ``message``.  Internal
error text is never part of the message.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for classified business failures."""

    code: str = "domain_error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be processed."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message, "code": self.code}


def error_response(error: DomainError) -> Response:
    """Render a ``DomainError`` as an HTTP response."""
    return Response(error.to_payload(), status=error.status_code)


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` producing the standard error body.

    - ``DomainError`` that escaped a view → ``{"success", "message", "code"}``.
    - DRF ``APIException`` (parse errors, 404, 405...) →
      ``{"type", "errors": [{"code", "detail", "attr"}]}``.
    - Anything else is left to Django (500, no internal detail).
    """
    if isinstance(exc, DomainError):
        logger.warning("api.domain_error", code=exc.code, status_code=exc.status_code)
        return error_response(exc)

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    error_type = "server_error" if response.status_code >= 500 else "client_error"
    response.data = {
        "type": error_type,
        "errors": _flatten_errors(response.data, getattr(exc, "default_code", "error")),
    }
    return response


def _flatten_errors(data: Any, default_code: str, attr: Optional[str] = None) -> list:
    if isinstance(data, dict):
        if "detail" in data and len(data) == 1:
            return _flatten_errors(data["detail"], default_code, attr)
        errors = []
        for key, value in data.items():
            nested = key if attr is None else f"{attr}.{key}"
            errors.extend(_flatten_errors(value, default_code, nested))
        return errors
    if isinstance(data, list):
        errors = []
        for item in data:
            errors.extend(_flatten_errors(item, default_code, attr))
        return errors
    return [
        {
            "code": getattr(data, "code", None) or default_code,
            "detail": str(data),
            "attr": attr,
        }
    ]
