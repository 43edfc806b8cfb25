import time
from typing import Any, Callable, Dict

import structlog
from django.conf import settings
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.core.cache import DjangoCacheAdapter

logger = structlog.get_logger(__name__)

_HEALTH_KEY = "_health_check"


def _run_check(check: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    check()
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def _check_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _check_cache() -> None:
    cache = DjangoCacheAdapter(settings.PRODUCT_CACHE_ALIAS)
    cache.set(_HEALTH_KEY, "ok", 10_000)
    if cache.get(_HEALTH_KEY) != "ok":
        raise ConnectionError("Cache read failed")


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health: database and cache reachability."""
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    for name, check in (("database", _check_database), ("cache", _check_cache)):
        try:
            services[name] = _run_check(check)
        except Exception:
            services[name] = {"status": "down"}
            overall_healthy = False
            logger.error("health_check_failure", service=name, exc_info=True)

    status_label = "healthy" if overall_healthy else "unhealthy"
    logger.info("health_check_completed", status=status_label)

    return JsonResponse(
        {
            "status": status_label,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if overall_healthy else 503,
    )
