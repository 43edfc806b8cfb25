"""Cache port and its Django cache-framework adapter.

The service layer depends on ``ICache`` only.  ``DjangoCacheAdapter``
satisfies it on top of ``django.core.cache`` so the backend (Redis via
django-redis in production, LocMemCache in tests) is chosen in settings.

TTLs cross this boundary in milliseconds; Django's cache API takes seconds.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import structlog
from django.core.cache import caches

logger = structlog.get_logger(__name__)


class ICache(ABC):
    """Key/value cache contract with per-entry TTL."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or ``None`` on miss/expiry."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl_ms: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_ms`` milliseconds."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``.  Deleting a missing key is not an error."""


class DjangoCacheAdapter(ICache):
    """``ICache`` backed by a configured Django cache alias."""

    def __init__(self, alias: str = "default") -> None:
        self._alias = alias

    @property
    def _backend(self):
        # ``caches`` is connection-per-thread; resolve on every call.
        return caches[self._alias]

    def get(self, key: str) -> Optional[Any]:
        return self._backend.get(key)

    def set(self, key: str, value: Any, ttl_ms: int) -> None:
        if ttl_ms <= 0:
            raise ValueError("Cache TTL must be a positive number of milliseconds.")
        self._backend.set(key, value, timeout=ttl_ms / 1000)
        logger.debug("cache.set", alias=self._alias, key=key, ttl_ms=ttl_ms)

    def delete(self, key: str) -> None:
        self._backend.delete(key)
        logger.debug("cache.deleted", alias=self._alias, key=key)
