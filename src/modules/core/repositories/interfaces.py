"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that domain
repositories extend.  Service-layer code depends on this abstraction,
never on the Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` is the entity managed by the repository.  Entities
    are identified by an integer primary key assigned by the store.
    """

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> T:
        """Build an unsaved entity from ``fields`` (no I/O)."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (insert or update) an entity.  Assigns ``id`` on insert."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[T]:
        """Retrieve an entity by primary key, or ``None``."""

    @abstractmethod
    def list_with_count(self) -> Tuple[List[T], int]:
        """Return every entity together with the total row count."""

    @abstractmethod
    def remove(self, entity: T) -> None:
        """Physically delete an entity."""
