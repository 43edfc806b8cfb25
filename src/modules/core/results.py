"""Explicit success/failure result for service operations.

Services return ``Success(value)`` or ``Failure(error)`` instead of
raising, so every call site has to look at the outcome.  ``unwrap()``
is available for callers that do want an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from modules.core.exceptions import DomainError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: DomainError

    @property
    def is_success(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise self.error


ServiceResult = Union[Success[T], Failure]
