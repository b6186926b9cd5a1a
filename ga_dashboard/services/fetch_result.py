"""
Explicit outcome of one backend fetch.

Fetchers never raise: they return a FetchResult and the caller turns a
failure into the field's default with ``value_or`` in one visible place.
An empty report counts as a failure, same as an exception.
"""
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from ga_dashboard.utils.logger import log

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "FetchResult[T]":
        return cls(error=error)

    def value_or(self, default: T) -> T:
        return self.value if self.ok else default


NO_ROWS = "no rows"


def attempt(query: str, property_id: str, fetch: Callable[[], FetchResult[T]]) -> FetchResult[T]:
    """Run one fetch, converting any backend exception into a failure result"""
    try:
        return fetch()
    except Exception as e:
        log.warning(f"GA4 {query} query failed for property {property_id}: {str(e)}")
        return FetchResult.failure(f"{type(e).__name__}: {str(e)}")
