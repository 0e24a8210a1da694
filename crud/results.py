"""
Explicit result variants for row-store point queries.

A query either finds its row, finds nothing, or fails. "No rows" is its own
variant so callers branch on type instead of matching error strings.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from sqlalchemy.exc import SQLAlchemyError

T = TypeVar("T")

# PostgREST's code for "results contain 0 rows"; kept so logs read the same across stores
NO_ROWS_CODE = "PGRST116"


@dataclass(frozen=True)
class Found(Generic[T]):
    row: T


@dataclass(frozen=True)
class NoRows:
    code: str = NO_ROWS_CODE


@dataclass(frozen=True)
class StoreFailure:
    code: str
    message: str

    @classmethod
    def from_exception(cls, exc: SQLAlchemyError) -> "StoreFailure":
        return cls(code=getattr(exc, "code", None) or type(exc).__name__, message=str(exc))


QueryResult = Union[Found[T], NoRows, StoreFailure]
