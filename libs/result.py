"""Result type returned by use cases

A use case either succeeds with a value (Return.ok) or fails with a
structured Error (Return.err). Callers branch on is_ok()/is_err().
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Error:
    """Machine-readable failure returned instead of raising"""

    code: str
    message: str
    reason: Optional[str] = None
    kind: Optional[str] = None


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[Error] = None

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None


class Return:
    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result:
        return Result(error=error)
