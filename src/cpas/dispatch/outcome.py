from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from cpas.errors import CpasError

T = TypeVar("T")


@dataclass(frozen=True)
class CallOutcome(Generic[T]):
    """Terminal result of one dispatched call: a value or an error, never both."""

    value: Optional[T] = None
    error: Optional[CpasError] = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("CallOutcome requires exactly one of `value` or `error`.")

    @classmethod
    def success(cls, value: T) -> "CallOutcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CpasError) -> "CallOutcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
