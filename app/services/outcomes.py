"""Result values returned by the lookup and distance services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(StrEnum):
    INVALID_INPUT = "invalid_input"
    AIRPORT_NOT_FOUND = "airport_not_found"
    UPSTREAM_ERROR = "upstream_error"
    MALFORMED_RESPONSE = "malformed_response"
    CANCELLED = "cancelled"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True, slots=True)
class Failure:
    kind: FailureKind
    message: str
    detail: str | None = None
    code: str | None = None
    status_code: int | None = None

    @property
    def retryable(self) -> bool:
        return self.kind is FailureKind.UPSTREAM_ERROR


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Either a value or a classified failure, never both."""

    value: T | None = None
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def error(
        cls,
        kind: FailureKind,
        message: str,
        *,
        detail: str | None = None,
        code: str | None = None,
        status_code: int | None = None,
    ) -> Result[T]:
        return cls(
            failure=Failure(kind=kind, message=message, detail=detail, code=code, status_code=status_code)
        )

    @classmethod
    def from_failure(cls, failure: Failure) -> Result[T]:
        return cls(failure=failure)

    def unwrap(self) -> T:
        if self.failure is not None or self.value is None:
            raise ValueError(f"Result holds a failure: {self.failure}")
        return self.value


__all__ = ["Failure", "FailureKind", "Result"]
