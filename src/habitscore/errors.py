"""Structured error codes and exception classes for habitscore."""

from __future__ import annotations

__all__ = [
    "ErrorCode",
    "HabitScoreError",
    "InvalidFrequency",
    "InconsistentEntry",
    "NonFiniteResult",
    "ErrorResponse",
]

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    INVALID_FREQUENCY = "INVALID_FREQUENCY"
    INCONSISTENT_ENTRY = "INCONSISTENT_ENTRY"
    NON_FINITE_RESULT = "NON_FINITE_RESULT"
    INVALID_DOCUMENT = "INVALID_DOCUMENT"


class HabitScoreError(Exception):
    """Structured error carrying a code and optional details."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict = details or {}


class InvalidFrequency(HabitScoreError):
    """Numerator or denominator is not a positive integer."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(ErrorCode.INVALID_FREQUENCY, message, details)


class InconsistentEntry(HabitScoreError):
    """Entry value does not match the habit kind (numerical vs. yes/no)."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(ErrorCode.INCONSISTENT_ENTRY, message, details)


class NonFiniteResult(HabitScoreError):
    """A score came out NaN or infinite. Always a programming error."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(ErrorCode.NON_FINITE_RESULT, message, details)


class ErrorResponse(BaseModel):
    """Serialisable envelope for errors reported on the command line."""

    error: dict  # {code: str, message: str, details: dict}

    @classmethod
    def from_error(cls, exc: HabitScoreError) -> "ErrorResponse":
        return cls(error={"code": exc.code.value, "message": exc.message, "details": exc.details})
