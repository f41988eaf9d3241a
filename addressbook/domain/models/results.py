from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION_FAILED = "validation_failed"
    NOT_FOUND = "not_found"
    DUPLICATE_USER = "duplicate_user"
    UNAUTHORIZED = "unauthorized"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    INTERNAL_ERROR = "internal_error"


@dataclass(slots=True)
class OperationResult(Generic[T]):
    """Outcome of a repository or service call with an expected failure mode."""

    success: bool
    message: str
    data: Optional[T] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, message: str, data: Optional[T] = None) -> "OperationResult[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "OperationResult[T]":
        return cls(success=False, message=message, error=error)
