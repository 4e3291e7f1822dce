"""
Result types shared by the action layer.

Domain errors (a user already exists, a user was not found) are returned as
values so callers can show them to the user. Failures of the backend service
are raised as ``InfrastructureError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


class DomainErrorKind(str, Enum):
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    USER_NOT_FOUND = "USER_NOT_FOUND"


DOMAIN_ERROR_MESSAGES = {
    DomainErrorKind.USER_ALREADY_EXISTS: "User already exists. Please sign in.",
    DomainErrorKind.USER_NOT_FOUND: "User not found. Please sign up first.",
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class DomainError:
    kind: DomainErrorKind
    message: str

    @classmethod
    def of(cls, kind: DomainErrorKind) -> "DomainError":
        return cls(kind=kind, message=DOMAIN_ERROR_MESSAGES[kind])


Result = Union[Ok[T], DomainError]


class InfrastructureError(Exception):
    """Raised when the backend service rejects or fails a request."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        error_type: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.error_type = error_type

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"[{self.code}] {self.message}"


class NotAuthenticated(Exception):
    """Raised by actions that need a signed-in user when there is none."""
