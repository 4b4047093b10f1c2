"""Tagged result type returned by every call into the external API."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

GENERIC_ERROR_MESSAGE = "Unexpected error occurred"
NETWORK_ERROR_MESSAGE = "Network error occurred"


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    NO_SESSION = "no_session"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    SERVER = "server"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either ``ok`` with a value or a failure with a kind and a message."""

    ok: bool
    value: Optional[T] = None
    kind: Optional[ErrorKind] = None
    message: str = ""
    status_code: Optional[int] = None

    @classmethod
    def success(cls, value: T, status_code: Optional[int] = None) -> "Result[T]":
        return cls(ok=True, value=value, status_code=status_code)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str = GENERIC_ERROR_MESSAGE,
        status_code: Optional[int] = None,
    ) -> "Result[T]":
        return cls(ok=False, kind=kind, message=message or GENERIC_ERROR_MESSAGE, status_code=status_code)

    def value_or_none(self) -> Optional[T]:
        return self.value if self.ok else None

    @property
    def is_unauthorized(self) -> bool:
        return not self.ok and self.kind in (ErrorKind.UNAUTHORIZED, ErrorKind.NO_SESSION)


def kind_for_status(status_code: int) -> Optional[ErrorKind]:
    """Map an HTTP status to an error kind; ``None`` for 2xx/3xx."""
    if status_code < 400:
        return None
    if status_code == 401:
        return ErrorKind.UNAUTHORIZED
    if status_code == 403:
        return ErrorKind.FORBIDDEN
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code < 500:
        return ErrorKind.VALIDATION
    return ErrorKind.SERVER


def message_from_body(body: Any, default: str = GENERIC_ERROR_MESSAGE) -> str:
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message.strip():
            return message
    return default
