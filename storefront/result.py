"""
Outcome of a service call: ``Ok(value)`` or ``Err(kind, detail)``.

Services never build HTTP responses. Route handlers inspect the result and
turn an ``Err`` into a user-facing response with ``error_response``.
"""

import enum
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from fastapi.responses import PlainTextResponse, RedirectResponse

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    STORE = "store"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[Any], Err]


def error_response(err: Err, message: str, not_found_url: Optional[str] = None):
    """
    Map a failed result to what the user sees.

    Missing records become a redirect; every other failure is the same
    plain-text message with no detail about the cause.
    """
    if err.kind is ErrorKind.NOT_FOUND:
        return RedirectResponse(not_found_url or "/", status_code=302)
    return PlainTextResponse(message, status_code=500)
