"""
Outcome of a backend call.

A call either reaches the server and gets an answer (``Success`` or
``ServerError``) or it does not (``NetworkError``, ``UnknownError``).
Expected failures are never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from ..models import CommonErrorResponse

T = TypeVar("T")
R = TypeVar("R")


class NetworkResponse(Generic[T]):
    """Base class for every call outcome."""

    is_success = False

    @property
    def success(self) -> Optional[T]:
        """Success envelope, or None."""
        return None

    @property
    def error(self) -> Optional[CommonErrorResponse]:
        """Error envelope returned by the server, or None."""
        return None

    @property
    def cause(self) -> Optional[BaseException]:
        """Transport-level failure, or None."""
        return None

    def map(self, fn: Callable[[T], R]) -> "NetworkResponse[R]":
        return self  # type: ignore[return-value]


@dataclass(frozen=True)
class Success(NetworkResponse[T]):
    body: T
    status_code: int = 200

    is_success = True

    @property
    def success(self) -> T:
        return self.body

    def map(self, fn: Callable[[T], R]) -> "Success[R]":
        return Success(body=fn(self.body), status_code=self.status_code)


@dataclass(frozen=True)
class ServerError(NetworkResponse[Any]):
    """The server answered with the common error envelope."""
    body: CommonErrorResponse
    status_code: int

    @property
    def error(self) -> CommonErrorResponse:
        return self.body

    @property
    def message(self) -> str:
        return self.body.message or f"Request failed ({self.status_code})"


class UnexpectedError(NetworkResponse[Any]):
    """The call could not complete: the server was not reached or not understood."""

    message = "Something went wrong"


@dataclass(frozen=True)
class NetworkError(UnexpectedError):
    """Timeout or connectivity failure."""
    error_cause: BaseException

    message = "Could not reach ITTPizen, check your connection"

    @property
    def cause(self) -> BaseException:
        return self.error_cause


@dataclass(frozen=True)
class UnknownError(UnexpectedError):
    """Malformed or unexpected payload."""
    error_cause: BaseException
    status_code: Optional[int] = None

    message = "Received an unexpected response from ITTPizen"

    @property
    def cause(self) -> BaseException:
        return self.error_cause


def error_message(response: NetworkResponse) -> Optional[str]:
    """User-facing message for a failed call, None for a success."""
    if response.is_success:
        return None
    return getattr(response, "message", UnexpectedError.message)


__all__ = [
    "NetworkResponse",
    "Success",
    "ServerError",
    "UnexpectedError",
    "NetworkError",
    "UnknownError",
    "error_message",
]
