from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Union


class HTTPFileError(OSError):
    """Base class for errors raised by httpfile."""
    pass


class BadResponseError(HTTPFileError):
    """Raised when a response does not describe the bytes that were requested."""
    pass


class StatusError(HTTPFileError):
    """Raised when a response carries a status the operation does not accept."""

    def __init__(self, status_code: int, reason: str | None = None):
        self.status_code = status_code
        self.reason = reason or ""
        super().__init__(f"{status_code} {self.reason}".rstrip())


class NotFoundError(StatusError):
    """Raised by length discovery when the server answers 404."""

    def __init__(self, reason: str | None = "Not Found"):
        super().__init__(404, reason)


class LengthUnknownError(HTTPFileError):
    """Raised when seeking from the end before any response revealed a length."""
    pass


class InvalidArgumentError(HTTPFileError, ValueError):
    """Raised for an unrecognised seek whence."""
    pass


@dataclass(slots=True)
class ContentRange:
    first: int
    last: int | None
    length: int                # -1 when the server sent "*"


@dataclass(slots=True)
class Disconnected:
    """No response body is held."""


@dataclass(slots=True)
class ConnectedAt:
    """A response body is held and its next byte is at absolute `offset`."""
    offset: int
    body: Any


ReaderState = Union[Disconnected, ConnectedAt]
