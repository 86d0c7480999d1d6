"""httpfile - a remote HTTP resource as a seekable, readable and patchable file."""

from .core.model import (                                             # re-export
    HTTPFileError, BadResponseError, StatusError, NotFoundError,
    LengthUnknownError, InvalidArgumentError,
)
from .io import (
    HTTPFile, AsyncHTTPFile,
    open_http_file, open_http_file_async,
    get_length, get_length_async,
)

open = open_http_file


__all__ = [
    "open", "open_http_file", "open_http_file_async",
    "get_length", "get_length_async",
    "HTTPFile", "AsyncHTTPFile",
    "HTTPFileError", "BadResponseError", "StatusError", "NotFoundError",
    "LengthUnknownError", "InvalidArgumentError",
]
