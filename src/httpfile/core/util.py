from __future__ import annotations
import io
from typing import Mapping

from werkzeug.http import parse_content_range_header

from .model import (
    BadResponseError, ContentRange, InvalidArgumentError, LengthUnknownError, StatusError,
)

UNKNOWN_LENGTH = -1


def range_header(offset: int) -> str:
    """Open-ended byte range starting at `offset` (``bytes=<offset>-``)."""
    return f"bytes={offset}-"


def parse_content_range(value: str | None) -> ContentRange | None:
    """Parse ``bytes <first>-<last>/<total>``; None when absent or malformed."""
    parsed = parse_content_range_header(value)
    if parsed is None or parsed.units != "bytes" or parsed.start is None:
        return None
    length = parsed.length if parsed.length is not None else UNKNOWN_LENGTH
    return ContentRange(first=parsed.start, last=parsed.stop - 1, length=length)


def _content_length(headers: Mapping[str, str]) -> int | None:
    value = headers.get("Content-Length")
    if not value:
        return None
    try:
        length = int(value)
    except ValueError as e:
        raise BadResponseError(f"invalid Content-Length: {value!r}") from e
    if length < 0:
        raise BadResponseError(f"invalid Content-Length: {value!r}")
    return length


def check_read_response(status_code: int, reason: str | None,
                        headers: Mapping[str, str], offset: int) -> int | None:
    """Validate a GET response opened at `offset`.

    Returns the total length the response declares, or None when it declares
    none (a 200 without Content-Length). Raises BadResponseError when the
    response does not start at `offset`, StatusError for any status other
    than 200/206.
    """
    if status_code == 206:
        cr = parse_content_range(headers.get("Content-Range"))
        if cr is None:
            raise BadResponseError(f"unparseable Content-Range: {headers.get('Content-Range')!r}")
        if cr.first != offset:
            raise BadResponseError(f"range starts at {cr.first}, requested {offset}")
        return cr.length
    if status_code == 200:
        # a full response always starts at byte 0
        if offset != 0:
            raise BadResponseError(f"got 200 for a request at offset {offset}")
        return _content_length(headers)
    raise StatusError(status_code, reason)


def instance_length(status_code: int, reason: str | None, headers: Mapping[str, str]) -> int:
    """Total resource length declared by a response, UNKNOWN_LENGTH if none."""
    if status_code == 200:
        length = _content_length(headers)
        return UNKNOWN_LENGTH if length is None else length
    if status_code == 206:
        cr = parse_content_range(headers.get("Content-Range"))
        if cr is None:
            raise BadResponseError("bad 206 response")
        return cr.length
    raise StatusError(status_code, reason)


def resolve_seek(cursor: int, length: int, offset: int, whence: int) -> int:
    """Compute the new cursor. Out-of-range results are not rejected here."""
    if whence == io.SEEK_SET:
        return offset
    if whence == io.SEEK_CUR:
        return cursor + offset
    if whence == io.SEEK_END:
        if length < 0:
            raise LengthUnknownError("length unknown")
        return length + offset
    raise InvalidArgumentError(f"unhandled whence: {whence}")
