"""Synchronous HTTP file using requests."""

import io
import logging
from typing import Optional

import requests

from .. import config
from ..core.model import (
    ConnectedAt, Disconnected, HTTPFileError, NotFoundError, ReaderState, StatusError,
)
from ..core.util import (
    UNKNOWN_LENGTH, check_read_response, instance_length, range_header, resolve_seek,
)
from .base import Session, request_headers

logger = logging.getLogger(__name__)


def _discard(response) -> None:
    """Close a response body we no longer want; errors are ignored."""
    try:
        response.close()
    except OSError as e:
        logger.debug("ignoring error closing body: %s", e)


def _log_response(method: str, url: str, response) -> None:
    if config.VERBOSE_LOGS:
        headers = "".join(f"\n < {k}: {v}" for k, v in response.headers.items())
        logger.debug("%s %s <STATUS %s>%s", method, url, response.status_code, headers)
    else:
        logger.debug("%s %s <STATUS %s>", method, url, response.status_code)


class HTTPFile(io.RawIOBase):
    """Seekable, readable and patchable view of a URL.

    Reads are served from a single streamed GET that is kept open while
    reads stay sequential. A seek only moves the cursor; the next read
    notices the held body is elsewhere, drops it and issues a new
    ``Range: bytes=<cursor>-`` request. Writes are PATCH requests carrying
    ``Content-Range: bytes=<cursor>-`` and never touch the read side.

    Not safe for concurrent use.
    """

    def __init__(self, url: str, session: Optional[Session] = None):
        super().__init__()
        self.url = url
        self.length = UNKNOWN_LENGTH
        self._off = 0
        self._state: ReaderState = Disconnected()
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    @property
    def bound_position(self) -> Optional[int]:
        """Offset of the held response body, None when no body is held."""
        if isinstance(self._state, ConnectedAt):
            return self._state.offset
        return None

    def _check_open(self):
        if self.closed:
            raise ValueError("I/O operation on closed file")

    def _prepare_reader(self) -> ConnectedAt:
        """Make sure the held body yields the byte at the cursor next."""
        state = self._state
        if isinstance(state, ConnectedAt) and state.offset != self._off:
            logger.debug("discarding body at %d, cursor moved to %d", state.offset, self._off)
            self._state = Disconnected()
            _discard(state.body)
        elif isinstance(state, ConnectedAt):
            return state

        headers = request_headers()
        if self._off != 0:
            headers["Range"] = range_header(self._off)
        logger.debug("GET %s (%s)", self.url, headers.get("Range", "full"))
        response = self._session.get(
            self.url, headers=headers, stream=True, timeout=config.REQUEST_TIMEOUT
        )
        _log_response("GET", self.url, response)
        try:
            length = check_read_response(response.status_code, response.reason,
                                         response.headers, self._off)
        except HTTPFileError:
            _discard(response)
            raise
        if length is not None:
            self.length = length
        self._state = ConnectedAt(offset=self._off, body=response)
        return self._state

    def readinto(self, b) -> int:
        """Read into `b` from the cursor. May return fewer bytes than asked."""
        self._check_open()
        state = self._prepare_reader()
        n = state.body.raw.readinto(b)
        self._off += n
        state.offset += n
        return n

    def write(self, b) -> int:
        """PATCH `b` at the cursor. Raises StatusError unless the server answers 206."""
        self._check_open()
        data = bytes(b)
        headers = {
            "Content-Range": range_header(self._off),
            "Content-Length": str(len(data)),
        }
        logger.debug("PATCH %s (%s, %d bytes)", self.url, headers["Content-Range"], len(data))
        response = self._session.patch(
            self.url, data=data, headers=headers, timeout=config.REQUEST_TIMEOUT
        )
        _log_response("PATCH", self.url, response)
        response.close()
        if response.status_code != 206:
            raise StatusError(response.status_code, response.reason)
        self._off += len(data)
        return len(data)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the cursor. Performs no I/O and does not validate the result."""
        self._check_open()
        self._off = resolve_seek(self._off, self.length, offset, whence)
        return self._off

    def tell(self) -> int:
        self._check_open()
        return self._off

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def close(self) -> None:
        """Release the held body and mark the file closed. Safe to call twice."""
        if isinstance(self._state, ConnectedAt):
            _discard(self._state.body)
        self._state = Disconnected()
        self.url = ""
        if self._owns_session:
            self._session.close()
        super().close()


def open_http_file(url: str, session: Optional[Session] = None) -> HTTPFile:
    """Create a synchronous HTTP file. No request is made until the first read."""
    return HTTPFile(url, session=session)


def get_length(url: str, session: Optional[Session] = None) -> int:
    """Return the length of the resource at `url`, -1 if the server does not say.

    Issues a plain GET and closes the body without reading it.
    """
    owned = session is None
    if owned:
        session = requests.Session()
    try:
        logger.debug("GET %s (length)", url)
        with session.get(url, headers=request_headers(), stream=True,
                         timeout=config.REQUEST_TIMEOUT) as response:
            _log_response("GET", url, response)
        if response.status_code == 404:
            raise NotFoundError(response.reason)
        return instance_length(response.status_code, response.reason, response.headers)
    finally:
        if owned:
            session.close()
