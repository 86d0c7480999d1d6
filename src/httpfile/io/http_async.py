"""Asynchronous HTTP file using httpx."""

import io
import logging
from typing import Optional

import httpx

from .. import config
from ..core.model import (
    ConnectedAt, Disconnected, HTTPFileError, NotFoundError, ReaderState, StatusError,
)
from ..core.util import (
    UNKNOWN_LENGTH, check_read_response, instance_length, range_header, resolve_seek,
)
from .base import AsyncClient, request_headers

logger = logging.getLogger(__name__)


def _new_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=config.REQUEST_TIMEOUT)


def _log_response(method: str, url: str, response: httpx.Response) -> None:
    if config.VERBOSE_LOGS:
        headers = "".join(f"\n < {k}: {v}" for k, v in response.headers.items())
        logger.debug("%s %s <STATUS %s>%s", method, url, response.status_code, headers)
    else:
        logger.debug("%s %s <STATUS %s>", method, url, response.status_code)


class _Body:
    """Streamed response body readable in caller-sized pieces.

    Bytes left over from a received chunk are kept in `_pending`; they are
    still the next bytes of the body. A response whose content was already
    loaded (e.g. by a mock transport or an event hook) is served from memory.
    """

    def __init__(self, response: httpx.Response):
        self.response = response
        if response.is_stream_consumed:
            self._chunks = None
            self._pending = response.content
            self._exhausted = True
        else:
            self._chunks = response.aiter_raw()
            self._pending = b""
            self._exhausted = False

    async def _fill(self) -> None:
        while not self._pending and not self._exhausted:
            chunk = await anext(self._chunks, None)
            if chunk is None:
                self._exhausted = True
            else:
                self._pending = chunk

    async def read(self, size: int = -1) -> bytes:
        if size < 0:
            parts = [self._pending]
            self._pending = b""
            if not self._exhausted:
                async for chunk in self._chunks:
                    parts.append(chunk)
                self._exhausted = True
            return b"".join(parts)
        await self._fill()
        data, self._pending = self._pending[:size], self._pending[size:]
        return data

    async def _close_chunks(self) -> None:
        if self._chunks is not None:
            await self._chunks.aclose()

    async def aclose(self) -> None:
        try:
            await self._close_chunks()
        except (httpx.HTTPError, OSError) as e:
            logger.debug("ignoring error closing body: %s", e)
        finally:
            try:
                await self.response.aclose()
            except (httpx.HTTPError, OSError) as e:
                logger.debug("ignoring error closing response: %s", e)


class AsyncHTTPFile:
    """Asyncio counterpart of ``HTTPFile``.

    Same cursor and reader-state rules: a seek only moves the cursor, the
    next read reopens the body at the cursor when the held one is elsewhere.
    """

    def __init__(self, url: str, client: Optional[AsyncClient] = None):
        self.url = url
        self.length = UNKNOWN_LENGTH
        self.closed = False
        self._off = 0
        self._state: ReaderState = Disconnected()
        self._owns_client = client is None
        self._client = client if client is not None else _new_client()

    @property
    def bound_position(self) -> Optional[int]:
        """Offset of the held response body, None when no body is held."""
        if isinstance(self._state, ConnectedAt):
            return self._state.offset
        return None

    def _check_open(self):
        if self.closed:
            raise ValueError("I/O operation on closed file")

    async def _prepare_reader(self) -> ConnectedAt:
        state = self._state
        if isinstance(state, ConnectedAt) and state.offset != self._off:
            logger.debug("discarding body at %d, cursor moved to %d", state.offset, self._off)
            self._state = Disconnected()
            await state.body.aclose()
        elif isinstance(state, ConnectedAt):
            return state

        headers = request_headers()
        if self._off != 0:
            headers["Range"] = range_header(self._off)
        logger.debug("GET %s (%s)", self.url, headers.get("Range", "full"))
        request = self._client.build_request("GET", self.url, headers=headers)
        response = await self._client.send(request, stream=True)
        _log_response("GET", self.url, response)
        body = _Body(response)
        try:
            length = check_read_response(response.status_code, response.reason_phrase,
                                         response.headers, self._off)
        except HTTPFileError:
            await body.aclose()
            raise
        if length is not None:
            self.length = length
        self._state = ConnectedAt(offset=self._off, body=body)
        return self._state

    async def read(self, size: int = -1) -> bytes:
        """Read up to `size` bytes from the cursor, everything left when negative."""
        self._check_open()
        state = await self._prepare_reader()
        data = await state.body.read(size)
        self._off += len(data)
        state.offset += len(data)
        return data

    async def write(self, b) -> int:
        """PATCH `b` at the cursor. Raises StatusError unless the server answers 206."""
        self._check_open()
        data = bytes(b)
        headers = {
            "Content-Range": range_header(self._off),
            "Content-Length": str(len(data)),
        }
        logger.debug("PATCH %s (%s, %d bytes)", self.url, headers["Content-Range"], len(data))
        response = await self._client.patch(self.url, content=data, headers=headers)
        _log_response("PATCH", self.url, response)
        if response.status_code != 206:
            raise StatusError(response.status_code, response.reason_phrase)
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

    async def aclose(self) -> None:
        """Release the held body and mark the file closed. Safe to call twice."""
        if isinstance(self._state, ConnectedAt):
            await self._state.body.aclose()
        self._state = Disconnected()
        self.url = ""
        if self._owns_client and not self.closed:
            await self._client.aclose()
        self.closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


async def open_http_file_async(url: str, client: Optional[AsyncClient] = None) -> AsyncHTTPFile:
    """Create an asynchronous HTTP file. No request is made until the first read."""
    return AsyncHTTPFile(url, client=client)


async def get_length_async(url: str, client: Optional[AsyncClient] = None) -> int:
    """Return the length of the resource at `url`, -1 if the server does not say."""
    owned = client is None
    if owned:
        client = _new_client()
    try:
        logger.debug("GET %s (length)", url)
        async with client.stream("GET", url, headers=request_headers()) as response:
            _log_response("GET", url, response)
        if response.status_code == 404:
            raise NotFoundError(response.reason_phrase)
        return instance_length(response.status_code, response.reason_phrase, response.headers)
    finally:
        if owned:
            await client.aclose()
