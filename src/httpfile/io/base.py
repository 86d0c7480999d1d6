"""Protocols for the injected transports and the stream shapes."""

from typing import Any, Protocol, runtime_checkable


class Session(Protocol):
    """The slice of ``requests.Session`` a blocking stream uses."""

    def get(self, url: str, **kwargs: Any) -> Any:
        ...

    def patch(self, url: str, data: Any = None, **kwargs: Any) -> Any:
        ...

    def close(self) -> None:
        ...


class AsyncClient(Protocol):
    """The slice of ``httpx.AsyncClient`` an asyncio stream uses."""

    def build_request(self, method: str, url: str, **kwargs: Any) -> Any:
        ...

    async def send(self, request: Any, *, stream: bool = False) -> Any:
        ...

    async def patch(self, url: str, **kwargs: Any) -> Any:
        ...

    def stream(self, method: str, url: str, **kwargs: Any) -> Any:
        ...

    async def aclose(self) -> None:
        ...


@runtime_checkable
class RemoteFile(Protocol):
    """Protocol for blocking remote streams."""

    url: str
    length: int  # -1 while unknown

    def readinto(self, b) -> int:
        ...

    def write(self, b) -> int:
        ...

    def seek(self, offset: int, whence: int = 0) -> int:
        ...

    def tell(self) -> int:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class AsyncRemoteFile(Protocol):
    """Protocol for asyncio remote streams."""

    url: str
    length: int  # -1 while unknown

    async def read(self, size: int = -1) -> bytes:
        ...

    async def write(self, b) -> int:
        ...

    def seek(self, offset: int, whence: int = 0) -> int:
        ...

    def tell(self) -> int:
        ...

    async def aclose(self) -> None:
        ...


def request_headers() -> dict:
    """Headers sent on every read request; the body must be the resource bytes."""
    return {"Accept-Encoding": "identity"}
