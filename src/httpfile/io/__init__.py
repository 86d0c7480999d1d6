"""I/O layer for httpfile - remote resources as seekable byte streams."""

# Re-export these for import convenience
from .base import RemoteFile, AsyncRemoteFile
from .http_sync import HTTPFile, get_length, open_http_file
from .http_async import AsyncHTTPFile, get_length_async, open_http_file_async
