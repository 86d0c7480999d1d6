"""CLI implementation for httpfile."""

from pathlib import Path
from typing import Optional

import requests
import typer

from . import get_length, open_http_file
from .core.model import HTTPFileError

app = typer.Typer(add_completion=False, help="Read, patch and measure remote files over HTTP ranges.")

CHUNK_SIZE = 64 * 1024


def _fail(err: Exception) -> None:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=1)


@app.command()
def length(url: str = typer.Argument(..., help="URL of the resource")):
    """Print the total length of URL."""
    try:
        n = get_length(url)
    except (HTTPFileError, requests.RequestException) as e:
        _fail(e)
    typer.echo("unknown" if n < 0 else str(n))


@app.command()
def cat(
    url: str = typer.Argument(..., help="URL of the resource"),
    offset: int = typer.Option(0, "--offset", min=0, help="Start reading at this byte"),
    count: Optional[int] = typer.Option(None, "--count", min=0, help="Read at most N bytes"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
):
    """Copy bytes of URL, starting at --offset, to stdout."""
    sink = open(output, "wb") if output else typer.get_binary_stream("stdout")
    try:
        with open_http_file(url) as f:
            f.seek(offset)
            remaining = count
            while remaining is None or remaining > 0:
                size = CHUNK_SIZE if remaining is None else min(CHUNK_SIZE, remaining)
                data = f.read(size)
                if not data:
                    break
                sink.write(data)
                if remaining is not None:
                    remaining -= len(data)
        sink.flush()
    except (HTTPFileError, requests.RequestException) as e:
        _fail(e)
    finally:
        if output:
            sink.close()


@app.command()
def patch(
    url: str = typer.Argument(..., help="URL of the resource"),
    source: str = typer.Argument("-", help="File holding the bytes to send, or '-' for stdin"),
    offset: int = typer.Option(0, "--offset", help="Byte offset the data is written at"),
):
    """PATCH the bytes of SOURCE into URL at --offset."""
    if source == "-":
        data = typer.get_binary_stream("stdin").read()
    else:
        data = Path(source).read_bytes()
    try:
        with open_http_file(url) as f:
            f.seek(offset)
            n = f.write(data)
    except (HTTPFileError, requests.RequestException) as e:
        _fail(e)
    typer.echo(str(n))


if __name__ == "__main__":
    app()
