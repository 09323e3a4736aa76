r""":mod:`tar_streams.sources` provides the byte sources a
:class:`~tar_streams.input_stream.TarInputStream` can be opened on, beyond plain
binary file objects.

:class:`~tar_streams.sources.HttpByteSource` streams an archive over HTTP with a
single GET request, handing out the response body in order as it is read:

    >>> from tar_streams import TarInputStream
    >>> from tar_streams.sources import HttpByteSource
    >>> src = HttpByteSource("https://example.com/data.tar") # doctest: +SKIP
    >>> with TarInputStream(src) as tar: # doctest: +SKIP
    ...     names = [entry.name for entry in tar]

Tar archives can only be read linearly (one header must be parsed to find the
next), so unlike a range request stream nothing is gained by requesting parts
of the file: the body is consumed from the start.
"""
from __future__ import annotations

from io import SEEK_CUR
from typing import TYPE_CHECKING, Iterator

MYPY = False  # when using mypy will be overrided as True
if MYPY or not TYPE_CHECKING:  # pragma: no cover
    import httpx  # avoid importing to Sphinx type checker

from .constants import SKIP_BUFFER_SIZE
from .log_utils import log
from .types import SkippableByteSource

__all__ = ["HttpByteSource", "skip_source"]


class HttpByteSource:
    """
    A readable byte source over the body of a streamed HTTP GET response.

    Don't forget to close it! :meth:`close` (or closing the
    :class:`~tar_streams.input_stream.TarInputStream` wrapping it) closes the
    response, and the client too if one was created here.
    """

    def __init__(self, url: str, client=None, chunk_size: int | None = None):
        """
        Send a streaming GET request for ``url``, raising for an error status.

        Args:
          url        : (:class:`str`) The URL of the archive
          client     : (:class:`httpx.Client` | ``None``) The HTTPX client to use
                       for the request. If ``None``, a fresh one is created (and
                       closed along with this source)
          chunk_size : (:class:`int` | ``None``) The chunk size used for the
                       ``httpx.Response.iter_bytes`` response byte iterator
        """
        self.url = url
        self.chunk_size = chunk_size
        self.set_client(client=client)
        self._buffer = bytearray()
        self.setup_stream()

    def __repr__(self):
        return f"{self.__class__.__name__} @ '{self.url}'"

    def set_client(self, client) -> None:
        """
        Check the client type explicitly (only a synchronous :class:`httpx.Client`
        is supported) or create one if ``client`` is ``None``.
        """
        self._owns_client = client is None
        if client is None:
            client = httpx.Client()
        elif not isinstance(client, httpx.Client):
            raise TypeError(f"{client=} is not a synchronous HTTPX client")
        self.client = client

    def setup_stream(self) -> None:
        """
        ``client.stream("GET", url)`` but leave the stream to be manually closed
        rather than using a context manager
        """
        self.request = self.client.build_request(method="GET", url=self.url)
        self.response = self.client.send(request=self.request, stream=True)
        try:
            self.response.raise_for_status()
        except httpx.HTTPStatusError:
            self.close()
            raise
        log.debug(f"Streaming {self.url} (HTTP {self.response.status_code})")
        self._iterator: Iterator[bytes] = self.response.iter_bytes(self.chunk_size)

    def _load_until(self, goal_size: int) -> None:
        while len(self._buffer) < goal_size:
            try:
                self._buffer += next(self._iterator)
            except StopIteration:
                break

    def read(self, size: int = -1) -> bytes:
        """
        Read up to ``size`` bytes of the body (all that is left if ``size`` is
        negative), returning ``b""`` once it is exhausted.
        """
        if size is None or size < 0:
            self._buffer += b"".join(self._iterator)
            size = len(self._buffer)
        else:
            self._load_until(size)
        chunk = bytes(self._buffer[:size])
        del self._buffer[:size]
        return chunk

    def skip(self, n: int) -> int:
        """
        Discard up to ``n`` bytes of the body, returning how many were discarded.
        """
        skipped = 0
        while skipped < n:
            chunk = self.read(min(n - skipped, SKIP_BUFFER_SIZE))
            if not chunk:
                break
            skipped += len(chunk)
        return skipped

    @property
    def closed(self) -> bool:
        return self.response.is_closed

    def close(self) -> None:
        if not self.response.is_closed:
            self.response.close()
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def skip_source(source, n: int) -> int:
    """
    Skip ``n`` bytes of ``source`` by its own means: its ``skip`` method if it has
    one, else by seeking forward if it is seekable, else by reading and discarding.

    A seek does not check for the end of the input, so it may report more bytes
    skipped than the source had left.

    Returns:
      The number of bytes skipped.
    """
    if n <= 0:
        return 0
    if isinstance(source, SkippableByteSource):
        return source.skip(n)
    if getattr(source, "seekable", lambda: False)():
        start = source.tell()
        return source.seek(n, SEEK_CUR) - start
    return len(source.read(n))
