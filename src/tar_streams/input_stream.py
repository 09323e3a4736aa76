r""":mod:`tar_streams.input_stream` exposes a class
:class:`~tar_streams.input_stream.TarInputStream`, which reads a tar archive from a
byte source one entry at a time.

Each call to :meth:`~tar_streams.input_stream.TarInputStream.get_next_entry` skips
whatever is left of the previous entry's content (and its padding), parses the next
header block, and makes that entry current. Reads are then clipped to the current
entry's content, so reading to the end of it gives ``b""`` rather than running on
into the padding or the next header.

    >>> import io
    >>> from tar_streams import TarEntry, TarInputStream
    >>> entry = TarEntry.create("a.txt", size=5, mod_time=0)
    >>> archive = entry.to_block() + b"hello".ljust(512, b"\x00") + bytes(1024)
    >>> tar = TarInputStream(io.BytesIO(archive))
    >>> tar.get_next_entry()
    TarEntry 'a.txt': 5B
    >>> tar.read()
    b'hello'
    >>> tar.get_next_entry() is None
    True
"""
from __future__ import annotations

from bisect import bisect_right

from ranges import Range

from .constants import HEADER_BLOCK, SKIP_BUFFER_SIZE
from .entry import TarEntry
from .errors import TarCorruptionError, UnsupportedOperation
from .log_utils import log
from .size_utils import pad_length
from .sources import skip_source
from .types import ByteSource

__all__ = ["TarInputStream"]

DEBUG_VERBOSE = False


class TarInputStream:
    """
    A reader over the tar archive provided by ``source``, which may be any object
    with a blocking ``read(size)`` (see :class:`~tar_streams.types.ByteSource`).
    The source is owned by the stream from then on: closing the stream closes it.

    Iterating the stream yields each entry in turn (as
    :meth:`get_next_entry` would) until the end-of-archive marker.

    With ``record_ranges`` set, the content :class:`~ranges.Range` of each entry
    read is appended to :attr:`entry_ranges`, so the entry any position of the
    stream belongs to can be looked up with :meth:`entry_at`. Entries are held for
    the life of the stream in that case, so it is off by default.
    """

    current_entry: TarEntry | None = None
    current_file_size: int = 0
    """Bytes of the current entry's content consumed so far"""
    bytes_read: int = 0
    """Bytes of the whole stream consumed so far"""

    def __init__(
        self,
        source: ByteSource,
        default_skip: bool = False,
        record_ranges: bool = False,
    ):
        """
        Args:
          source        : The byte source holding the archive (a binary file object,
                          :class:`io.BytesIO`,
                          :class:`~tar_streams.sources.HttpByteSource`, ...)
          default_skip  : (:class:`bool`) Whether to skip unread bytes using the
                          source's own skip (or seek), rather than by reading and
                          discarding them (default: ``False``). Faster, but only safe
                          on sources whose skip reliably reports the bytes skipped.
          record_ranges : (:class:`bool`) Whether to keep the content range of
                          every entry read, for :meth:`entry_at` (default:
                          ``False``)
        """
        if not isinstance(source, ByteSource):
            raise TypeError(f"{source=} is not a readable byte source")
        self._source = source
        self.default_skip = default_skip
        self.exhausted = False
        self.closed = False
        self.record_ranges = record_ranges
        self.entry_ranges: list[tuple[Range, TarEntry]] = []
        self._range_starts: list[int] = []

    def __repr__(self):
        entry = "" if self.current_entry is None else f" '{self.current_entry.name}'"
        return f"{self.__class__.__name__}{entry} @ {self.bytes_read}"

    def __iter__(self):
        return self

    def __next__(self) -> TarEntry:
        entry = self.get_next_entry()
        if entry is None:
            raise StopIteration
        return entry

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    def current_offset(self) -> int:
        """The number of bytes of the stream consumed so far."""
        return self.bytes_read

    def _check_closed(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed tar stream")

    def read(self, size: int = -1) -> bytes:
        """
        Read up to ``size`` bytes (or, if ``size`` is negative, the rest) of the
        current entry's content. Gives ``b""`` once the entry's declared size has
        been read, even if the source has more bytes (those are the padding and the
        next entry).

        With no current entry, reads straight from the source.
        """
        self._check_closed()
        if self.current_entry is not None:
            remaining = self.current_entry.size - self.current_file_size
            if remaining == 0:
                return b""
            if size is None or size < 0 or size > remaining:
                size = remaining
        data = self._source.read(size)
        if self.current_entry is not None:
            self.current_file_size += len(data)
        self.bytes_read += len(data)
        if DEBUG_VERBOSE:
            log.debug(f"Read {len(data)}B (stream at {self.bytes_read})")
        return data

    def readinto(self, b) -> int:
        """
        Read bytes of the current entry's content into the writable buffer ``b``,
        returning how many were read (``0`` at the end of the entry).
        """
        data = self.read(len(b))
        b[: len(data)] = data
        return len(data)

    def get_next_entry(self) -> TarEntry | None:
        """
        Close the current entry (skipping any of its content left unread, and its
        padding), then read and parse the next header block.

        Returns:
          The new current :class:`~tar_streams.entry.TarEntry`, or ``None`` if the
          header block is all zeros (the end of the archive).
        """
        self._check_closed()
        self.close_current_entry()
        if self.exhausted:
            return None
        header_offset = self.bytes_read
        header = bytearray()
        while len(header) < HEADER_BLOCK:
            chunk = self.read(HEADER_BLOCK - len(header))
            if not chunk:
                break
            header += chunk
        if len(header) < HEADER_BLOCK:
            log.debug(f"Short header block ({len(header)}B) at {header_offset}")
            header += bytes(HEADER_BLOCK - len(header))
        if not any(header):
            log.debug(f"End of archive at {header_offset}")
            self.exhausted = True
            return None
        entry = TarEntry.from_block(header)
        self.current_entry = entry
        self.current_file_size = 0
        if self.record_ranges and entry.size > 0:
            rng = entry.content_range(header_offset)
            self._range_starts.append(rng.start)
            self.entry_ranges.append((rng, entry))
        log.debug(f"Entry '{entry.name}' ({entry.size}B) at {header_offset}")
        return entry

    def close_current_entry(self) -> None:
        """
        Skip whatever remains of the current entry's content, then the padding up to
        the next block boundary, and clear the current entry.

        Raises:
          :class:`~tar_streams.errors.TarCorruptionError` if a skip makes no
          progress while content is still outstanding.
        """
        if self.current_entry is None:
            return
        entry = self.current_entry
        while (outstanding := entry.size - self.current_file_size) > 0:
            if self.skip(outstanding) == 0:
                raise TarCorruptionError(entry_name=entry.name, remaining=outstanding)
        self.current_entry = None
        self.current_file_size = 0
        self.skip_pad()

    def skip_pad(self) -> None:
        """
        Skip the padding between the end of an entry's content and the next block
        boundary (measured from the start of the stream).
        """
        pad = pad_length(self.bytes_read) if self.bytes_read > 0 else 0
        skipped = 0
        while skipped < pad:
            res = self.skip(pad - skipped)
            if res == 0:
                log.debug(f"Archive ended in padding at {self.bytes_read}")
                break
            skipped += res

    def skip(self, n: int) -> int:
        """
        Skip up to ``n`` bytes (no further than the end of the current entry's
        content, if there is one), returning how many were skipped.

        Unless :attr:`default_skip` is set, bytes are skipped by reading and
        discarding them in chunks, which works on any source.
        """
        self._check_closed()
        if n <= 0:
            return 0
        if self.current_entry is not None:
            n = min(n, self.current_entry.size - self.current_file_size)
        if self.default_skip:
            skipped = skip_source(self._source, n)
            self.bytes_read += skipped
            if self.current_entry is not None:
                self.current_file_size += skipped
            return skipped
        left = n
        while left > 0:
            chunk = self.read(min(left, SKIP_BUFFER_SIZE))
            if not chunk:
                break
            left -= len(chunk)
        return n - left

    def is_default_skip(self) -> bool:
        return self.default_skip

    def set_default_skip(self, default_skip: bool) -> None:
        self.default_skip = default_skip

    def entry_at(self, position: int) -> TarEntry:
        """
        The entry whose content holds the byte at ``position`` in the stream (only
        entries read so far are known, and only if the stream records ranges).

        Raises:
          :class:`KeyError` if no recorded entry content covers ``position``.
        """
        i = bisect_right(self._range_starts, position) - 1
        if i >= 0:
            rng, entry = self.entry_ranges[i]
            if position in rng:
                return entry
        raise KeyError(f"No entry read so far has content at {position}")

    def seekable(self) -> bool:
        return False

    def mark_supported(self) -> bool:
        return False

    def mark(self, readlimit: int) -> None:
        """Does nothing: marking a position is not supported (see :meth:`reset`)."""

    def reset(self) -> None:
        raise UnsupportedOperation("mark/reset not supported")

    def close(self) -> None:
        """Close the stream and its underlying source."""
        if not self.closed:
            self.closed = True
            self._source.close()
