r""":mod:`tar_streams.output_stream` exposes a class
:class:`~tar_streams.output_stream.TarOutputStream`, which writes a tar archive to a
byte sink one entry at a time.

Each entry is begun with
:meth:`~tar_streams.output_stream.TarOutputStream.put_next_entry`, which writes its
header block, and its content is then written with
:meth:`~tar_streams.output_stream.TarOutputStream.write`. The size in the entry's
header is binding: writing past it, or moving on before reaching it, raises an error.

    >>> import io
    >>> from tar_streams import TarEntry, TarOutputStream
    >>> out = TarOutputStream(io.BytesIO())
    >>> out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
    >>> out.write(b"hello")
    5
    >>> out.close()
    >>> out.bytes_written  # header, padded content, end-of-archive marker
    2048
"""
from __future__ import annotations

import shutil
from pathlib import Path

from .constants import COPY_BUFFER_SIZE, EOF_BLOCK, HEADER_BLOCK
from .entry import TarEntry
from .errors import EntrySizeExceededError, IncompleteEntryError
from .log_utils import log
from .size_utils import pad_length
from .types import ByteSink

__all__ = ["TarOutputStream"]


class TarOutputStream:
    """
    A writer of a tar archive to ``sink``, which may be any object with a blocking
    ``write(b)`` and ``close()`` (see :class:`~tar_streams.types.ByteSink`).
    The sink is owned by the stream from then on: closing the stream closes it.

    The end-of-archive marker is only written by :meth:`close`, so an archive is
    not complete until the stream has been closed.
    """

    current_entry: TarEntry | None = None
    current_file_size: int = 0
    """Bytes of the current entry's content written so far"""
    bytes_written: int = 0
    """Bytes of the whole stream written so far"""

    def __init__(self, sink: ByteSink):
        if not isinstance(sink, ByteSink):
            raise TypeError(f"{sink=} is not a writable byte sink")
        self._sink = sink
        self.closed = False

    @classmethod
    def open(cls, path: Path | str) -> TarOutputStream:
        """Create (or truncate) the file at ``path`` and write an archive to it."""
        return cls(open(path, "wb"))

    def __repr__(self):
        entry = "" if self.current_entry is None else f" '{self.current_entry.name}'"
        return f"{self.__class__.__name__}{entry} @ {self.bytes_written}"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            self.close()
        else:
            self.abort()

    def _check_closed(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed tar stream")

    def writable(self) -> bool:
        return not self.closed

    def write(self, b) -> int:
        """
        Write ``b`` as content of the current entry (or, with no current entry,
        straight to the sink), returning the number of bytes written.

        Raises:
          :class:`~tar_streams.errors.EntrySizeExceededError` (before writing any of
          ``b``) if the current entry is not a directory and ``b`` would take it past
          its declared size.
        """
        self._check_closed()
        n = len(b)
        entry = self.current_entry
        if entry is not None and not entry.is_directory():
            if entry.size < self.current_file_size + n:
                raise EntrySizeExceededError(
                    entry_name=entry.name,
                    size=entry.size,
                    attempted=self.current_file_size + n,
                )
        self._sink.write(b)
        self.bytes_written += n
        if entry is not None:
            self.current_file_size += n
        return n

    def put_next_entry(self, entry: TarEntry) -> None:
        """
        Close the current entry (padding it to the block boundary), then write the
        header block of ``entry`` and make it the current entry.
        """
        self.close_current_entry()
        header = bytearray(HEADER_BLOCK)
        entry.write_entry_header(header)
        self.write(header)
        self.current_entry = entry
        self.current_file_size = 0
        log.debug(f"Put entry '{entry.name}' ({entry.size}B)")

    def write_file(self, entry: TarEntry) -> None:
        """
        Put ``entry`` and write the content of its file (a directory, or an entry
        without a file, gets its header alone).
        """
        self.put_next_entry(entry)
        if entry.file is None or entry.is_directory():
            return
        with entry.file.open("rb") as f:
            shutil.copyfileobj(f, self, COPY_BUFFER_SIZE)

    def close_current_entry(self) -> None:
        """
        Finish the current entry, padding its content out to the next block boundary.

        Raises:
          :class:`~tar_streams.errors.IncompleteEntryError` if fewer bytes than the
          entry's declared size have been written.
        """
        entry = self.current_entry
        if entry is None:
            return
        if entry.size > self.current_file_size:
            raise IncompleteEntryError(
                entry_name=entry.name, size=entry.size, written=self.current_file_size
            )
        self.current_entry = None
        self.current_file_size = 0
        self.pad()

    def pad(self) -> None:
        """
        Write zeros up to the next block boundary (measured from the start of the
        stream).
        """
        if self.bytes_written > 0 and (n := pad_length(self.bytes_written)):
            self.write(bytes(n))

    def flush(self) -> None:
        self._check_closed()
        if callable(flush := getattr(self._sink, "flush", None)):
            flush()

    def close(self) -> None:
        """
        Close the current entry, write the end-of-archive marker, and close the sink.

        The sink is closed even if the current entry is incomplete, in which case the
        :class:`~tar_streams.errors.IncompleteEntryError` is raised after it and no
        marker is written.
        """
        if self.closed:
            return
        try:
            self.close_current_entry()
            self.write(bytes(EOF_BLOCK))
            log.debug(f"End of archive written ({self.bytes_written}B in total)")
        finally:
            self._sink.close()
            self.closed = True

    def abort(self) -> None:
        """
        Close the sink without finishing the archive (leaving the current entry as
        it is, and writing no end-of-archive marker). Used on leaving a ``with``
        block by an exception.
        """
        if self.closed:
            return
        log.debug(f"Archive abandoned at {self.bytes_written}B")
        self._sink.close()
        self.closed = True
