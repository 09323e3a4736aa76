from __future__ import annotations

import io

__all__ = [
    "TarStreamError",
    "TarCorruptionError",
    "EntrySizeExceededError",
    "IncompleteEntryError",
    "UnsupportedOperation",
]


class TarStreamError(IOError):
    """
    Base class for the errors raised by
    :class:`~tar_streams.input_stream.TarInputStream` and
    :class:`~tar_streams.output_stream.TarOutputStream`.
    """


class TarCorruptionError(TarStreamError):
    """
    Skipping the unread content of an entry made no progress while bytes of it
    were still outstanding (the archive ended before its declared size).

    Raised by :meth:`~tar_streams.input_stream.TarInputStream.close_current_entry`
    """

    def __init__(self, *, entry_name: str, remaining: int):
        super().__init__(
            f"Possible tar file corruption: entry[{entry_name}] ended with "
            f"{remaining} bytes of content unread"
        )
        self.entry_name = entry_name
        self.remaining = remaining


class EntrySizeExceededError(TarStreamError):
    """
    A write would take the current entry past the size declared in its header.
    Raised before any of the bytes are written.
    """

    def __init__(self, *, entry_name: str, size: int, attempted: int):
        super().__init__(
            f"The current entry[{entry_name}] size[{size}] is smaller than "
            f"the bytes[{attempted}] being written."
        )
        self.entry_name = entry_name
        self.size = size
        self.attempted = attempted


class IncompleteEntryError(TarStreamError):
    """
    The current entry was closed before the size declared in its header had been
    written.
    """

    def __init__(self, *, entry_name: str, size: int, written: int):
        super().__init__(
            f"The current entry[{entry_name}] of size[{size}] has not been fully "
            f"written ({written} bytes written)."
        )
        self.entry_name = entry_name
        self.size = size
        self.written = written


class UnsupportedOperation(TarStreamError, io.UnsupportedOperation):
    """
    Mark/reset was requested on a tar stream.
    """
