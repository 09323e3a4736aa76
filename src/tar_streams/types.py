from __future__ import annotations

from typing import Protocol, runtime_checkable

__all__ = ["ByteSource", "SkippableByteSource", "ByteSink"]


@runtime_checkable
class ByteSource(Protocol):
    """
    What :class:`~tar_streams.input_stream.TarInputStream` reads from: anything
    with a blocking ``read`` returning at most ``size`` bytes (``b""`` once the
    input is exhausted), such as a binary file or :class:`io.BytesIO`.
    """

    def read(self, size: int = -1) -> bytes:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class SkippableByteSource(ByteSource, Protocol):
    """A :class:`ByteSource` with its own ``skip``, returning the count skipped."""

    def skip(self, n: int) -> int:
        ...


@runtime_checkable
class ByteSink(Protocol):
    """What :class:`~tar_streams.output_stream.TarOutputStream` writes to."""

    def write(self, b: bytes) -> int | None:
        ...

    def close(self) -> None:
        ...
