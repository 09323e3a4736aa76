r""":mod:`tar_streams.header` holds the in-memory form of a ustar header record,
:class:`~tar_streams.header.TarHeader`, along with the text field codec and
:func:`~tar_streams.header.create_header`, which builds the header for a file or
directory about to be written.

A :class:`~tar_streams.header.TarHeader` is immutable: the fields are set when it
is constructed, and changed only by deriving a new header with
:meth:`~tar_streams.header.TarHeader.replace`. The checksum is not maintained on
the record, it is computed from the final field values when the header block is
serialised (see :meth:`~tar_streams.entry.TarEntry.write_entry_header`).

    >>> from tar_streams.header import create_header
    >>> h = create_header("dir/a.txt", size=5, mod_time=0, is_directory=False, permissions=0o644)
    >>> h.name, h.size, h.is_directory
    ('dir/a.txt', 5, False)
    >>> create_header("dir", 99, 0, True, 0o755).name
    'dir/'
"""
from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, fields

from .constants import (
    LF_DIR,
    LF_NORMAL,
    LF_OLDNORM,
    NAMELEN,
    USTAR_MAGIC,
)

__all__ = ["TarHeader", "parse_string", "get_string_bytes", "create_header"]

ENCODING = "utf-8"
ERRORS = "surrogateescape"  # undecodable name bytes survive a read/write cycle


def parse_string(header: bytes | bytearray, offset: int, length: int) -> str:
    """Decode the text field of width ``length`` at ``offset``, up to (not including)
    the first NUL byte.
    """
    field = bytes(header[offset : offset + length])
    end = field.find(b"\x00")
    if end != -1:
        field = field[:end]
    return field.decode(ENCODING, ERRORS)


def get_string_bytes(value: str, buf: bytearray, offset: int, length: int) -> int:
    """Write ``value`` into the text field of width ``length`` at ``offset``,
    truncating it if it does not fit and zero-filling the rest of the field.

    Returns:
      The offset just past the field (``offset + length``).
    """
    encoded = value.encode(ENCODING, ERRORS)[:length]
    buf[offset : offset + length] = encoded.ljust(length, b"\x00")
    return offset + length


@dataclass(frozen=True)
class TarHeader:
    """
    The fields of a ustar header record, named as in the block layout
    (:data:`~tar_streams.constants.FIELD_WIDTHS` gives the order and widths).

    ``typeflag`` is kept as the raw byte value (e.g. ``ord("5")`` for a directory,
    see the ``LF_*`` constants in :mod:`tar_streams.constants`).
    """

    name: str = ""
    mode: int = 0
    user_id: int = 0
    group_id: int = 0
    size: int = 0
    mod_time: int = 0
    check_sum: int = 0
    typeflag: int = LF_OLDNORM
    link_name: str = ""
    magic: str = USTAR_MAGIC
    user_name: str = ""
    group_name: str = ""
    dev_major: int = 0
    dev_minor: int = 0
    name_prefix: str = ""

    def __repr__(self):
        attrs = {f.name: getattr(self, f.name) for f in fields(self)}
        return f"{self.__class__.__name__} :: {attrs}"

    def replace(self, **changes) -> TarHeader:
        """
        Return a copy of this header with the given fields changed, e.g.
        ``header.replace(user_name="root", group_name="root")``.
        """
        return dataclasses.replace(self, **changes)

    @property
    def full_name(self) -> str:
        """The entry name, rejoined with ``name_prefix`` if that is non-empty."""
        if self.name_prefix:
            return f"{self.name_prefix}/{self.name}"
        return self.name

    @property
    def is_directory(self) -> bool:
        return self.typeflag == LF_DIR

    @property
    def is_file(self) -> bool:
        return self.typeflag in (LF_NORMAL, LF_OLDNORM)


def normalise_name(entry_name: str) -> str:
    """
    Use ``/`` as the path separator and strip any leading or trailing separators.
    """
    name = entry_name.replace(os.sep, "/")
    if os.altsep:
        name = name.replace(os.altsep, "/")
    return name.strip("/")


def create_header(
    entry_name: str,
    size: int,
    mod_time: int,
    is_directory: bool,
    permissions: int,
) -> TarHeader:
    """
    Build the header for a file or directory about to be archived.

    If the normalised name is longer than 100 bytes it is split at its last ``/``:
    the part before goes in ``name_prefix`` and the part after in ``name`` (a long
    name with no ``/`` stays whole, and is truncated when written). A directory gets
    the directory type flag, a trailing ``/`` on its name, and a size of ``0``
    whatever ``size`` was given.

    Args:
      entry_name   : the path of the entry within the archive
      size         : the content length in bytes (ignored for directories)
      mod_time     : last modification time, in whole seconds since the epoch
      is_directory : whether the entry is a directory
      permissions  : the permission bits to store in ``mode``
    """
    name = normalise_name(entry_name)
    name_prefix = ""
    if len(name.encode(ENCODING, ERRORS)) > NAMELEN and "/" in name:
        name_prefix, _, name = name.rpartition("/")
    if is_directory:
        if not name.endswith("/"):
            name += "/"
        typeflag, size = LF_DIR, 0
    else:
        typeflag = LF_NORMAL
    return TarHeader(
        name=name,
        mode=permissions,
        size=size,
        mod_time=mod_time,
        typeflag=typeflag,
        name_prefix=name_prefix,
    )
