r""":mod:`tar_streams.entry` exposes :class:`~tar_streams.entry.TarEntry`, which pairs a
:class:`~tar_streams.header.TarHeader` with (on the write path) the file whose
content it describes, and converts the header to and from its 512 byte block.

    >>> from tar_streams import TarEntry
    >>> e = TarEntry.create("a.txt", size=5, mod_time=0)
    >>> block = e.to_block()
    >>> len(block)
    512
    >>> TarEntry.from_block(block).name
    'a.txt'
"""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from ranges import Range

from .constants import (
    CHKSUMLEN,
    DEFAULT_DIR_MODE,
    DEFAULT_FILE_MODE,
    GIDLEN,
    HEADER_BLOCK,
    LF_DIR,
    MODELEN,
    MODTIMELEN,
    NAMELEN,
    SIZELEN,
    TYPEFLAGLEN,
    UIDLEN,
    USTAR_DEVLEN,
    USTAR_FILENAME_PREFIX,
    USTAR_GROUP_NAMELEN,
    USTAR_MAGICLEN,
    USTAR_USER_NAMELEN,
)
from .header import TarHeader, create_header, get_string_bytes, parse_string
from .octal import get_check_sum_octal_bytes, get_octal_bytes, parse_octal

__all__ = ["TarEntry"]

_CHECK_SUM_BLANK = b" " * CHKSUMLEN


class TarEntry:
    """
    One file or directory record of a tar archive.

    Entries read from a :class:`~tar_streams.input_stream.TarInputStream` have no
    :attr:`file`. Entries built with :meth:`from_file` keep the path they were
    built from, which :meth:`~tar_streams.output_stream.TarOutputStream.write_file`
    reads the content from.

    The header is immutable: the setters below swap in an updated copy of it, and
    are meant to be used before the entry is written.
    """

    def __init__(self, header: TarHeader | None = None, file: Path | None = None):
        self._header = TarHeader() if header is None else header
        self.file = file

    @classmethod
    def create(
        cls,
        name: str,
        size: int,
        mod_time: int,
        is_directory: bool = False,
        permissions: int | None = None,
    ) -> TarEntry:
        """
        Build an entry from its name, size, modification time (in seconds), whether
        it is a directory, and its permission bits (if ``None``, the default of
        ``0o755`` for directories and ``0o644`` for files is used).
        """
        if permissions is None:
            permissions = DEFAULT_DIR_MODE if is_directory else DEFAULT_FILE_MODE
        return cls(create_header(name, size, mod_time, is_directory, permissions))

    @classmethod
    def from_file(cls, file: Path | str, entry_name: str | None = None) -> TarEntry:
        """
        Build an entry describing the file or directory at ``file``, to be stored
        in the archive as ``entry_name`` (by default, the path as given).
        """
        file = Path(file)
        st = file.stat()
        is_directory = file.is_dir()
        entry = cls.create(
            name=str(file) if entry_name is None else entry_name,
            size=st.st_size,
            mod_time=int(st.st_mtime),
            is_directory=is_directory,
        )
        entry.file = file
        return entry

    @classmethod
    def from_block(cls, block: bytes | bytearray) -> TarEntry:
        """Build an entry by parsing a header block read from an archive."""
        entry = cls()
        entry.parse_tar_header(block)
        return entry

    def __repr__(self):
        return f"{self.__class__.__name__} '{self.name}': {self.size!r}B"

    def __eq__(self, other):
        if not isinstance(other, TarEntry):
            return NotImplemented
        return self._header.name == other._header.name

    def __hash__(self):
        return hash(self._header.name)

    @property
    def header(self) -> TarHeader:
        return self._header

    def update_header(self, **changes) -> None:
        """Replace the header with a copy having the given fields changed."""
        self._header = self._header.replace(**changes)

    @property
    def name(self) -> str:
        """
        The entry's path, with the ``name_prefix`` (if any) rejoined to the name.
        Setting it only changes the ``name`` field.
        """
        return self._header.full_name

    @name.setter
    def name(self, name: str) -> None:
        self.update_header(name=name)

    @property
    def user_id(self) -> int:
        return self._header.user_id

    @user_id.setter
    def user_id(self, user_id: int) -> None:
        self.update_header(user_id=user_id)

    @property
    def group_id(self) -> int:
        return self._header.group_id

    @group_id.setter
    def group_id(self, group_id: int) -> None:
        self.update_header(group_id=group_id)

    def set_ids(self, user_id: int, group_id: int) -> None:
        self.update_header(user_id=user_id, group_id=group_id)

    @property
    def user_name(self) -> str:
        return self._header.user_name

    @user_name.setter
    def user_name(self, user_name: str) -> None:
        self.update_header(user_name=user_name)

    @property
    def group_name(self) -> str:
        return self._header.group_name

    @group_name.setter
    def group_name(self, group_name: str) -> None:
        self.update_header(group_name=group_name)

    @property
    def mode(self) -> int:
        return self._header.mode

    @mode.setter
    def mode(self, mode: int) -> None:
        self.update_header(mode=mode)

    @property
    def size(self) -> int:
        return self._header.size

    @size.setter
    def size(self, size: int) -> None:
        self.update_header(size=size)

    @property
    def mod_time(self) -> int:
        """Last modification time, in whole seconds since the epoch."""
        return self._header.mod_time

    @mod_time.setter
    def mod_time(self, mod_time: int) -> None:
        self.update_header(mod_time=mod_time)

    @property
    def mod_datetime(self) -> datetime:
        return datetime.fromtimestamp(self._header.mod_time, tz=timezone.utc)

    @mod_datetime.setter
    def mod_datetime(self, dt: datetime) -> None:
        self.update_header(mod_time=int(dt.timestamp()))

    @property
    def link_name(self) -> str:
        return self._header.link_name

    @link_name.setter
    def link_name(self, link_name: str) -> None:
        self.update_header(link_name=link_name)

    @property
    def typeflag(self) -> int:
        return self._header.typeflag

    @typeflag.setter
    def typeflag(self, typeflag: int) -> None:
        self.update_header(typeflag=typeflag)

    def is_directory(self) -> bool:
        """
        Whether the entry is a directory: its file is one, or its header has the
        directory type flag, or its name ends in ``/``.
        """
        if self.file is not None:
            return self.file.is_dir()
        if self._header.typeflag == LF_DIR:
            return True
        return self._header.name.endswith("/")

    def is_descendent(self, other: TarEntry) -> bool:
        """
        Whether this entry's name starts with the name of ``other``.

        Note: this is a plain string prefix test, not a path test, so an entry
        named ``"abc"`` counts as a descendent of one named ``"ab"``.
        """
        return self.name.startswith(other.name)

    def content_range(self, header_offset: int) -> Range:
        """
        The :class:`~ranges.Range` of stream positions holding this entry's content
        (padding excluded), given the position its header block starts at.
        """
        start = header_offset + HEADER_BLOCK
        return Range(start, start + self.size)

    @staticmethod
    def compute_check_sum(block: bytes | bytearray) -> int:
        """The sum of every byte of ``block``, each taken as unsigned."""
        return sum(block)

    def write_entry_header(self, outbuf: bytearray) -> None:
        """
        Serialise the header into the 512 byte ``outbuf``, field by field.

        The checksum covers its own field, so it is written in two phases: the field
        is first filled with spaces, the checksum of the whole block is computed,
        and the checksum field is then overwritten with the result.
        """
        h = self._header
        offset = 0
        offset = get_string_bytes(h.name, outbuf, offset, NAMELEN)
        offset = get_octal_bytes(h.mode, outbuf, offset, MODELEN)
        offset = get_octal_bytes(h.user_id, outbuf, offset, UIDLEN)
        offset = get_octal_bytes(h.group_id, outbuf, offset, GIDLEN)
        offset = get_octal_bytes(h.size, outbuf, offset, SIZELEN)
        offset = get_octal_bytes(h.mod_time, outbuf, offset, MODTIMELEN)
        check_sum_offset = offset
        outbuf[offset : offset + CHKSUMLEN] = _CHECK_SUM_BLANK
        offset += CHKSUMLEN
        outbuf[offset] = h.typeflag
        offset += TYPEFLAGLEN
        offset = get_string_bytes(h.link_name, outbuf, offset, NAMELEN)
        offset = get_string_bytes(h.magic, outbuf, offset, USTAR_MAGICLEN)
        offset = get_string_bytes(h.user_name, outbuf, offset, USTAR_USER_NAMELEN)
        offset = get_string_bytes(h.group_name, outbuf, offset, USTAR_GROUP_NAMELEN)
        # Device numbers are not supported, the fields are left zeroed
        outbuf[offset : offset + 2 * USTAR_DEVLEN] = bytes(2 * USTAR_DEVLEN)
        offset += 2 * USTAR_DEVLEN
        offset = get_string_bytes(h.name_prefix, outbuf, offset, USTAR_FILENAME_PREFIX)
        outbuf[offset:HEADER_BLOCK] = bytes(HEADER_BLOCK - offset)
        check_sum = self.compute_check_sum(outbuf)
        get_check_sum_octal_bytes(check_sum, outbuf, check_sum_offset, CHKSUMLEN)

    def to_block(self) -> bytes:
        """Return the header serialised as a fresh 512 byte block."""
        outbuf = bytearray(HEADER_BLOCK)
        self.write_entry_header(outbuf)
        return bytes(outbuf)

    def parse_tar_header(self, block: bytes | bytearray) -> None:
        """
        Replace the header with the one parsed from ``block``, reading each field at
        the offset where the previous one ended.
        """
        offset = 0
        name = parse_string(block, offset, NAMELEN)
        offset += NAMELEN
        mode = parse_octal(block, offset, MODELEN)
        offset += MODELEN
        user_id = parse_octal(block, offset, UIDLEN)
        offset += UIDLEN
        group_id = parse_octal(block, offset, GIDLEN)
        offset += GIDLEN
        size = parse_octal(block, offset, SIZELEN)
        offset += SIZELEN
        mod_time = parse_octal(block, offset, MODTIMELEN)
        offset += MODTIMELEN
        check_sum = parse_octal(block, offset, CHKSUMLEN)
        offset += CHKSUMLEN
        typeflag = block[offset]
        offset += TYPEFLAGLEN
        link_name = parse_string(block, offset, NAMELEN)
        offset += NAMELEN
        magic = parse_string(block, offset, USTAR_MAGICLEN)
        offset += USTAR_MAGICLEN
        user_name = parse_string(block, offset, USTAR_USER_NAMELEN)
        offset += USTAR_USER_NAMELEN
        group_name = parse_string(block, offset, USTAR_GROUP_NAMELEN)
        offset += USTAR_GROUP_NAMELEN
        dev_major = parse_octal(block, offset, USTAR_DEVLEN)
        offset += USTAR_DEVLEN
        dev_minor = parse_octal(block, offset, USTAR_DEVLEN)
        offset += USTAR_DEVLEN
        name_prefix = parse_string(block, offset, USTAR_FILENAME_PREFIX)
        self._header = TarHeader(
            name=name,
            mode=mode,
            user_id=user_id,
            group_id=group_id,
            size=size,
            mod_time=mod_time,
            check_sum=check_sum,
            typeflag=typeflag,
            link_name=link_name,
            magic=magic,
            user_name=user_name,
            group_name=group_name,
            dev_major=dev_major,
            dev_minor=dev_minor,
            name_prefix=name_prefix,
        )
