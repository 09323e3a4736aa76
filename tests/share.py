from __future__ import annotations

from io import BytesIO

from tar_streams import TarEntry, TarOutputStream

__all__ = ["ArchiveSink", "write_archive"]


class ArchiveSink(BytesIO):
    """
    A :class:`io.BytesIO` which keeps its contents in ``archive`` when closed (the
    :class:`TarOutputStream` closes its sink, and only then is the archive complete).
    """

    archive: bytes = b""

    def close(self):
        if not self.closed:
            self.archive = self.getvalue()
        super().close()


def write_archive(
    files: dict[str, bytes] | list[tuple[str, bytes]], mod_time: int = 0
) -> bytes:
    """
    Tar the given mapping (or list of pairs, to repeat a name) of names to content,
    a name ending in ``/`` being written as a directory.
    """
    items = files.items() if isinstance(files, dict) else files
    sink = ArchiveSink()
    with TarOutputStream(sink) as out:
        for name, content in items:
            is_dir = name.endswith("/")
            entry = TarEntry.create(name, len(content), mod_time, is_directory=is_dir)
            out.put_next_entry(entry)
            if content:
                out.write(content)
    return sink.archive
