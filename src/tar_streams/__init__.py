r"""
:mod:`tar_streams` reads and writes tar archives as streams, one entry at a time,
through an API familiar to users of the standard library :mod:`io` module.

An archive is a sequence of 512 byte header blocks, each followed by its entry's
content padded out to a whole number of blocks, and ended by two all-zero blocks.
Headers use the ustar layout (with the ``"ustar  "`` magic), including the user and
group names and the name prefix for paths longer than 100 bytes, and sizes beyond
the 11 octal digits of the size field use the GNU binary extension.

A :class:`~tar_streams.output_stream.TarOutputStream` is given a byte sink (any
object with ``write`` and ``close``) and fed :class:`~tar_streams.entry.TarEntry`
objects, each followed by exactly as many content bytes as its header declares:

    >>> import io
    >>> from tar_streams import TarEntry, TarOutputStream
    >>> out = TarOutputStream(io.BytesIO())
    >>> out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
    >>> out.write(b"hello")
    5
    >>> out.close()
    >>> out.bytes_written
    2048

A :class:`~tar_streams.input_stream.TarInputStream` is given a byte source (any
object with ``read``, such as a file opened in binary mode, or an
:class:`~tar_streams.sources.HttpByteSource` to stream an archive from a URL) and
iterated for its entries, the content of each being read from the stream while it
is the current entry:

    >>> from tar_streams import TarInputStream
    >>> with TarInputStream(open("data.tar", "rb")) as tar: # doctest: +SKIP
    ...     for entry in tar:
    ...         print(entry.name, tar.read()[:10])
    a.txt b'hello'

Entries for files on disk are made with
:meth:`~tar_streams.entry.TarEntry.from_file` and written along with their content
by :meth:`~tar_streams.output_stream.TarOutputStream.write_file`. The length of the
archive that a file or directory tree will make can be found beforehand with
:func:`~tar_streams.size_utils.calculate_tar_size`.
"""

# Get classes into package namespace but exclude from __all__ so Sphinx can access types

from . import constants, errors, header, octal, size_utils, sources
from .entry import TarEntry
from .errors import (
    EntrySizeExceededError,
    IncompleteEntryError,
    TarCorruptionError,
    TarStreamError,
)
from .header import TarHeader, create_header
from .input_stream import TarInputStream
from .output_stream import TarOutputStream
from .size_utils import calculate_tar_size

__all__ = [
    "entry",
    "header",
    "octal",
    "input_stream",
    "output_stream",
    "size_utils",
    "sources",
    "errors",
    "constants",
]

__version__ = "0.1.0"
__author__ = "Louis Maddox"
__license__ = "MIT"
__description__ = "Streaming reader and writer for tar archives."
__url__ = "https://github.com/lmmx/tar-streams"
__uri__ = __url__
__email__ = "louismmx@gmail.com"
