from __future__ import annotations

from pathlib import Path

from .constants import DATA_BLOCK, EOF_BLOCK, HEADER_BLOCK

__all__ = ["pad_length", "entry_size", "calculate_tar_size"]


def pad_length(position: int) -> int:
    """
    The number of zero bytes needed to bring a stream at ``position`` up to the next
    multiple of the data block size (``0`` if it is already on a boundary).

    Args:
      position : the total number of bytes read from or written to the stream
    """
    extra = position % DATA_BLOCK
    return DATA_BLOCK - extra if extra else 0


def entry_size(file_size: int) -> int:
    """
    The number of bytes an entry with ``file_size`` bytes of content takes up in an
    archive: one header block, then the content padded to a whole number of blocks.
    """
    size = HEADER_BLOCK + file_size
    return size + pad_length(size)


def calculate_tar_size(root_path: Path | str) -> int:
    """
    The exact length of the archive made by tarring every file under ``root_path``
    (or ``root_path`` alone, if it is a file), end-of-archive marker included.

    Each file counts as :func:`entry_size` of its length, and each empty directory
    as a lone header block. A non-empty directory adds nothing of its own beyond the
    sizes of its children.

    Args:
      root_path : the file or directory to be archived
    """
    root_path = Path(root_path)
    if not root_path.exists():
        raise FileNotFoundError(f"Cannot size a tar of missing path {root_path}")
    return _tar_size(root_path) + EOF_BLOCK


def _tar_size(path: Path) -> int:
    if path.is_file():
        return entry_size(path.stat().st_size)
    if not path.is_dir():
        return 0
    children = list(path.iterdir())
    if not children:
        # Empty folder header
        return HEADER_BLOCK
    return sum(_tar_size(child) for child in children)
