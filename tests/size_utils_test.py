from pytest import fixture, mark, raises

from tar_streams import TarEntry, TarOutputStream, calculate_tar_size
from tar_streams.size_utils import entry_size, pad_length

from .share import ArchiveSink


@mark.parametrize(
    "position,expected", [(0, 0), (1, 511), (511, 1), (512, 0), (517, 507)]
)
def test_pad_length(position, expected):
    assert pad_length(position) == expected


@mark.parametrize(
    "file_size,expected", [(0, 512), (1, 1024), (512, 1024), (513, 1536)]
)
def test_entry_size(file_size, expected):
    assert entry_size(file_size) == expected


@fixture
def tree(tmp_path):
    """
    root/
      a.txt      (5 bytes)
      empty/
      sub/
        b.bin    (600 bytes)
        deeper/
          c.txt  (0 bytes)
    """
    root = tmp_path / "root"
    (root / "empty").mkdir(parents=True)
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"hello")
    (root / "sub" / "b.bin").write_bytes(bytes(600))
    (root / "sub" / "deeper" / "c.txt").write_bytes(b"")
    return root


def test_calculate_tar_size(tree):
    # a.txt, empty/, b.bin, c.txt, end-of-archive marker
    assert calculate_tar_size(tree) == 1024 + 512 + 1536 + 512 + 1024


def test_calculate_single_file_size(tree):
    assert calculate_tar_size(tree / "a.txt") == 1024 + 1024


def test_calculate_empty_dir_size(tree):
    assert calculate_tar_size(tree / "empty") == 512 + 1024


def test_calculate_missing_path(tmp_path):
    with raises(FileNotFoundError):
        calculate_tar_size(tmp_path / "missing")


def test_size_matches_written_archive(tree):
    """Tar the files and empty directories, as the size estimate counts them."""
    sink = ArchiveSink()
    with TarOutputStream(sink) as out:
        for path in sorted(tree.rglob("*")):
            if path.is_file() or not any(path.iterdir()):
                out.write_file(TarEntry.from_file(path, str(path.relative_to(tree))))
    assert len(sink.archive) == calculate_tar_size(tree)
