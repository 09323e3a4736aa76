from io import BytesIO

from pytest import fixture, mark, raises

from tar_streams import (
    EntrySizeExceededError,
    IncompleteEntryError,
    TarEntry,
    TarInputStream,
    TarOutputStream,
)
from tar_streams.errors import TarStreamError

from .share import ArchiveSink


@fixture
def sink():
    return ArchiveSink()


@fixture
def out(sink):
    return TarOutputStream(sink)


def test_hello_archive_length(sink, out):
    out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
    assert out.write(b"hello") == 5
    out.close()
    assert len(sink.archive) == 512 + 512 + 1024
    assert sink.archive[-1024:] == bytes(1024)
    assert sink.closed


def test_hello_archive_reads_back(sink, out):
    out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
    out.write(b"hello")
    out.close()
    tar = TarInputStream(BytesIO(sink.archive))
    entries = [(entry.name, tar.read()) for entry in tar]
    assert entries == [("a.txt", b"hello")]


@mark.parametrize("size", [0, 1, 511, 512, 513, 2000])
def test_padding(out, size):
    out.put_next_entry(TarEntry.create("f", size=size, mod_time=0))
    out.write(bytes(size))
    out.close_current_entry()
    padded = -(-size // 512) * 512
    assert out.bytes_written == 512 + padded


def test_write_in_pieces(out):
    out.put_next_entry(TarEntry.create("f", size=10, mod_time=0))
    for _ in range(5):
        out.write(b"ab")
    out.close_current_entry()
    assert out.bytes_written == 1024


def test_size_exceeded_before_write(sink, out):
    out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
    out.write(b"hel")
    with raises(EntrySizeExceededError, match=r"entry\[a.txt\] size\[5\].*bytes\[6\]"):
        out.write(b"lo!")
    assert sink.getvalue()[512:] == b"hel"
    assert out.current_file_size == 3
    assert out.bytes_written == 515


def test_incomplete_entry(out):
    out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
    out.write(b"hell")
    with raises(IncompleteEntryError, match=r"entry\[a.txt\] of size\[5\]"):
        out.close_current_entry()


def test_incomplete_entry_on_next_entry(out):
    out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
    with raises(IncompleteEntryError):
        out.put_next_entry(TarEntry.create("b.txt", size=0, mod_time=0))


def test_incomplete_entry_on_close(sink, out):
    out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
    with raises(IncompleteEntryError):
        out.close()
    assert sink.closed
    assert out.closed
    assert len(sink.archive) == 512
    out.close()


def test_error_in_with_block_closes_sink(sink):
    with raises(EntrySizeExceededError):
        with TarOutputStream(sink) as out:
            out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
            out.write(b"hel")
            out.write(b"lo!!")
    assert sink.closed
    assert out.closed
    assert not out.writable()
    assert len(sink.archive) == 512 + 3


def test_abort(sink, out):
    out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
    out.abort()
    assert sink.closed
    assert len(sink.archive) == 512
    out.close()
    assert len(sink.archive) == 512


def test_writable(out):
    assert out.writable()
    out.close()
    assert not out.writable()


def test_errors_are_io_errors():
    assert issubclass(EntrySizeExceededError, TarStreamError)
    assert issubclass(IncompleteEntryError, IOError)


def test_directory_entry(sink, out):
    out.put_next_entry(TarEntry.create("d", size=0, mod_time=0, is_directory=True))
    out.put_next_entry(TarEntry.create("d/a.txt", size=1, mod_time=0))
    out.write(b"x")
    out.close()
    assert len(sink.archive) == 512 + 512 + 512 + 1024
    names = [e.name for e in TarInputStream(BytesIO(sink.archive))]
    assert names == ["d/", "d/a.txt"]


def test_close_is_idempotent(sink, out):
    out.close()
    out.close()
    assert len(sink.archive) == 1024


def test_write_after_close(out):
    out.close()
    with raises(ValueError):
        out.write(b"x")


def test_context_manager(sink):
    with TarOutputStream(sink) as out:
        out.put_next_entry(TarEntry.create("a", size=1, mod_time=0))
        out.write(b"a")
    assert out.closed
    assert len(sink.archive) == 2048


def test_not_a_sink():
    with raises(TypeError):
        TarOutputStream(b"bytes")


def test_write_file(tmp_path, sink, out):
    f = tmp_path / "a.txt"
    f.write_bytes(b"hello world")
    d = tmp_path / "d"
    d.mkdir()
    out.write_file(TarEntry.from_file(f, "a.txt"))
    out.write_file(TarEntry.from_file(d, "d"))
    out.close()
    tar = TarInputStream(BytesIO(sink.archive))
    assert [(e.name, tar.read()) for e in tar] == [("a.txt", b"hello world"), ("d/", b"")]


def test_open_path(tmp_path):
    path = tmp_path / "out.tar"
    with TarOutputStream.open(path) as out:
        out.put_next_entry(TarEntry.create("a.txt", size=5, mod_time=0))
        out.write(b"hello")
    assert path.stat().st_size == 2048
    with TarInputStream(path.open("rb")) as tar:
        entry = tar.get_next_entry()
        assert (entry.name, tar.read()) == ("a.txt", b"hello")
