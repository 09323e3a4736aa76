from io import BytesIO

import httpx
from pytest import fixture, mark, raises

from tar_streams import TarInputStream
from tar_streams.sources import HttpByteSource, skip_source

from .share import write_archive

EXAMPLE_TAR_URL = "https://example.com/data.tar"
FILES = {"a.txt": b"hello", "b.txt": b"world" * 200}


@fixture(scope="module")
def archive():
    return write_archive(FILES)


@fixture
def client(archive):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/data.tar":
            return httpx.Response(200, content=archive)
        return httpx.Response(404)

    return httpx.Client(transport=httpx.MockTransport(handler))


@mark.parametrize("chunk_size", [None, 1, 100, 4096])
def test_read_archive_over_http(client, chunk_size):
    src = HttpByteSource(EXAMPLE_TAR_URL, client=client, chunk_size=chunk_size)
    with TarInputStream(src) as tar:
        assert {entry.name: tar.read() for entry in tar} == FILES
    assert src.closed
    assert not client.is_closed


@mark.parametrize("default_skip", [False, True])
def test_skip_entries_over_http(client, default_skip):
    src = HttpByteSource(EXAMPLE_TAR_URL, client=client, chunk_size=64)
    with TarInputStream(src, default_skip=default_skip) as tar:
        assert [entry.name for entry in tar] == list(FILES)


def test_read_and_skip(client, archive):
    src = HttpByteSource(EXAMPLE_TAR_URL, client=client, chunk_size=10)
    assert src.read(3) == archive[:3]
    assert src.skip(509) == 509
    assert src.read(5) == archive[512:517]
    assert src.read() == archive[517:]
    assert src.read(1) == b""
    assert src.skip(10) == 0
    src.close()


def test_error_status(client):
    with raises(httpx.HTTPStatusError):
        HttpByteSource("https://example.com/missing.tar", client=client)


def test_async_client_rejected():
    with raises(TypeError):
        HttpByteSource(EXAMPLE_TAR_URL, client=httpx.AsyncClient())


def test_repr(client):
    with HttpByteSource(EXAMPLE_TAR_URL, client=client) as src:
        assert repr(src) == f"HttpByteSource @ '{EXAMPLE_TAR_URL}'"


class Skipper(BytesIO):
    def skip(self, n):
        self.seek(n, 1)
        return 42


@mark.parametrize(
    "source,n,expected",
    [
        (BytesIO(bytes(100)), 10, 10),
        (BytesIO(bytes(100)), 0, 0),
        (Skipper(bytes(100)), 10, 42),
    ],
)
def test_skip_source(source, n, expected):
    assert skip_source(source, n) == expected


def test_skip_source_reads_unseekable():
    class Unseekable:
        def __init__(self):
            self.buf = BytesIO(bytes(20))

        def read(self, size=-1):
            return self.buf.read(size)

    assert skip_source(Unseekable(), 15) == 15
    assert skip_source(Unseekable(), 30) == 20
