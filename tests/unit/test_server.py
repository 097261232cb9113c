# ============================================================================
# SOURCEFILE: test_server.py
# RELPATH: assetfs/tests/unit/test_server.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Unit tests for the HTTP server over a FileSystem
# ============================================================================

"""
Unit tests for serving a FileSystem over HTTP.

A real server is started on an ephemeral port in a background thread and
queried with http.client.
"""

import http.client
import threading
from email.utils import formatdate

import pytest

from assetfs.filesystem import FileSystem
from assetfs.models import FileInfo
from assetfs.server import AssetRequestHandler, make_handler, make_server

MTIME_NS = 1_700_000_000_000_000_000
MTIME_S = MTIME_NS // 1_000_000_000


@pytest.fixture
def site_fs():
    return FileSystem({
        "/index.html": FileInfo.from_bytes("index.html", b"<h1>home</h1>", mod_time=MTIME_NS),
        "/css/site.css": FileInfo.from_bytes("site.css", b"body{}", mod_time=MTIME_NS),
        "/b.bin": FileInfo.from_bytes("b.bin", bytes([0x00, 0xFF]), mod_time=MTIME_NS),
        "/docs/snow man.txt": FileInfo.from_bytes("snow man.txt", "☃".encode("utf-8"), mod_time=MTIME_NS),
    })


@pytest.fixture
def server(site_fs):
    """Running server; yields (host, port)."""
    srv = make_server(site_fs, "127.0.0.1", 0)
    thread = threading.Thread(target=srv.serve_forever, kwargs={"poll_interval": 0.05}, daemon=True)
    thread.start()
    yield srv.server_address[:2]
    srv.shutdown()
    srv.server_close()
    thread.join(timeout=5)


def request(address, method, path, headers=None):
    """Issue one request and return (status, headers, body)."""
    conn = http.client.HTTPConnection(*address, timeout=5)
    try:
        conn.request(method, path, headers=headers or {})
        response = conn.getresponse()
        body = response.read()
        return response.status, response, body
    finally:
        conn.close()


class TestHandlerBinding:
    """make_handler binds a FileSystem to a handler subclass."""

    def test_subclass_per_filesystem(self, site_fs):
        first = make_handler(site_fs)
        second = make_handler(FileSystem())

        assert issubclass(first, AssetRequestHandler)
        assert first.filesystem is site_fs
        assert second.filesystem is not site_fs


class TestGet:
    """GET requests."""

    def test_text_file(self, server):
        status, response, body = request(server, "GET", "/css/site.css")

        assert status == 200
        assert body == b"body{}"
        assert response.getheader("Content-Type") == "text/css"
        assert response.getheader("Content-Length") == "6"
        assert response.getheader("Last-Modified") == formatdate(MTIME_S, usegmt=True)

    def test_binary_file(self, server):
        status, response, body = request(server, "GET", "/b.bin")

        assert status == 200
        assert body == b"\x00\xff"
        assert response.getheader("Content-Type") == "application/octet-stream"

    def test_root_serves_index(self, server):
        status, response, body = request(server, "GET", "/")

        assert status == 200
        assert body == b"<h1>home</h1>"
        assert response.getheader("Content-Type") == "text/html"

    def test_percent_encoded_path(self, server):
        status, _, body = request(server, "GET", "/docs/snow%20man.txt")

        assert status == 200
        assert body.decode("utf-8") == "☃"

    def test_query_string_ignored(self, server):
        status, _, body = request(server, "GET", "/b.bin?v=2")

        assert status == 200
        assert body == b"\x00\xff"

    def test_missing_file(self, server):
        status, _, body = request(server, "GET", "/missing")

        assert status == 404
        assert body.startswith(b"404")

    def test_directory_without_index(self, server):
        status, _, _ = request(server, "GET", "/css/")

        assert status == 404


class TestConditionalAndMethods:
    """If-Modified-Since, HEAD and rejected methods."""

    def test_not_modified(self, server):
        headers = {"If-Modified-Since": formatdate(MTIME_S, usegmt=True)}

        status, _, body = request(server, "GET", "/b.bin", headers)

        assert status == 304
        assert body == b""

    def test_modified(self, server):
        headers = {"If-Modified-Since": formatdate(MTIME_S - 3600, usegmt=True)}

        status, _, body = request(server, "GET", "/b.bin", headers)

        assert status == 200
        assert body == b"\x00\xff"

    def test_unparseable_if_modified_since(self, server):
        status, _, _ = request(server, "GET", "/b.bin", {"If-Modified-Since": "yesterday"})

        assert status == 200

    def test_head_has_headers_no_body(self, server):
        status, response, body = request(server, "HEAD", "/index.html")

        assert status == 200
        assert body == b""
        assert response.getheader("Content-Length") == "13"

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH"])
    def test_write_methods_rejected(self, server, method):
        status, response, _ = request(server, method, "/index.html")

        assert status == 405
        assert response.getheader("Allow") == "GET, HEAD"
