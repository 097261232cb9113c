# ============================================================================
# SOURCEFILE: server.py
# RELPATH: assetfs/src/assetfs/server.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Serves a FileSystem over HTTP with the standard library server
# ============================================================================

"""
Static file server over an embedded FileSystem.

The handler only ever talks to ``FileSystem.open`` and the returned handle,
so it works with any generated module. Directory requests serve
``index.html`` when present; there are no directory listings.
"""

from __future__ import annotations

import logging
import mimetypes
import shutil
from email.utils import formatdate, parsedate_to_datetime
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional, Type
from urllib.parse import unquote, urlparse

from assetfs.exceptions import FileNotExistError
from assetfs.filesystem import File, FileSystem
from assetfs.models import NANOS_PER_SECOND

log = logging.getLogger(__name__)

INDEX_NAME = "index.html"


class AssetRequestHandler(BaseHTTPRequestHandler):
    """GET/HEAD handler backed by a FileSystem set on the subclass."""

    filesystem: FileSystem
    protocol_version = "HTTP/1.1"
    server_version = "assetfs"

    def do_GET(self) -> None:  # noqa: N802
        self._serve(send_body=True)

    def do_HEAD(self) -> None:  # noqa: N802
        self._serve(send_body=False)

    def do_POST(self) -> None:  # noqa: N802
        self._send_status(HTTPStatus.METHOD_NOT_ALLOWED, {"Allow": "GET, HEAD"})

    do_PUT = do_POST
    do_DELETE = do_POST
    do_PATCH = do_POST

    def _open(self, path: str) -> File:
        f = self.filesystem.open(path)
        if not f.is_dir():
            return f
        f.close()
        return self.filesystem.open(path + INDEX_NAME)

    def _serve(self, send_body: bool) -> None:
        path = unquote(urlparse(self.path).path) or "/"
        try:
            f = self._open(path)
        except FileNotExistError:
            self._send_status(HTTPStatus.NOT_FOUND)
            return

        with f:
            last_modified = f.mod_time // NANOS_PER_SECOND
            if self._not_modified_since(last_modified):
                self._send_status(HTTPStatus.NOT_MODIFIED)
                return

            content_type = mimetypes.guess_type(f.name)[0] or "application/octet-stream"
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(f.size))
            self.send_header("Last-Modified", formatdate(last_modified, usegmt=True))
            self.end_headers()
            if send_body:
                try:
                    shutil.copyfileobj(f, self.wfile)
                except (BrokenPipeError, ConnectionResetError) as e:
                    log.debug("client went away while sending %s: %s", path, e)

    def _not_modified_since(self, last_modified: int) -> bool:
        header = self.headers.get("If-Modified-Since")
        if not header:
            return False
        try:
            since = parsedate_to_datetime(header)
        except (TypeError, ValueError):
            return False
        if since is None:
            return False
        return last_modified <= int(since.timestamp())

    def _send_status(self, status: HTTPStatus, headers: Optional[dict] = None) -> None:
        body = b"" if status == HTTPStatus.NOT_MODIFIED else f"{status.value} {status.phrase}\n".encode("ascii")
        self.send_response(status)
        if body:
            self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        for key, value in (headers or {}).items():
            self.send_header(key, value)
        self.end_headers()
        if body and self.command != "HEAD":
            self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:
        log.info("%s - %s", self.address_string(), format % args)


def make_handler(fs: FileSystem) -> Type[AssetRequestHandler]:
    """Return a handler class bound to ``fs``."""
    return type("BoundAssetRequestHandler", (AssetRequestHandler,), {"filesystem": fs})


def make_server(fs: FileSystem, host: str = "127.0.0.1", port: int = 12345) -> ThreadingHTTPServer:
    server = ThreadingHTTPServer((host, port), make_handler(fs))
    server.daemon_threads = True
    return server


def serve(fs: FileSystem, host: str = "127.0.0.1", port: int = 12345) -> None:
    """Serve ``fs`` until interrupted."""
    server = make_server(fs, host, port)
    print(f"assetfs serving {len(fs)} files on http://{host}:{server.server_address[1]}")
    try:
        server.serve_forever(poll_interval=0.5)
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
