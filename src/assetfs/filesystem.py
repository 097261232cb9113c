# ============================================================================
# SOURCEFILE: filesystem.py
# RELPATH: assetfs/src/assetfs/filesystem.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Read-only virtual filesystem over an embedded FileTable
# ============================================================================

"""
Virtual filesystem.

``FileSystem.open(path)`` returns a ``File``: a read-only, seekable handle
over one embedded record. Handles never share cursor state and the table is
never modified, so any number of threads may open and read concurrently.

Directory paths (anything ending in ``/``) open as empty directory handles
so that a request for ``/`` does not fail; directories cannot be listed.
"""

from __future__ import annotations

import io
from enum import Enum
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple

from assetfs.exceptions import FileNotExistError
from assetfs.models import FileInfo


class PathKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


def parse_path(path: str) -> Tuple[PathKind, str]:
    """
    Classify a request path and normalize it to a table key.

    A leading '/' is added when missing. Paths ending in '/' are directory
    paths; everything else is a file path.

    Raises:
        TypeError: If path is not a string
    """
    if not isinstance(path, str):
        raise TypeError(f"path must be str, not {type(path).__name__}")
    if not path.startswith("/"):
        path = "/" + path
    if path.endswith("/"):
        return PathKind.DIRECTORY, path
    return PathKind.FILE, path


def _dir_name(key: str) -> str:
    stripped = key.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


class File(io.RawIOBase):
    """
    Open handle on one embedded file.

    Reading and seeking work like any binary file object. ``stat()`` returns
    the record itself; ``readdir()`` is always empty. Closing releases
    nothing, it only marks the handle closed.
    """

    def __init__(self, info: FileInfo):
        super().__init__()
        self._info = info
        self._reader = io.BytesIO(info.to_bytes())

    # -- metadata ---------------------------------------------------------

    @property
    def name(self) -> str:
        return self._info.name

    @property
    def mode(self) -> int:
        return self._info.mode

    @property
    def size(self) -> int:
        return self._info.size

    @property
    def mod_time(self) -> int:
        return self._info.mod_time

    def is_dir(self) -> bool:
        return self._info.is_dir()

    def stat(self) -> FileInfo:
        return self._info

    def readdir(self, count: int = -1) -> List[FileInfo]:
        """Directory listing is not supported; always empty."""
        return []

    # -- io.RawIOBase -------------------------------------------------------

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def write(self, data) -> int:
        raise io.UnsupportedOperation("write")

    def readinto(self, buffer) -> int:
        self._check_open()
        return self._reader.readinto(buffer)

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        return self._reader.read(size)

    def readall(self) -> bytes:
        self._check_open()
        return self._reader.read()

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        if whence not in (io.SEEK_SET, io.SEEK_CUR, io.SEEK_END):
            raise ValueError(f"invalid whence ({whence})")
        if whence == io.SEEK_CUR:
            offset += self._reader.tell()
        elif whence == io.SEEK_END:
            offset += self.size
        if offset < 0:
            raise ValueError(f"negative seek position {offset}")
        return self._reader.seek(offset, io.SEEK_SET)

    def tell(self) -> int:
        self._check_open()
        return self._reader.tell()

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed file.")

    def close(self) -> None:
        if not self.closed:
            self._reader.close()
        super().close()

    def __repr__(self) -> str:
        return f"<assetfs.File name={self.name!r} size={self.size} closed={self.closed}>"


class FileSystem:
    """
    Read-only filesystem over an embedded table.

    Args:
        content: Mapping of root-relative keys ('/dir/file.txt') to FileInfo
    """

    def __init__(self, content: Optional[Mapping[str, FileInfo]] = None):
        table = dict(content or {})
        for key, info in table.items():
            if not isinstance(key, str) or not key.startswith("/"):
                raise ValueError(f"Invalid key {key!r}: keys must start with '/'")
            if not isinstance(info, FileInfo):
                raise TypeError(f"Entry {key!r} is not a FileInfo")
        self._content: Mapping[str, FileInfo] = MappingProxyType(table)

    @property
    def content(self) -> Mapping[str, FileInfo]:
        """Read-only view of the table."""
        return self._content

    def open(self, path: str) -> File:
        """
        Open ``path`` for reading.

        Returns:
            A new File handle with its own cursor

        Raises:
            FileNotExistError: If the path is not in the table
        """
        kind, key = parse_path(path)
        if kind is PathKind.DIRECTORY:
            return File(FileInfo.directory(_dir_name(key)))
        info = self._content.get(key)
        if info is None:
            raise FileNotExistError(key)
        return File(info)

    def stat(self, path: str) -> FileInfo:
        with self.open(path) as f:
            return f.stat()

    def exists(self, path: str) -> bool:
        kind, key = parse_path(path)
        return kind is PathKind.DIRECTORY or key in self._content

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.exists(path)

    def __len__(self) -> int:
        return len(self._content)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._content))

    def __repr__(self) -> str:
        return f"<assetfs.FileSystem files={len(self._content)}>"

