# ============================================================================
# SOURCEFILE: builder.py
# RELPATH: assetfs/src/assetfs/builder.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Walks a source directory and builds the path -> FileInfo table
# ============================================================================

"""
Table builder.

Walks a directory recursively and produces a FileTable with one entry per
regular file. Symlinks to files are followed, symlinks to directories are
not. Any error aborts the whole build.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import List, Optional, Union

from assetfs.exceptions import SourceDirectoryError, TableBuildError
from assetfs.logging import StructuredLogger
from assetfs.models import FileInfo, FileTable, classify

log = logging.getLogger(__name__)


class TableBuilder:
    """Builds a FileTable from a source directory."""

    def __init__(self, root: Union[str, Path], logger: Optional[StructuredLogger] = None):
        """
        Args:
            root: Directory whose contents become the table. Its own path is
                  stripped from every key.
            logger: Optional session logger; receives one event per file.
        """
        self.root = Path(os.path.normpath(os.fspath(root)))
        self.logger = logger
        self.skipped: List[str] = []

    def build(self) -> FileTable:
        """
        Walk the root and return the table, keys in sorted order.

        Raises:
            SourceDirectoryError: If the root is missing or not a directory.
            TableBuildError: If any file or directory cannot be read.
        """
        if not self.root.exists():
            raise SourceDirectoryError(str(self.root), "Source path does not exist")
        if not self.root.is_dir():
            raise SourceDirectoryError(str(self.root), "Source path is not a directory")

        self.skipped = []
        content: FileTable = {}

        # followlinks=False: os.walk lists symlinks to directories in `dirnames`
        # but does not descend into them.
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=self._raise_walk_error,
                                                    followlinks=False):
            dirnames.sort()
            for filename in sorted(filenames):
                path = os.path.join(dirpath, filename)
                info = self._read_file(path, filename)
                if info is None:
                    continue
                key = self._key_for(path)
                content[key] = info
                log.debug("embedded %s (%s, %d bytes)", key, info.kind, info.size)
                if self.logger is not None:
                    self.logger.log_file_processed(key, info.kind, info.size, info.mode)

        return {key: content[key] for key in sorted(content)}

    def _read_file(self, path: str, name: str) -> Optional[FileInfo]:
        """
        Stat (following links) and read one walked entry.

        Returns None for entries that are not regular files after following
        links: sockets, FIFOs, devices, and symlinks to directories that
        os.walk reports as files on some platforms.
        """
        try:
            st = os.stat(path)
        except OSError as e:
            raise TableBuildError(path, f"stat failed: {e.strerror or e}") from e

        if stat.S_ISDIR(st.st_mode):
            return None
        if not stat.S_ISREG(st.st_mode):
            self._skip(path, f"not a regular file (mode {oct(st.st_mode)})")
            return None

        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise TableBuildError(path, f"read failed: {e.strerror or e}") from e

        if len(data) != st.st_size:
            raise TableBuildError(
                path, f"file changed while reading (stat size {st.st_size}, read {len(data)} bytes)"
            )

        return FileInfo(
            name=name,
            mode=st.st_mode,
            size=len(data),
            mod_time=st.st_mtime_ns,
            data=classify(data),
        )

    def _key_for(self, path: str) -> str:
        """Root-relative key with a leading '/' and '/' separators."""
        rel = os.path.relpath(path, self.root)
        return "/" + Path(rel).as_posix()

    def _skip(self, path: str, reason: str) -> None:
        self.skipped.append(path)
        log.warning("skipping %s: %s", path, reason)
        if self.logger is not None:
            self.logger.log_warning(f"Skipped {path}", {"reason": reason})

    @staticmethod
    def _raise_walk_error(error: OSError) -> None:
        raise TableBuildError(error.filename or "?", f"traversal failed: {error.strerror or error}") from error


def build_table(root: Union[str, Path], logger: Optional[StructuredLogger] = None) -> FileTable:
    """Convenience wrapper around TableBuilder(root).build()."""
    return TableBuilder(root, logger=logger).build()
