# ============================================================================
# SOURCEFILE: models.py
# RELPATH: assetfs/src/assetfs/models.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: File records, content representations and timestamp helpers
# ============================================================================

"""
Core data models for embedded files.

A FileInfo is one embedded file: its metadata plus its content. Content is
held through one of two interchangeable representations:

    StringData  - the bytes are valid UTF-8 with no NUL, kept as ``str`` so
                  the generated module stays readable
    ByteData    - anything else, kept as ``bytes``

Both expose ``to_bytes()`` and nothing else is needed from them at runtime.
"""

from __future__ import annotations

import stat
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple, Union

# Unix epoch, the zero point for FileInfo.mod_time (nanoseconds).
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Seconds between 0001-01-01T00:00:00Z and the Unix epoch. Older artifacts
# stored timestamps relative to year one; subtract this to get Unix seconds.
GO_UNIX_OFFSET_SECONDS = 62135596800

NANOS_PER_SECOND = 1_000_000_000

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class StringData:
    """Text-safe content: bytes that survive a strict UTF-8 round trip."""
    text: str

    kind = "text"

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise TypeError(f"StringData requires str, got {type(self.text).__name__}")

    def to_bytes(self) -> bytes:
        return self.text.encode("utf-8")


@dataclass(frozen=True)
class ByteData:
    """Raw content for everything that is not text-safe."""
    raw: bytes

    kind = "bytes"

    def __post_init__(self) -> None:
        if isinstance(self.raw, bytearray):
            object.__setattr__(self, "raw", bytes(self.raw))
        elif not isinstance(self.raw, bytes):
            raise TypeError(f"ByteData requires bytes, got {type(self.raw).__name__}")

    def to_bytes(self) -> bytes:
        return self.raw


FileData = Union[StringData, ByteData]


def classify(data: bytes) -> FileData:
    """
    Pick the content representation for ``data``.

    The bytes are decoded as strict UTF-8 and encoded again; when that
    reproduces them exactly and there is no NUL byte, the text variant is
    used. Otherwise the raw variant is used.

    Args:
        data: File content

    Returns:
        StringData or ByteData wrapping the same bytes
    """
    data = bytes(data)
    if b"\x00" in data:
        return ByteData(data)
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return ByteData(data)
    if text.encode("utf-8") != data:
        return ByteData(data)
    return StringData(text)


# ============================================================================
# Timestamp helpers
# ============================================================================

def to_unix_nanos(value: Union[datetime, int, float]) -> int:
    """
    Convert a datetime or a Unix timestamp in seconds to nanoseconds.

    Naive datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - EPOCH
        return (delta.days * 86400 + delta.seconds) * NANOS_PER_SECOND + delta.microseconds * 1000
    if isinstance(value, int):
        return value * NANOS_PER_SECOND
    return int(round(value * NANOS_PER_SECOND))


def from_year_one_seconds(sec: int, nsec: int = 0) -> int:
    """Convert a (seconds since 0001-01-01, nanoseconds) pair to Unix nanoseconds."""
    return (sec - GO_UNIX_OFFSET_SECONDS) * NANOS_PER_SECOND + nsec


def nanos_to_datetime(nanos: int) -> datetime:
    """Convert Unix nanoseconds to an aware UTC datetime (microsecond precision)."""
    return EPOCH + timedelta(microseconds=nanos // 1000)


# ============================================================================
# File record
# ============================================================================

@dataclass(frozen=True)
class FileInfo:
    """
    One embedded file.

    Attributes:
        name: Base filename
        mode: Permission and type bits, as in ``os.stat_result.st_mode``
        size: Length of the content in bytes
        mod_time: Modification time in nanoseconds since the Unix epoch
        data: Content (StringData or ByteData); None only for directory records
    """
    name: str
    mode: int
    size: int
    mod_time: int
    data: Optional[FileData] = None

    def __post_init__(self) -> None:
        """Validate fields; a record is never mutated after this."""
        if not isinstance(self.name, str):
            raise TypeError("FileInfo name must be a string")
        if "/" in self.name.strip("/"):
            raise ValueError(f"FileInfo name must be a base name: {self.name!r}")

        if not isinstance(self.size, int) or self.size < 0:
            raise ValueError(f"Invalid size: {self.size}. Must be non-negative integer")

        if not isinstance(self.mod_time, int) or not _INT64_MIN <= self.mod_time <= _INT64_MAX:
            raise ValueError(f"Invalid mod_time: {self.mod_time}. Must fit in a signed 64-bit integer")

        if self.data is None:
            if not self.is_dir():
                raise ValueError(f"Regular file record '{self.name}' has no data")
            if self.size != 0:
                raise ValueError("Directory records have size 0")
            return

        if not isinstance(self.data, (StringData, ByteData)):
            raise TypeError(f"Unsupported data type: {type(self.data).__name__}")

        actual = len(self.data.to_bytes())
        if actual != self.size:
            raise ValueError(f"Size mismatch for '{self.name}': size={self.size}, content={actual} bytes")

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mode: int = stat.S_IFREG | 0o644,
                   mod_time: int = 0) -> "FileInfo":
        """Build a regular-file record, classifying the content."""
        content = classify(data)
        return cls(name=name, mode=mode, size=len(data), mod_time=mod_time, data=content)

    @classmethod
    def directory(cls, name: str) -> "FileInfo":
        """Contentless directory record."""
        return cls(name=name, mode=stat.S_IFDIR | 0o555, size=0, mod_time=0)

    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def kind(self) -> str:
        """'text', 'bytes' or 'dir'."""
        if self.data is None:
            return "dir"
        return self.data.kind

    def to_bytes(self) -> bytes:
        if self.data is None:
            return b""
        return self.data.to_bytes()

    def mod_time_datetime(self) -> datetime:
        return nanos_to_datetime(self.mod_time)

    def perm(self) -> int:
        """Permission bits only."""
        return stat.S_IMODE(self.mode)

    def sys(self):
        """Underlying data source; always None for embedded files."""
        return None


FileTable = Dict[str, FileInfo]


def sorted_items(table: FileTable) -> List[Tuple[str, FileInfo]]:
    """Entries of ``table`` in key order, as emitted by the generator."""
    return sorted(table.items(), key=lambda item: item[0])
