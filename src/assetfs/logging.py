# ============================================================================
# SOURCEFILE: logging.py
# RELPATH: assetfs/src/assetfs/logging.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Structured JSON logging for generation runs and diagnostics
# ============================================================================

"""
Structured Logging Module.

Provides JSON-lines logging for generation runs so that builds can be audited
and inspected by tests. Library modules still use ``logging.getLogger`` for
plain diagnostics; this module adds the session log on top.
"""

from __future__ import annotations

import io
import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


def _ensure_stream_utf8(stream: Optional[io.TextIOBase]) -> Optional[io.TextIOBase]:
    """Ensure a text stream writes UTF-8, wrapping if necessary."""
    if stream is None:
        return None

    encoding = getattr(stream, "encoding", None)
    if isinstance(encoding, str) and encoding.lower() in ("utf-8", "utf8"):
        return stream

    reconfigure = getattr(stream, "reconfigure", None)
    if callable(reconfigure):
        try:
            reconfigure(encoding="utf-8", errors="backslashreplace")
            return stream
        except (ValueError, io.UnsupportedOperation):
            pass

    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        return stream

    stream.flush()
    return io.TextIOWrapper(buffer, encoding="utf-8", errors="backslashreplace")


def configure_utf8_logging(force: bool = False) -> None:
    """Configure stdout/stderr and root logger handlers for UTF-8 output.

    Paths in embedded trees can contain any character; consoles that default
    to a legacy code page would otherwise fail while printing them. Safe to
    call multiple times.
    """

    streams: Iterable[str] = ("stdout", "stderr")
    for name in streams:
        stream = getattr(sys, name, None)
        if stream is None:
            continue

        new_stream = _ensure_stream_utf8(stream)
        if new_stream is not None and new_stream is not stream:
            setattr(sys, name, new_stream)

    root = logging.getLogger()
    if force and not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)

    for handler in root.handlers:
        stream = getattr(handler, "stream", None)
        if stream is None:
            continue
        new_stream = _ensure_stream_utf8(stream)
        if new_stream is not None and new_stream is not stream:
            handler.setStream(new_stream)


class LogEvent(Enum):
    """Enumeration of loggable events."""
    OPERATION_START = "operation_start"
    OPERATION_COMPLETE = "operation_complete"
    FILE_PROCESSED = "file_processed"
    WARNING = "warning"
    ERROR = "error"


class StructuredLogger:
    """
    JSON-structured logger for generation runs.

    Every entry has the shape ``{"sessionId", "timestamp", "event", "details"}``
    and is appended as one line to the session file and to ``log_buffer``.
    """

    def __init__(self, log_dir: str = "logs", session_id: Optional[str] = None):
        """
        Initialize structured logger.

        Args:
            log_dir: Directory for log files
            session_id: Optional session ID (generated if not provided)
        """
        self.log_dir = Path(log_dir)
        self.session_id = session_id or str(uuid.uuid4())
        self.start_time = datetime.now(timezone.utc)

        timestamp = self.start_time.strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"assetfs_session_{timestamp}_{self.session_id[:8]}.json"
        self._ensure_log_file_exists()

        self.log_buffer: List[Dict] = []

    def _ensure_log_file_exists(self) -> None:
        """Create the log directory and touch the session file. Never raises."""
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.log_file.touch(exist_ok=True)
        except OSError as e:
            logging.getLogger(__name__).warning("Cannot create log file %s: %s", self.log_file, e)

    def log_operation_start(self, operation: str, source: str, destination: str,
                            identifier: Optional[str] = None) -> None:
        """
        Log the start of an operation.

        Args:
            operation: Operation name ("generate", "serve", ...)
            source: Source directory or module path
            destination: Output path or listen address
            identifier: Name bound in the generated module, if any
        """
        entry = self._create_log_entry(
            event=LogEvent.OPERATION_START,
            details={
                "operation": operation,
                "source": source,
                "destination": destination,
                "identifier": identifier,
            }
        )
        self._write_log_entry(entry)

    def log_operation_complete(self,
                               operation: str,
                               source: str,
                               destination: str,
                               files: int,
                               text_files: int,
                               byte_files: int,
                               total_bytes: int,
                               elapsed_ms: int) -> None:
        """
        Log successful completion of an operation.

        Args:
            operation: Operation name
            source: Source path
            destination: Destination path
            files: Number of embedded files
            text_files: Files stored as text
            byte_files: Files stored as raw bytes
            total_bytes: Sum of file sizes
            elapsed_ms: Duration in milliseconds
        """
        entry = self._create_log_entry(
            event=LogEvent.OPERATION_COMPLETE,
            details={
                "operation": operation,
                "source": source,
                "destination": destination,
                "counts": {
                    "files": files,
                    "text": text_files,
                    "bytes": byte_files,
                },
                "totalBytes": total_bytes,
                "elapsedMs": elapsed_ms,
            }
        )
        self._write_log_entry(entry)

    def log_file_processed(self, key: str, kind: str, size_bytes: int, mode: int) -> None:
        """
        Log one embedded file.

        Args:
            key: Root-relative table key
            kind: Content representation ("text" or "bytes")
            size_bytes: File size
            mode: st_mode bits
        """
        entry = self._create_log_entry(
            event=LogEvent.FILE_PROCESSED,
            details={
                "key": key,
                "kind": kind,
                "sizeBytes": size_bytes,
                "mode": oct(mode),
            }
        )
        self._write_log_entry(entry)

    def log_warning(self, message: str, context: Optional[Dict] = None) -> None:
        entry = self._create_log_entry(
            event=LogEvent.WARNING,
            details={
                "message": message,
                "context": context or {},
            }
        )
        self._write_log_entry(entry)

    def log_error(self, operation: str, source: str, error: BaseException,
                  file_path: Optional[str] = None) -> None:
        """
        Log an error that aborted an operation.

        Args:
            operation: Operation name
            source: Source path
            error: The exception raised
            file_path: Specific file that caused the error (if known)
        """
        entry = self._create_log_entry(
            event=LogEvent.ERROR,
            details={
                "operation": operation,
                "source": source,
                "errorMessage": str(error),
                "errorType": type(error).__name__,
                "filePath": file_path,
            }
        )
        self._write_log_entry(entry)

    def _create_log_entry(self, event: LogEvent, details: Dict[str, Any]) -> Dict:
        return {
            "sessionId": self.session_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event": event.value,
            "details": details,
        }

    def _write_log_entry(self, entry: Dict) -> None:
        """Append entry to the buffer and the session file."""
        self.log_buffer.append(entry)

        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as e:
            # Log write failure must not fail the build
            print(f"Warning: Failed to write log entry: {e}", file=sys.stderr)

    def get_session_logs(self) -> List[Dict]:
        return list(self.log_buffer)

    def export_session_summary(self) -> Dict:
        """
        Export session summary statistics.

        Returns:
            Summary dictionary with counts per event type
        """
        summary = {
            "sessionId": self.session_id,
            "startTime": self.start_time.isoformat(),
            "endTime": datetime.now(timezone.utc).isoformat(),
            "totalEvents": len(self.log_buffer),
            "eventCounts": {},
        }

        for entry in self.log_buffer:
            event_type = entry["event"]
            summary["eventCounts"][event_type] = summary["eventCounts"].get(event_type, 0) + 1

        return summary


# ============================================================================
# Global Logger Instance
# ============================================================================

_global_logger: Optional[StructuredLogger] = None


def get_logger(log_dir: str = "logs") -> StructuredLogger:
    """Return the process-wide logger, creating it on first use."""
    global _global_logger
    if _global_logger is None:
        _global_logger = StructuredLogger(log_dir)
    return _global_logger


def new_session(log_dir: str = "logs") -> StructuredLogger:
    """Start a new logging session and make it the process-wide logger."""
    global _global_logger
    _global_logger = StructuredLogger(log_dir)
    return _global_logger
