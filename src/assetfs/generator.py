# ============================================================================
# SOURCEFILE: generator.py
# RELPATH: assetfs/src/assetfs/generator.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Renders a FileTable as a Python module and writes it atomically
# ============================================================================

"""
Code generator.

``generate()`` walks a source directory, renders the resulting table as a
Python module that binds one identifier to a ``FileSystem``, and moves the
module into place only once it has been written completely.

The rendered text depends only on the table: keys are emitted in sorted
order and nothing about the run itself (time, host, absolute paths) is
written, so an unchanged tree always produces the same bytes.
"""

from __future__ import annotations

import importlib.util
import keyword
import logging
import os
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from assetfs.builder import TableBuilder
from assetfs.exceptions import AssetFSError, GenerateError, ModuleLoadError, OutputWriteError
from assetfs.filesystem import FileSystem
from assetfs.logging import StructuredLogger
from assetfs.models import ByteData, FileInfo, FileTable, StringData, sorted_items

log = logging.getLogger(__name__)

HEADER = "# Code generated by assetfs. DO NOT EDIT."

# Maximum characters of text / bytes of raw content per literal line.
TEXT_CHUNK = 64
BYTES_CHUNK = 24

INDENT = "    "


@dataclass
class GenerateResult:
    """Summary of one generate() run."""
    out: Path
    identifier: str
    file_count: int
    text_count: int
    byte_count: int
    total_bytes: int


# ============================================================================
# Validation
# ============================================================================

def validate_identifier(identifier: str) -> None:
    """Raise GenerateError unless ``identifier`` can be bound in a module."""
    if not isinstance(identifier, str) or not identifier.isidentifier():
        raise GenerateError("identifier", identifier, "not a valid Python identifier")
    if keyword.iskeyword(identifier):
        raise GenerateError("identifier", identifier, "is a Python keyword")


def validate_package(package: Optional[str]) -> None:
    """Package names are optional; when given they must be dotted identifiers."""
    if package is None or package == "":
        return
    for part in str(package).split("."):
        if not part.isidentifier() or keyword.iskeyword(part):
            raise GenerateError("package", package, "not a valid dotted module name")


# ============================================================================
# Rendering
# ============================================================================

def _text_chunks(text: str) -> List[str]:
    """Split text at line ends, then long lines at TEXT_CHUNK characters."""
    chunks: List[str] = []
    for line in text.splitlines(keepends=True):
        for start in range(0, len(line), TEXT_CHUNK):
            chunks.append(line[start:start + TEXT_CHUNK])
    return chunks


def _render_data(data: Union[StringData, ByteData], indent: str) -> str:
    if isinstance(data, StringData):
        chunks = [repr(chunk) for chunk in _text_chunks(data.text)]
        ctor = "StringData"
        empty = '""'
    else:
        raw = data.raw
        chunks = [repr(raw[start:start + BYTES_CHUNK]) for start in range(0, len(raw), BYTES_CHUNK)]
        ctor = "ByteData"
        empty = 'b""'

    if not chunks:
        return f"{ctor}({empty})"
    if len(chunks) == 1:
        return f"{ctor}({chunks[0]})"

    inner = indent + INDENT
    body = "\n".join(inner + chunk for chunk in chunks)
    return f"{ctor}(\n{body}\n{indent})"


def render_record(info: FileInfo, indent: str = INDENT * 2) -> str:
    """Render one FileInfo as a constructor call."""
    field_indent = indent + INDENT
    lines = [
        "FileInfo(",
        f"{field_indent}name={info.name!r},",
        f"{field_indent}mode=0o{info.mode:o},",
        f"{field_indent}size={info.size},",
        f"{field_indent}mod_time={info.mod_time},",
        f"{field_indent}data={_render_data(info.data, field_indent)},",
        f"{indent})",
    ]
    return "\n".join(lines)


def render_module(identifier: str, table: FileTable, package: Optional[str] = None) -> str:
    """
    Render the complete generated module.

    Args:
        identifier: Name bound to the FileSystem
        table: The table to embed
        package: Informational package name written into the header

    Returns:
        Module source text, ending with a newline
    """
    validate_identifier(identifier)
    validate_package(package)

    items = sorted_items(table)
    kinds = {info.kind for _, info in items}

    out: List[str] = [HEADER]
    if package:
        out.append(f"# package: {package}")
    out.append("")
    out.append(f'"""Embedded filesystem ``{identifier}`` ({len(items)} files)."""')
    out.append("")
    out.append("from assetfs.filesystem import FileSystem")
    model_names = []
    if "bytes" in kinds:
        model_names.append("ByteData")
    if items:
        model_names.append("FileInfo")
    if "text" in kinds:
        model_names.append("StringData")
    if model_names:
        out.append(f"from assetfs.models import {', '.join(model_names)}")
    out.append("")
    out.append(f"__all__ = [{identifier!r}]")
    out.append("")

    if not items:
        out.append(f"{identifier} = FileSystem({{}})")
        return "\n".join(out) + "\n"

    out.append(f"{identifier} = FileSystem({{")
    for key, info in items:
        out.append(f"{INDENT}{key!r}: {render_record(info, INDENT)},")
    out.append("})")
    return "\n".join(out) + "\n"


# ============================================================================
# Output
# ============================================================================

def write_atomic(out: Union[str, Path], text: str) -> Path:
    """
    Write ``text`` to ``out`` through a temporary file and a rename.

    The temporary file lives next to ``out`` (``<out>.tmp``) so the rename
    never crosses filesystems. Whatever happens, the temporary file is gone
    when this returns, and ``out`` is either the old file or the new one.

    Raises:
        OutputWriteError: On any write, flush or rename failure.
    """
    out = Path(out)
    tmp = out.with_name(out.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, out)
    except OSError as e:
        raise OutputWriteError(str(out), e.strerror or str(e)) from e
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError as e:
                log.warning("could not remove temporary file %s: %s", tmp, e)
    return out


def generate(identifier: str,
             out: Union[str, Path],
             directory: Union[str, Path],
             package: Optional[str] = None,
             *,
             logger: Optional[StructuredLogger] = None) -> GenerateResult:
    """
    Walk ``directory`` and write a module binding ``identifier`` to it.

    Args:
        identifier: Name of the FileSystem variable in the generated module
        out: Output file path
        directory: Source directory (becomes the filesystem root)
        package: Package name recorded in the module header
        logger: Optional session logger

    Returns:
        GenerateResult with counts

    Raises:
        GenerateError: Invalid identifier or package
        BuildError: The source tree could not be read; nothing is written
        OutputWriteError: The module could not be written
    """
    validate_identifier(identifier)
    validate_package(package)

    out = Path(out)
    started = time.monotonic()
    if logger is not None:
        logger.log_operation_start("generate", str(directory), str(out), identifier)

    try:
        table = TableBuilder(directory, logger=logger).build()
        text = render_module(identifier, table, package)
        write_atomic(out, text)
    except AssetFSError as e:
        log.error("generate %s failed: %s", out, e)
        if logger is not None:
            logger.log_error("generate", str(directory), e, getattr(e, "path", None))
        raise

    text_count = sum(1 for info in table.values() if info.kind == "text")
    result = GenerateResult(
        out=out,
        identifier=identifier,
        file_count=len(table),
        text_count=text_count,
        byte_count=len(table) - text_count,
        total_bytes=sum(info.size for info in table.values()),
    )
    if logger is not None:
        logger.log_operation_complete(
            "generate", str(directory), str(out),
            files=result.file_count,
            text_files=result.text_count,
            byte_files=result.byte_count,
            total_bytes=result.total_bytes,
            elapsed_ms=int((time.monotonic() - started) * 1000),
        )
    log.info("wrote %s: %d files, %d bytes", out, result.file_count, result.total_bytes)
    return result


def load_module(path: Union[str, Path], identifier: str = "assets") -> FileSystem:
    """
    Import a generated module from ``path`` and return its FileSystem.

    Raises:
        ModuleLoadError: If the file cannot be imported or does not bind
                         ``identifier`` to a FileSystem.
    """
    path = Path(path)
    if not path.is_file():
        raise ModuleLoadError(str(path), "file not found")

    module_name = f"_assetfs_generated_{uuid.uuid4().hex}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ModuleLoadError(str(path), "not an importable Python file")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ModuleLoadError(str(path), f"{type(e).__name__}: {e}") from e

    fs = getattr(module, identifier, None)
    if not isinstance(fs, FileSystem):
        raise ModuleLoadError(str(path), f"no FileSystem named '{identifier}'")
    return fs
