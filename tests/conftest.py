# ============================================================================
# FILE: conftest.py
# RELPATH: assetfs/tests/conftest.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Pytest fixtures for the assetfs test suite
# ============================================================================

"""
Pytest configuration and shared fixtures.

Provides sample source trees on disk, prebuilt records and a helper for
creating symlinks on platforms that allow it.
"""

import os
import shutil
import stat
import sys
import tempfile
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from assetfs.filesystem import FileSystem
from assetfs.models import FileInfo, classify

# 2023-11-14T22:13:20Z, used to pin mtimes so generated output is reproducible
FIXED_MTIME_NS = 1_700_000_000_000_000_000

SRC_DIR = Path(__file__).resolve().parent.parent / "src"


# ============================================================================
# Filesystem Fixtures
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test file operations."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


def pin_mtimes(root: Path, mtime_ns: int = FIXED_MTIME_NS) -> None:
    """Set every file under root to the same mtime."""
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            if not os.path.islink(path):
                os.utime(path, ns=(mtime_ns, mtime_ns))


@pytest.fixture
def minimal_tree(temp_dir):
    """
    The two-file tree from the end-to-end scenario.

    Structure:
        a.txt   "hi"
        b.bin   00 FF
    """
    root = temp_dir / "assets"
    root.mkdir()
    (root / "a.txt").write_bytes(b"hi")
    (root / "b.bin").write_bytes(bytes([0x00, 0xFF]))
    pin_mtimes(root)
    yield root


@pytest.fixture
def sample_tree(temp_dir):
    """
    A small site with nested directories and mixed content.

    Structure:
        index.html
        css/site.css
        js/app.js
        img/logo.png        (binary)
        docs/readme.md      (non-ASCII UTF-8)
        docs/empty.txt      (zero bytes)
        data/latin1.txt     (not valid UTF-8)
        data/nul.txt        (ASCII with a NUL byte)
    """
    root = temp_dir / "site"
    for sub in ("css", "js", "img", "docs", "data"):
        (root / sub).mkdir(parents=True)

    (root / "index.html").write_bytes(b"<!doctype html>\n<title>Test</title>\n<h1>Hello</h1>\n")
    (root / "css" / "site.css").write_bytes(b"body { margin: 0; }\r\nh1 { color: #333; }\r\n")
    (root / "js" / "app.js").write_bytes(b"console.log('hi');\n")
    (root / "img" / "logo.png").write_bytes(bytes.fromhex("89504e470d0a1a0a0000000d49484452"))
    (root / "docs" / "readme.md").write_bytes("# Café ☃\n\nSnowman inside.\n".encode("utf-8"))
    (root / "docs" / "empty.txt").write_bytes(b"")
    (root / "data" / "latin1.txt").write_bytes("café\n".encode("latin-1"))
    (root / "data" / "nul.txt").write_bytes(b"abc\x00def")
    pin_mtimes(root)
    yield root


def try_symlink(target, link, target_is_directory=False):
    """Create a symlink or skip the test where symlinks are unavailable."""
    try:
        os.symlink(target, link, target_is_directory=target_is_directory)
    except (OSError, NotImplementedError) as e:
        pytest.skip(f"symlinks not supported here: {e}")


# ============================================================================
# Record Fixtures
# ============================================================================

@pytest.fixture
def text_record():
    return FileInfo(
        name="a.txt",
        mode=stat.S_IFREG | 0o644,
        size=2,
        mod_time=FIXED_MTIME_NS,
        data=classify(b"hi"),
    )


@pytest.fixture
def binary_record():
    return FileInfo(
        name="b.bin",
        mode=stat.S_IFREG | 0o600,
        size=2,
        mod_time=FIXED_MTIME_NS,
        data=classify(bytes([0x00, 0xFF])),
    )


@pytest.fixture
def sample_fs(text_record, binary_record):
    """FileSystem holding /a.txt and /sub/b.bin."""
    return FileSystem({
        "/a.txt": text_record,
        "/sub/b.bin": binary_record,
    })


@pytest.fixture
def subprocess_env():
    """Environment for running the CLI in a subprocess without installing."""
    env = dict(os.environ)
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    return env


@pytest.fixture
def make_symlink():
    """The try_symlink helper as a fixture."""
    return try_symlink


@pytest.fixture
def fixed_mtime_ns():
    return FIXED_MTIME_NS
