"""
assetfs - embed a directory tree in a Python module and serve it as a
read-only virtual filesystem.

    python -m assetfs generate --id assets --out assets_generated.py --dir ./assets

    from assets_generated import assets
    with assets.open("/index.html") as f:
        body = f.read()
"""

__version__ = "1.0.0"

from assetfs.exceptions import AssetFSError, FileNotExistError
from assetfs.filesystem import File, FileSystem
from assetfs.models import ByteData, FileInfo, StringData, classify

__all__ = [
    "__version__",
    "AssetFSError",
    "ByteData",
    "File",
    "FileInfo",
    "FileNotExistError",
    "FileSystem",
    "StringData",
    "classify",
]
