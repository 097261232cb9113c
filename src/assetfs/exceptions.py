# ============================================================================
# FILE: exceptions.py
# RELPATH: assetfs/src/assetfs/exceptions.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Exception hierarchy for table building, generation and lookup
# ============================================================================

"""
Exception classes for assetfs.

Every error raised on purpose by the package derives from AssetFSError so
callers (and the CLI) can catch the whole family in one place.
"""

import errno
import os


class AssetFSError(Exception):
    """Base exception for all assetfs errors."""
    pass


# ============================================================================
# Build-Related Exceptions
# ============================================================================

class BuildError(AssetFSError):
    """Base exception for errors while walking the source tree."""
    pass


class SourceDirectoryError(BuildError):
    """
    Raised when the generation root is missing or is not a directory.

    Attributes:
        path: The root that was requested
        reason: Human-readable explanation
    """
    def __init__(self, path: str, reason: str = "Not a directory"):
        self.path = path
        self.reason = reason
        super().__init__(f"Source directory '{path}': {reason}")


class TableBuildError(BuildError):
    """
    Raised when a single file cannot be visited, stat'ed or read.

    The whole build is aborted; there are no partial tables.

    Attributes:
        path: Filesystem path that failed
        reason: Explanation of the failure
    """
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to embed '{path}': {reason}")


# ============================================================================
# Generation / Output Exceptions
# ============================================================================

class GenerateError(AssetFSError):
    """
    Raised when generation parameters are unusable.

    Attributes:
        parameter: Name of the offending parameter
        value: The rejected value
        reason: Explanation
    """
    def __init__(self, parameter: str, value, reason: str):
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {parameter} {value!r}: {reason}")


class OutputWriteError(AssetFSError):
    """
    Raised when the generated module cannot be written or moved into place.

    Attributes:
        path: Final output path
        reason: Explanation of the failure
    """
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write '{path}': {reason}")


class ModuleLoadError(AssetFSError):
    """
    Raised when a generated module cannot be imported or lacks the identifier.

    Attributes:
        path: Path of the generated module
        reason: Explanation of the failure
    """
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load generated module '{path}': {reason}")


# ============================================================================
# Runtime Lookup Exceptions
# ============================================================================

class FileNotExistError(AssetFSError, FileNotFoundError):
    """
    Raised by FileSystem.open when a path is not in the table.

    Also a FileNotFoundError carrying ENOENT, so file servers that only know
    about OSError still answer 404.

    Attributes:
        path: The requested path
    """
    def __init__(self, path: str):
        self.path = path
        FileNotFoundError.__init__(self, errno.ENOENT, os.strerror(errno.ENOENT), path)

    def __str__(self) -> str:
        return f"File '{self.path}' does not exist"


# ============================================================================
# Configuration-Related Exceptions
# ============================================================================

class ConfigError(AssetFSError):
    """Base exception for configuration-related errors."""
    pass


class ConfigLoadError(ConfigError):
    """
    Raised when configuration file cannot be loaded.

    Attributes:
        config_file: Path to the configuration file
        reason: Explanation of the failure
    """
    def __init__(self, config_file: str, reason: str):
        self.config_file = config_file
        self.reason = reason
        super().__init__(f"Failed to load config '{config_file}': {reason}")


class ConfigValidationError(ConfigError):
    """
    Raised when configuration data fails validation.

    Attributes:
        key: Configuration key that failed validation
        value: The invalid value
        reason: Explanation of why validation failed
    """
    def __init__(self, key: str, value, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")
