"""Exception types raised by cmakegen components."""

from __future__ import annotations


class CMakeGenError(RuntimeError):
    """Base class for cmakegen failures."""


class FilesystemAccessError(CMakeGenError):
    """Raised when the workspace cannot be read, cleaned, or written."""


class MalformedConfigurationError(CMakeGenError):
    """Raised when user-supplied configuration is invalid."""


__all__ = ["CMakeGenError", "FilesystemAccessError", "MalformedConfigurationError"]
