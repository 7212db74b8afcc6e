from __future__ import annotations

"""
Domain Error Hierarchy.

Every failure raised by the extraction, analysis and upload services derives
from ZipSyncError so interface layers can trap the whole family at once.
"""

from typing import Optional


class ZipSyncError(Exception):
    """Base class for all application failures."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


# -----------------------------------------------------------------------------
# EXTRACTION
# -----------------------------------------------------------------------------

class ExtractionError(ZipSyncError):
    """Failure while unpacking an archive."""


class ArchiveOpenError(ExtractionError):
    """The archive is missing, corrupt or unreadable."""


class PathTraversalError(ExtractionError):
    """An entry name resolves outside the sandboxed destination root."""

    def __init__(self, entry_name: str, destination_root: str) -> None:
        super().__init__(
            f"Illegal file path in archive: '{entry_name}' escapes '{destination_root}'",
            path=entry_name,
        )
        self.entry_name = entry_name
        self.destination_root = destination_root


class ExtractionIOError(ExtractionError):
    """Filesystem failure while materializing an entry."""

    def __init__(self, entry_name: str, cause: BaseException) -> None:
        super().__init__(f"Failed to extract '{entry_name}': {cause}", path=entry_name)
        self.entry_name = entry_name


class NestingDepthError(ExtractionError):
    """Nested archives go deeper than the configured limit."""


# -----------------------------------------------------------------------------
# ANALYSIS
# -----------------------------------------------------------------------------

class DirectoryReadError(ZipSyncError):
    """A directory could not be listed while building the tree."""


# -----------------------------------------------------------------------------
# UPLOAD / STORAGE
# -----------------------------------------------------------------------------

class StorageError(ZipSyncError):
    """The object store rejected or failed a put request."""

    def __init__(self, message: str, bucket: str = "", key: str = "") -> None:
        super().__init__(message, path=key or None)
        self.bucket = bucket
        self.key = key


class UploadError(ZipSyncError):
    """A directory upload walk aborted on the given file."""


class OperationCancelledError(ZipSyncError):
    """The caller signalled cancellation through the cancel event."""
