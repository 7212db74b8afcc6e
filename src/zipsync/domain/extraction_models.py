from __future__ import annotations

"""
Extraction Domain Data Models.

Defines the entry abstraction exposed by archive readers and the summary
returned once an archive (and every nested archive inside it) is unpacked.
"""

from dataclasses import dataclass
from typing import IO, Callable

# -----------------------------------------------------------------------------
# ARCHIVE ENTRIES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ArchiveEntry:
    """
    A single member of an archive as seen by the extractor.

    Attributes:
        name: Relative path within the archive, '/' separated.
        is_dir: True for directory members.
        mode: POSIX permission bits (0 when the archive stores none).
        is_regular: False for links, devices and other special members.
        opener: Callable returning a fresh binary stream of the content.
    """
    name: str
    is_dir: bool
    mode: int
    opener: Callable[[], IO[bytes]]
    is_regular: bool = True

    def open(self) -> IO[bytes]:
        return self.opener()

# -----------------------------------------------------------------------------
# RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractionResult:
    """
    Counters describing one completed extraction, nested levels included.

    Attributes:
        destination_root: Absolute sandbox root of the top-level archive.
        files_written: Regular files materialized on disk.
        directories_created: Directory entries materialized.
        nested_archives: Nested archives unpacked and removed.
        skipped_entries: Sentinel and special entries that were ignored.
    """
    destination_root: str
    files_written: int = 0
    directories_created: int = 0
    nested_archives: int = 0
    skipped_entries: int = 0
