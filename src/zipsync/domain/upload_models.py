from __future__ import annotations

"""
Upload Domain Data Models.

Holds the per-run progress state, the snapshots emitted to observers after
each transfer, and the immutable outcome of a directory upload.
"""

import threading
import time
from dataclasses import dataclass
from typing import Optional, Tuple

# -----------------------------------------------------------------------------
# PROGRESS STATE
# -----------------------------------------------------------------------------

class UploadProgress:
    """
    Counters owned by a single directory upload.

    The total grows as the walk discovers files, so any percentage taken
    mid-walk is measured against a partial denominator. Both counters are
    mutated under a lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total_files = 0
        self._uploaded_files = 0
        self.start_time = time.monotonic()

    @property
    def total_files(self) -> int:
        with self._lock:
            return self._total_files

    @property
    def uploaded_files(self) -> int:
        with self._lock:
            return self._uploaded_files

    def register_discovered(self) -> int:
        """Count one more file found by the walk and return the new total."""
        with self._lock:
            self._total_files += 1
            return self._total_files

    def register_uploaded(self) -> Tuple[int, int]:
        """
        Count one completed transfer.

        Returns:
            Tuple[int, int]: (uploaded, total) observed atomically.
        """
        with self._lock:
            if self._uploaded_files >= self._total_files:
                raise RuntimeError("Upload completed for a file that was never discovered.")
            self._uploaded_files += 1
            return self._uploaded_files, self._total_files

    def snapshot(self) -> Tuple[int, int]:
        with self._lock:
            return self._uploaded_files, self._total_files

    def elapsed(self) -> float:
        return time.monotonic() - self.start_time


@dataclass(frozen=True)
class ProgressUpdate:
    """
    Observation emitted after each successful put.

    Attributes:
        percentage: uploaded / total * 100 at emission time.
        uploaded_files: Files uploaded so far.
        total_files: Files discovered so far.
        file_path: Local path of the file just uploaded.
        key: Object key it was stored under.
        duration: Seconds spent in the put call.
    """
    percentage: float
    uploaded_files: int
    total_files: int
    file_path: str
    key: str
    duration: float

    def format_line(self) -> str:
        return (
            f"Uploading: {self.percentage:.2f}% ({self.uploaded_files}/{self.total_files})"
            f" - {self.file_path} - Time: {self.duration:.3f}s"
        )

# -----------------------------------------------------------------------------
# JOBS AND RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class UploadJob:
    """A directory to upload together with the key prefix it maps to."""
    directory_path: str
    key_prefix: str = ""


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of one directory upload.

    Attributes:
        ok: True when every discovered file was uploaded.
        directory_path: Directory that was walked.
        uploaded_files: Files uploaded before completion or failure.
        total_files: Files discovered before completion or failure.
        elapsed: Wall-clock seconds for the whole walk.
        error: Failure description, empty on success.
        failed_path: Local path of the file that aborted the walk.
    """
    ok: bool
    directory_path: str
    uploaded_files: int
    total_files: int
    elapsed: float
    error: str = ""
    failed_path: Optional[str] = None
