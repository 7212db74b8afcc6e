from __future__ import annotations

"""
Unit tests for the Upload Domain Models.

Verifies that the progress counters stay consistent when updated from
several threads at once.
"""

import threading

import pytest

from zipsync.domain.upload_models import ProgressUpdate, UploadProgress


def test_counters_start_at_zero() -> None:
    progress = UploadProgress()

    assert progress.snapshot() == (0, 0)
    assert progress.elapsed() >= 0


def test_uploaded_never_exceeds_discovered() -> None:
    progress = UploadProgress()

    with pytest.raises(RuntimeError):
        progress.register_uploaded()

    progress.register_discovered()
    assert progress.register_uploaded() == (1, 1)


def test_concurrent_increments_are_atomic() -> None:
    progress = UploadProgress()
    per_thread = 500
    observed = []

    def worker() -> None:
        for _ in range(per_thread):
            progress.register_discovered()
            uploaded, total = progress.register_uploaded()
            observed.append(uploaded <= total)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert progress.total_files == 8 * per_thread
    assert progress.uploaded_files == 8 * per_thread
    assert all(observed)


def test_progress_update_format_line() -> None:
    update = ProgressUpdate(
        percentage=50.0, uploaded_files=1, total_files=2,
        file_path="/tmp/x/a.txt", key="uploads/a.txt", duration=0.25,
    )

    assert update.format_line() == "Uploading: 50.00% (1/2) - /tmp/x/a.txt - Time: 0.250s"
