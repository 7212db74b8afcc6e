from __future__ import annotations

"""
Directory Upload Coordinator.

Walks a directory tree and uploads every regular file to the object store,
one file at a time, reporting progress after each transfer. The first
failed transfer stops the walk. Several directories can be uploaded in
parallel, each walk owning its own progress counters.
"""

import logging
import os
import stat
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from zipsync.domain.constants import SENTINEL_DIR_NAME
from zipsync.domain.errors import (
    OperationCancelledError,
    StorageError,
    UploadError,
    ZipSyncError,
)
from zipsync.domain.upload_models import (
    ProgressUpdate,
    UploadJob,
    UploadProgress,
    UploadResult,
)
from zipsync.infra.storage.common import ObjectStoreClient

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressUpdate], None]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_object_key(key_prefix: str, relative_path: str) -> str:
    """
    Join the key prefix and a path relative to the upload root.

    Separators are normalized to '/', so 'uploads/' + 'sub/f.txt' gives
    'uploads/sub/f.txt' on every platform.
    """
    rel = relative_path.replace(os.sep, "/").lstrip("/")
    if not key_prefix:
        return rel
    return f"{key_prefix.rstrip('/')}/{rel}"


def upload_directory(
        client: ObjectStoreClient,
        bucket: str,
        directory_path: str,
        key_prefix: str,
        *,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
) -> UploadResult:
    """
    Upload every regular file under directory_path.

    Files are discovered and uploaded sequentially in filesystem enumeration
    order. The total grows as files are discovered; each progress update is
    computed against the total known at that moment. The resource-fork
    sentinel directory is never descended into.

    Args:
        client: Object store put capability.
        bucket: Destination bucket.
        directory_path: Root of the tree to upload.
        key_prefix: Prefix prepended to every object key.
        progress_callback: Receives a ProgressUpdate after each successful put.
        cancel_event: Optional event; when set, no further file is attempted.

    Returns:
        UploadResult: Success, or the first error with the failing path.
    """
    progress = UploadProgress()
    logger.info(f"Uploading directory {directory_path} to bucket '{bucket}' (prefix '{key_prefix}')")

    try:
        _walk_and_upload(
            client, bucket, directory_path, key_prefix,
            progress, progress_callback, cancel_event
        )
    except ZipSyncError as e:
        uploaded, total = progress.snapshot()
        logger.error(f"Error uploading directory {directory_path}: {e}")
        return UploadResult(
            ok=False,
            directory_path=directory_path,
            uploaded_files=uploaded,
            total_files=total,
            elapsed=progress.elapsed(),
            error=str(e),
            failed_path=e.path,
        )

    uploaded, total = progress.snapshot()
    elapsed = progress.elapsed()
    logger.info(f"Uploaded directory {directory_path}: {uploaded} files. Total upload time: {elapsed:.2f}s")
    return UploadResult(
        ok=True,
        directory_path=directory_path,
        uploaded_files=uploaded,
        total_files=total,
        elapsed=elapsed,
    )


def upload_directories(
        client: ObjectStoreClient,
        bucket: str,
        jobs: Sequence[UploadJob],
        *,
        max_workers: int = 4,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
) -> List[UploadResult]:
    """
    Run one upload_directory call per job on a thread pool and wait for all.

    A failing job never stops its siblings. Results are returned in job order.
    """
    if not jobs:
        return []

    with ThreadPoolExecutor(
            max_workers=max(1, min(max_workers, len(jobs))),
            thread_name_prefix="UploadWorker",
    ) as executor:
        futures = [
            executor.submit(
                upload_directory,
                client, bucket, job.directory_path, job.key_prefix,
                progress_callback=progress_callback,
                cancel_event=cancel_event,
            )
            for job in jobs
        ]

    results: List[UploadResult] = []
    for job, future in zip(jobs, futures):
        try:
            results.append(future.result())
        except Exception as e:
            logger.exception(f"Upload worker crashed for {job.directory_path}")
            results.append(UploadResult(
                ok=False,
                directory_path=job.directory_path,
                uploaded_files=0,
                total_files=0,
                elapsed=0.0,
                error=str(e),
            ))
    return results

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _walk_and_upload(
        client: ObjectStoreClient,
        bucket: str,
        directory_path: str,
        key_prefix: str,
        progress: UploadProgress,
        progress_callback: Optional[ProgressCallback],
        cancel_event: Optional[threading.Event],
) -> None:
    for root, dirs, files in os.walk(directory_path, onerror=_raise_walk_error):
        dirs[:] = [d for d in dirs if d != SENTINEL_DIR_NAME]

        for file_name in files:
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError("Upload cancelled.", path=directory_path)

            file_path = os.path.join(root, file_name)
            if not _is_regular_file(file_path):
                logger.debug(f"Skipping non-regular file: {file_path}")
                continue

            progress.register_discovered()
            key = build_object_key(key_prefix, os.path.relpath(file_path, directory_path))
            duration = _upload_file(client, bucket, file_path, key)

            uploaded, total = progress.register_uploaded()
            update = ProgressUpdate(
                percentage=uploaded / total * 100,
                uploaded_files=uploaded,
                total_files=total,
                file_path=file_path,
                key=key,
                duration=duration,
            )
            if progress_callback is not None:
                progress_callback(update)
            else:
                logger.debug(update.format_line())


def _upload_file(client: ObjectStoreClient, bucket: str, file_path: str, key: str) -> float:
    """Put one file and return the seconds spent in the transfer."""
    started = time.monotonic()
    try:
        with open(file_path, "rb") as stream:
            client.put(bucket, key, stream)
    except StorageError as e:
        raise UploadError(f"Failed to upload '{file_path}': {e}", path=file_path) from e
    except OSError as e:
        raise UploadError(f"Cannot read '{file_path}': {e}", path=file_path) from e
    return time.monotonic() - started


def _raise_walk_error(error: OSError) -> None:
    raise UploadError(f"Directory walk failed at '{error.filename}': {error}", path=error.filename)


def _is_regular_file(file_path: str) -> bool:
    """
    Stat a walked entry, following a symlink to its target.

    Raises:
        UploadError: If the entry vanished or cannot be stat'ed.
    """
    try:
        info = os.lstat(file_path)
        if stat.S_ISLNK(info.st_mode):
            info = os.stat(file_path)
    except OSError as e:
        raise UploadError(f"Cannot stat '{file_path}': {e}", path=file_path) from e
    return stat.S_ISREG(info.st_mode)
