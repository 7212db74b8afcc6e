from __future__ import annotations

"""
Nested Archive Extractor.

Unpacks an archive into a sandboxed destination root. Every entry is
checked against the root before anything is written, macOS resource-fork
entries are dropped, and any extracted file that is itself an archive is
unpacked in place (into its own containing directory) and then removed.
"""

import logging
import os
import shutil
import tarfile
import threading
import zipfile
import zlib
from dataclasses import dataclass
from typing import Optional, Sequence

from zipsync.core.extraction.readers import open_archive
from zipsync.domain.constants import (
    CHUNK_SIZE,
    DEFAULT_FILE_MODE,
    DEFAULT_MAX_NESTING_DEPTH,
    NESTED_ARCHIVE_SUFFIXES,
    SENTINEL_DIR_NAME,
)
from zipsync.domain.errors import (
    ExtractionIOError,
    NestingDepthError,
    OperationCancelledError,
    PathTraversalError,
)
from zipsync.domain.extraction_models import ArchiveEntry, ExtractionResult
from zipsync.infra.fs import is_unsafe_member_name, is_within_root

logger = logging.getLogger(__name__)

# Failures that may surface while streaming an entry's decompressed content
_ENTRY_IO_ERRORS = (OSError, EOFError, zipfile.BadZipFile, tarfile.TarError, zlib.error)


@dataclass
class _ExtractionStats:
    files_written: int = 0
    directories_created: int = 0
    nested_archives: int = 0
    skipped_entries: int = 0

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def extract_archive(
        archive_path: str,
        destination_root: str,
        *,
        max_depth: int = DEFAULT_MAX_NESTING_DEPTH,
        cancel_event: Optional[threading.Event] = None,
        nested_suffixes: Sequence[str] = NESTED_ARCHIVE_SUFFIXES,
) -> ExtractionResult:
    """
    Extract an archive and every archive nested inside it.

    A nested archive is unpacked into the directory that contains it and
    deleted only after its own extraction succeeded. When a nested
    extraction fails, the nested archive and whatever was already written
    from it stay on disk.

    Args:
        archive_path: Archive to unpack.
        destination_root: Sandbox root; created with its ancestors if missing.
        max_depth: Deepest allowed nesting level (the outer archive is level 0).
        cancel_event: Optional event; when set, extraction stops before the next entry.
        nested_suffixes: File name suffixes that mark an extracted file as an archive.

    Returns:
        ExtractionResult: Counters for the whole extraction.

    Raises:
        ArchiveOpenError: The archive (or a nested one) cannot be opened.
        PathTraversalError: An entry would be written outside its root.
        ExtractionIOError: Creating a directory or writing a file failed.
        NestingDepthError: Nesting exceeds max_depth.
        OperationCancelledError: cancel_event was set.
    """
    root = os.path.abspath(destination_root)
    suffixes = tuple(s.lower() for s in nested_suffixes)
    stats = _ExtractionStats()

    logger.info(f"Extracting archive: {archive_path} -> {root}")
    _extract_level(archive_path, root, 0, max_depth, suffixes, cancel_event, stats)
    logger.info(
        f"Extraction finished: {stats.files_written} files, "
        f"{stats.nested_archives} nested archives, {stats.skipped_entries} skipped."
    )

    return ExtractionResult(
        destination_root=root,
        files_written=stats.files_written,
        directories_created=stats.directories_created,
        nested_archives=stats.nested_archives,
        skipped_entries=stats.skipped_entries,
    )


def is_sentinel_entry(name: str) -> bool:
    """Return True if the entry lives under the resource-fork sentinel directory."""
    first_segment = name.replace("\\", "/").lstrip("/").split("/", 1)[0]
    return first_segment == SENTINEL_DIR_NAME


def resolve_entry_path(root: str, entry_name: str, *, allow_root: bool = False) -> str:
    """
    Map an entry name to its destination path under root.

    With allow_root, a name resolving to root itself (".", "./") is
    returned as root instead of rejected; directory entries use this.

    Raises:
        PathTraversalError: If the name is absolute or escapes root.
    """
    if is_unsafe_member_name(entry_name):
        raise PathTraversalError(entry_name, root)

    target = os.path.normpath(os.path.join(root, entry_name))
    if allow_root and os.path.realpath(target) == os.path.realpath(root):
        return root
    if not is_within_root(target, root):
        raise PathTraversalError(entry_name, root)
    return target

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _extract_level(
        archive_path: str,
        root: str,
        depth: int,
        max_depth: int,
        suffixes: Sequence[str],
        cancel_event: Optional[threading.Event],
        stats: _ExtractionStats,
) -> None:
    """Extract one archive into root, recursing into nested archives."""
    try:
        os.makedirs(root, exist_ok=True)
    except OSError as e:
        raise ExtractionIOError(root, e) from e

    with open_archive(archive_path) as reader:
        for entry in reader.entries():
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError("Extraction cancelled.", path=archive_path)

            if is_sentinel_entry(entry.name):
                stats.skipped_entries += 1
                continue

            target = resolve_entry_path(root, entry.name, allow_root=entry.is_dir)

            if entry.is_dir:
                if target == root:
                    continue
                _create_directory(entry, target)
                stats.directories_created += 1
                continue

            if not entry.is_regular:
                logger.debug(f"Skipping special entry: {entry.name}")
                stats.skipped_entries += 1
                continue

            _write_file(entry, target)
            stats.files_written += 1

            if target.lower().endswith(tuple(suffixes)):
                if depth + 1 > max_depth:
                    raise NestingDepthError(
                        f"Nested archive '{entry.name}' exceeds maximum depth {max_depth}",
                        path=target,
                    )
                logger.info(f"Unpacking nested archive: {target}")
                _extract_level(
                    target, os.path.dirname(target), depth + 1,
                    max_depth, suffixes, cancel_event, stats
                )
                try:
                    os.remove(target)
                except OSError as e:
                    raise ExtractionIOError(entry.name, e) from e
                stats.nested_archives += 1


def _create_directory(entry: ArchiveEntry, target: str) -> None:
    try:
        os.makedirs(target, exist_ok=True)
        # Only apply stored bits that keep the directory traversable by us
        if entry.mode & 0o700 == 0o700:
            os.chmod(target, entry.mode)
    except OSError as e:
        raise ExtractionIOError(entry.name, e) from e


def _write_file(entry: ArchiveEntry, target: str) -> None:
    """Stream an entry's content to target and apply its permission bits."""
    logger.debug(f"Writing {entry.name}")
    try:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        with entry.open() as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst, CHUNK_SIZE)
        os.chmod(target, entry.mode or DEFAULT_FILE_MODE)
    except _ENTRY_IO_ERRORS as e:
        raise ExtractionIOError(entry.name, e) from e
