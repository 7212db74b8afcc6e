from __future__ import annotations

"""
Domain Constants.

Centralizes the fixed names, suffixes and limits shared by the extraction,
tree analysis and upload subsystems.
"""

from typing import Tuple

CURRENT_CONFIG_VERSION = "1.0.0"

# Resource-fork directory written by macOS archivers; never content.
SENTINEL_DIR_NAME = "__MACOSX"

ZIP_SUFFIXES: Tuple[str, ...] = (".zip",)
TAR_SUFFIXES: Tuple[str, ...] = (".tar", ".tar.gz", ".tgz", ".tar.bz2", ".tbz2", ".tar.xz", ".txz")

# Extracted files with these suffixes are unpacked in place
NESTED_ARCHIVE_SUFFIXES: Tuple[str, ...] = ZIP_SUFFIXES + TAR_SUFFIXES
DEFAULT_MAX_NESTING_DEPTH = 16

DEFAULT_EXTRACT_SUBDIR = "extracted"
DEFAULT_KEY_PREFIX = "uploads/"
DEFAULT_UPLOAD_TIMEOUT = 60.0

STORAGE_BACKENDS: Tuple[str, ...] = ("s3", "http")
DEFAULT_STORAGE_BACKEND = "s3"

# Mode applied to extracted files whose archive entry carries no permission bits
DEFAULT_FILE_MODE = 0o644
CHUNK_SIZE = 64 * 1024
