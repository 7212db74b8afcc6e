from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation, sandbox containment checks and
directory helpers shared by the extraction, analysis and upload services.
"""

import ntpath
import os
import posixpath
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "ZipSync"
UNIX_APP_DIR_NAME = ".zipsync"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/ZipSync
    - Linux/Mac: ~/.zipsync

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)

# -----------------------------------------------------------------------------
# SANDBOX API
# -----------------------------------------------------------------------------

def is_unsafe_member_name(name: str) -> bool:
    """
    Detect archive member names that are absolute on any platform.

    Catches POSIX roots, Windows drive letters ('C:evil') and UNC prefixes
    regardless of the host OS.
    """
    if not name:
        return False
    if posixpath.isabs(name) or name.startswith("\\"):
        return True
    drive, _ = ntpath.splitdrive(name)
    return bool(drive)


def is_within_root(path: str, root: str) -> bool:
    """
    Check that path resolves strictly inside root.

    Both sides are resolved through symlinks, so a link planted inside the
    root that points elsewhere does not count as contained.

    Args:
        path: Candidate path (absolute or relative to the cwd).
        root: Sandbox root directory.

    Returns:
        bool: True if path is a strict descendant of root.
    """
    real_root = os.path.realpath(root)
    real_path = os.path.realpath(path)
    return real_path.startswith(real_root.rstrip(os.sep) + os.sep)

