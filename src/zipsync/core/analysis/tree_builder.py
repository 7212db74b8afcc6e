from __future__ import annotations

"""
Directory Tree Builder.

Scans a directory recursively and returns the hierarchy of its
sub-directories as immutable DirectoryNode objects. Files are not tracked
and the resource-fork sentinel directory is left out at every level.
"""

import logging
import os
from typing import List

from zipsync.domain.constants import SENTINEL_DIR_NAME
from zipsync.domain.errors import DirectoryReadError
from zipsync.domain.tree_models import DirectoryNode

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_directory_tree(root_path: str) -> DirectoryNode:
    """
    Build the directory hierarchy rooted at root_path.

    Child order follows filesystem enumeration order; nothing is sorted.

    Args:
        root_path: Directory to scan. Used verbatim as the root node name.

    Returns:
        DirectoryNode: Root node mirroring the directory nesting.

    Raises:
        DirectoryReadError: If any directory in the hierarchy cannot be listed.
    """
    logger.info(f"Building directory tree for: {root_path}")
    return _scan(root_path, root_path)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _scan(path: str, name: str) -> DirectoryNode:
    children: List[DirectoryNode] = []

    try:
        with os.scandir(path) as it:
            subdirs = [
                entry.name for entry in it
                if entry.is_dir(follow_symlinks=False) and entry.name != SENTINEL_DIR_NAME
            ]
    except OSError as e:
        raise DirectoryReadError(f"Cannot list directory '{path}': {e}", path=path) from e

    for sub in subdirs:
        children.append(_scan(os.path.join(path, sub), sub))

    return DirectoryNode(name=name, children=tuple(children))
