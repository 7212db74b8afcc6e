from __future__ import annotations

"""
Directory Tree Data Models.

Provides the immutable node type produced by the tree builder and consumed
by the renderer.
"""

from dataclasses import dataclass, field
from typing import Tuple

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DirectoryNode:
    """
    Represents one directory in the scanned hierarchy.

    Attributes:
        name: Path segment (or the scanned root path for the root node).
        children: Sub-directories in filesystem enumeration order.
    """
    name: str
    children: Tuple["DirectoryNode", ...] = field(default_factory=tuple)

    def child_names(self) -> Tuple[str, ...]:
        return tuple(child.name for child in self.children)
