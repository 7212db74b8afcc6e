from __future__ import annotations

"""
Tree Renderer.

Converts a DirectoryNode hierarchy into indented text, two spaces per
depth level, depth-first in the order the builder produced.
"""

import sys
from typing import List, Optional, TextIO

from zipsync.domain.tree_models import DirectoryNode

INDENT = "  "


def render_tree_lines(node: DirectoryNode, depth: int = 0) -> List[str]:
    """
    Flatten the hierarchy into indented lines.

    Args:
        node: Node to render together with its descendants.
        depth: Indentation level of node.

    Returns:
        List[str]: One line per node.
    """
    lines: List[str] = []
    _render(node, depth, lines)
    return lines


def print_tree(node: DirectoryNode, depth: int = 0, stream: Optional[TextIO] = None) -> None:
    """Write the rendered hierarchy to stream (stdout by default)."""
    out = stream if stream is not None else sys.stdout
    for line in render_tree_lines(node, depth):
        out.write(line + "\n")


def _render(node: DirectoryNode, depth: int, lines: List[str]) -> None:
    lines.append(f"{INDENT * depth}{node.name}")
    for child in node.children:
        _render(child, depth + 1, lines)
