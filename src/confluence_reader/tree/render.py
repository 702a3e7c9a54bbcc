"""Flatten a page tree into one markdown-like text for diffing."""

from __future__ import annotations

from confluence_reader.models import PageNode

_MAX_HEADING_LEVEL = 6


def render_tree(root: PageNode) -> str:
    """Render *root* and its descendants in pre-order.

    Each node becomes a heading (``#`` repeated by depth, root = ``#``,
    capped at six) followed by its content.  Sections are separated by a
    blank line; nodes with empty content contribute only their heading.
    """
    sections: list[str] = []
    for depth, node in root.iter_nodes():
        level = min(depth + 1, _MAX_HEADING_LEVEL)
        heading = f"{'#' * level} {node.title}".rstrip()
        content = node.content.strip()
        sections.append(f"{heading}\n{content}" if content else heading)
    return "\n\n".join(sections)
