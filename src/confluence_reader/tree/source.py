"""The content-source contract the tree fetcher depends on."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from confluence_reader.models import ChildListing, NodeContent


@runtime_checkable
class ContentSource(Protocol):
    """A remote store of hierarchical nodes.

    Implementations must raise (not return an empty result) when a node
    does not exist or is not accessible.  The tree fetcher treats every
    exception the same way regardless of its cause.
    """

    async def fetch_node(self, node_id: str) -> NodeContent:
        """Return the node's own ``{id, title, content}``."""
        ...

    async def list_children(
        self,
        node_id: str,
        cursor: str | None = None,
    ) -> ChildListing:
        """Return one page of the node's children.

        *cursor* is the ``next_cursor`` of the previous page, or ``None``
        for the first page.  A listing whose ``next_cursor`` is ``None`` is
        the last one.
        """
        ...
