"""Confluence implementation of the tree fetcher's content source."""

from __future__ import annotations

from collections.abc import Callable

from confluence_reader.converter import storage_to_text
from confluence_reader.models import ChildListing, ChildRef, ConfluencePage, NodeContent

from .pages import AsyncPageAPI
from .transport import next_cursor


class ConfluenceContentSource:
    """Serve pages and child listings from the Confluence v2 API.

    Parameters
    ----------
    pages:
        Page endpoint wrapper.
    page_size:
        ``limit`` for child-listing requests.
    render:
        Converts a page's storage HTML into node content.  Defaults to
        :func:`~confluence_reader.converter.storage_to_text`.
    """

    def __init__(
        self,
        pages: AsyncPageAPI,
        page_size: int = 100,
        render: Callable[[str], str] = storage_to_text,
    ) -> None:
        self._pages = pages
        self._page_size = page_size
        self._render = render

    async def fetch_page(self, page_id: str) -> ConfluencePage:
        """Fetch a page with its storage body."""
        return ConfluencePage.from_api(await self._pages.retrieve(page_id))

    async def fetch_node(self, node_id: str) -> NodeContent:
        page = await self.fetch_page(node_id)
        content = self._render(page.storage_html) if page.storage_html else ""
        return NodeContent(id=page.id or node_id, title=page.title, content=content)

    async def list_children(
        self,
        node_id: str,
        cursor: str | None = None,
    ) -> ChildListing:
        data = await self._pages.list_children(node_id, cursor=cursor, limit=self._page_size)
        children = [
            ChildRef(id=str(item["id"]), title=item.get("title", ""))
            for item in data.get("results", [])
            if "id" in item
        ]
        return ChildListing(children=children, next_cursor=next_cursor(data))
