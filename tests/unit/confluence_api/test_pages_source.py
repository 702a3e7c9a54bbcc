"""Tests for the page endpoints and the Confluence content source."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from confluence_reader.confluence_api.pages import AsyncPageAPI
from confluence_reader.confluence_api.source import ConfluenceContentSource
from confluence_reader.models import ChildRef
from confluence_reader.tree import ContentSource

PAGE = {
    "id": "123",
    "title": "Design",
    "status": "current",
    "spaceId": "9",
    "parentId": "100",
    "version": {"number": 4},
    "body": {"storage": {"value": "<h1>Intro</h1><p>Hello&nbsp;world</p>"}},
    "_links": {"webui": "/spaces/ENG/pages/123/Design"},
}


def _transport(return_value=None) -> MagicMock:
    transport = MagicMock()
    transport.request = AsyncMock(return_value=return_value or {})
    return transport


class TestAsyncPageAPI:
    async def test_retrieve_requests_storage_body(self):
        transport = _transport(PAGE)
        result = await AsyncPageAPI(transport).retrieve("123")
        assert result == PAGE
        transport.request.assert_awaited_once_with(
            "GET", "/wiki/api/v2/pages/123", params={"body-format": "storage"},
        )

    async def test_list_children_first_page(self):
        transport = _transport({"results": []})
        await AsyncPageAPI(transport).list_children("123", limit=25)
        transport.request.assert_awaited_once_with(
            "GET", "/wiki/api/v2/pages/123/children", params={"limit": 25},
        )

    async def test_list_children_with_cursor(self):
        transport = _transport({"results": []})
        await AsyncPageAPI(transport).list_children("123", cursor="abc")
        transport.request.assert_awaited_once_with(
            "GET",
            "/wiki/api/v2/pages/123/children",
            params={"limit": 100, "cursor": "abc"},
        )


class TestConfluenceContentSource:
    def _source(self, **api_results) -> tuple[ConfluenceContentSource, MagicMock]:
        pages = MagicMock()
        pages.retrieve = AsyncMock(return_value=api_results.get("page", PAGE))
        pages.list_children = AsyncMock(return_value=api_results.get("children", {"results": []}))
        return ConfluenceContentSource(pages, page_size=50), pages

    def test_is_content_source(self):
        source, _ = self._source()
        assert isinstance(source, ContentSource)

    async def test_fetch_page_maps_fields(self):
        source, _ = self._source()
        page = await source.fetch_page("123")
        assert page.id == "123"
        assert page.version == 4
        assert page.status == "current"
        assert page.space_id == "9"
        assert page.parent_id == "100"
        assert page.webui == "/spaces/ENG/pages/123/Design"
        assert page.storage_html.startswith("<h1>")

    async def test_fetch_node_converts_storage(self):
        source, _ = self._source()
        node = await source.fetch_node("123")
        assert node.id == "123"
        assert node.title == "Design"
        assert node.content == "Intro\nHello world"

    async def test_fetch_node_without_body(self):
        source, _ = self._source(page={"title": "Empty"})
        node = await source.fetch_node("55")
        assert node.id == "55"
        assert node.content == ""

    async def test_list_children_parses_results_and_cursor(self):
        children = {
            "results": [
                {"id": "1", "title": "One"},
                {"id": 2, "title": "Two"},
                {"title": "no id"},
            ],
            "_links": {"next": "/wiki/api/v2/pages/123/children?cursor=next-1&limit=50"},
        }
        source, pages = self._source(children=children)
        listing = await source.list_children("123", cursor="prev")
        assert listing.children == [ChildRef("1", "One"), ChildRef("2", "Two")]
        assert listing.next_cursor == "next-1"
        pages.list_children.assert_awaited_once_with("123", cursor="prev", limit=50)

    async def test_list_children_last_page(self):
        source, _ = self._source(children={"results": [{"id": "1"}]})
        listing = await source.list_children("123")
        assert listing.children == [ChildRef("1", "")]
        assert listing.next_cursor is None
