"""Asynchronous confluence-reader client.

:class:`AsyncConfluenceReaderClient` wires configuration, the HTTP
transport, the Confluence content source, the tree fetcher and the diff
engine together.

Usage::

    import asyncio
    from confluence_reader import AsyncConfluenceReaderClient

    async def main():
        async with AsyncConfluenceReaderClient.from_env() as client:
            doc = await client.fetch_doc(
                "https://tenant.atlassian.net/wiki/spaces/ENG/pages/123/Design",
            )
            print(doc.extracted_text)

            entry = await client.compare_tree("123", local_text, depth=1)
            print(entry.diff)

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from confluence_reader.comparison import CONFLUENCE_LABEL, compare_texts
from confluence_reader.config import ConfluenceReaderConfig
from confluence_reader.confluence_api.pages import AsyncPageAPI
from confluence_reader.confluence_api.source import ConfluenceContentSource
from confluence_reader.confluence_api.transport import AsyncConfluenceTransport
from confluence_reader.confluence_api.url import extract_page_id, resolve_page_ref
from confluence_reader.converter import storage_to_markdown, storage_to_text
from confluence_reader.models import (
    ComparisonEntry,
    DocumentPayload,
    FetchConfig,
    PageNode,
)
from confluence_reader.tree import TreeFetcher, render_tree

_TREE_RENDERERS = {"text": storage_to_text, "markdown": storage_to_markdown}


class AsyncConfluenceReaderClient:
    """Asynchronous Confluence reader.

    Parameters
    ----------
    token:
        Scoped Confluence API token.  Required unless *config* is given.
    config:
        A ready-made configuration; *token* and *kwargs* are then ignored.
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`ConfluenceReaderConfig`.
    """

    def __init__(
        self,
        token: str = "",
        *,
        config: ConfluenceReaderConfig | None = None,
        **kwargs: Any,
    ) -> None:
        if config is None:
            config = ConfluenceReaderConfig(token=token, **kwargs)
        self._config = config
        self._transport = AsyncConfluenceTransport(config)
        self._pages = AsyncPageAPI(self._transport)
        self._source = ConfluenceContentSource(
            self._pages,
            page_size=config.children_page_size,
            render=_TREE_RENDERERS[config.tree_content_format],
        )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> AsyncConfluenceReaderClient:
        """Create a client from ``CONFLUENCE_*`` environment variables."""
        return cls(config=ConfluenceReaderConfig.from_env(environ, **kwargs))

    @property
    def config(self) -> ConfluenceReaderConfig:
        return self._config

    # ------------------------------------------------------------------
    # Single documents
    # ------------------------------------------------------------------

    async def fetch_doc(
        self,
        url: str,
        include_storage_html: bool = False,
    ) -> DocumentPayload:
        """Fetch a page by URL and extract clean text for analysis.

        Parameters
        ----------
        url:
            Confluence page URL.
        include_storage_html:
            Also return the original storage HTML.

        Returns
        -------
        DocumentPayload
        """
        page_id = extract_page_id(url)
        page = await self._source.fetch_page(page_id)
        storage = page.storage_html
        return DocumentPayload(
            page_id=page.id,
            title=page.title,
            status=page.status,
            version=page.version,
            webui=page.webui,
            extracted_text=storage_to_text(storage) if storage else "",
            storage_html=storage if include_storage_html else None,
        )

    # ------------------------------------------------------------------
    # Trees
    # ------------------------------------------------------------------

    async def fetch_tree(
        self,
        page_ref: str,
        depth: int | None = None,
        concurrency: int | None = None,
    ) -> PageNode:
        """Fetch a page and its descendants.

        Parameters
        ----------
        page_ref:
            Page URL or bare numeric page id.
        depth:
            Depth bound.  Defaults to ``config.tree_max_depth``.
        concurrency:
            Sibling fetches per level.  Defaults to
            ``config.tree_concurrency``.

        Raises
        ------
        ConfluenceReaderError
            When the root page itself cannot be fetched or listed.
            Failures below the root become error stubs in the tree.
        """
        fetch_config = FetchConfig(
            concurrency=concurrency if concurrency is not None else self._config.tree_concurrency,
            max_depth=depth if depth is not None else self._config.tree_max_depth,
        )
        fetcher = TreeFetcher(self._source, fetch_config, metrics=self._config.metrics)
        return await fetcher.fetch(resolve_page_ref(page_ref))

    async def compare_tree(
        self,
        page_ref: str,
        local_text: str,
        depth: int | None = None,
        concurrency: int | None = None,
        context_lines: int | None = None,
        local_label: str = "b/local",
    ) -> ComparisonEntry:
        """Diff a rendered page tree (old side) against local text (new side)."""
        tree = await self.fetch_tree(page_ref, depth=depth, concurrency=concurrency)
        return compare_texts(
            tree.title,
            render_tree(tree),
            local_text,
            context_lines=(
                context_lines if context_lines is not None else self._config.diff_context_lines
            ),
            old_label=CONFLUENCE_LABEL,
            new_label=local_label,
        )

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncConfluenceReaderClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
