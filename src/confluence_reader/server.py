"""MCP server exposing Confluence reading and document comparison tools.

Tools
-----
``confluence.fetch_doc``
    Fetch one page by URL and return clean text.
``confluence.fetch_tree``
    Fetch a page and its descendants down to a depth bound.
``docs.build_comparison_bundle``
    Git-style diffs of local design documents against Confluence text.
``docs.compare_tree``
    Git-style diff of a rendered page tree against one local document.

Credentials are read from the environment on every call (see
:meth:`ConfluenceReaderConfig.from_env`), so the server can start without
them and report a clear error when a tool is used.  The server speaks MCP
over stdio; all logging goes to *stderr*.
"""

import json
import sys
from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from confluence_reader import __version__
from confluence_reader.async_client import AsyncConfluenceReaderClient
from confluence_reader.comparison import STANDARD_DOCUMENTS, build_comparison_bundle
from confluence_reader.diff import DEFAULT_CONTEXT_LINES
from confluence_reader.observability import get_logger
from confluence_reader.tree import DEFAULT_CONCURRENCY

log = get_logger("confluence_reader.server")

SERVER_NAME = "confluence-reader-mcp"
DEFAULT_TREE_DEPTH = 2

mcp = FastMCP(SERVER_NAME)


def _to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


@mcp.tool(
    name="confluence.fetch_doc",
    description=(
        "Fetch a Confluence Cloud page by URL using env-scoped credentials, "
        "returning clean text for analysis."
    ),
)
async def fetch_doc(
    url: Annotated[
        str,
        Field(description="Confluence page URL (e.g. /wiki/spaces/.../pages/<id>/...)"),
    ],
    includeStorageHtml: Annotated[  # noqa: N803 - MCP argument name
        bool,
        Field(description="If true, also return original storage HTML"),
    ] = False,
) -> str:
    async with AsyncConfluenceReaderClient.from_env() as client:
        doc = await client.fetch_doc(url, include_storage_html=includeStorageHtml)
    return _to_json(doc.to_dict())


@mcp.tool(
    name="confluence.fetch_tree",
    description=(
        "Fetch a Confluence page and its child pages recursively, returning "
        "a tree of clean text. Child pages that fail to load are kept as "
        "'[error: ...]' placeholders."
    ),
)
async def fetch_tree(
    url: Annotated[str, Field(description="Confluence page URL or numeric page id")],
    depth: Annotated[
        int,
        Field(ge=0, description="How many levels of child pages to fetch (0 = root only)"),
    ] = DEFAULT_TREE_DEPTH,
    concurrency: Annotated[
        int,
        Field(ge=1, description="Maximum parallel child fetches per level"),
    ] = DEFAULT_CONCURRENCY,
) -> str:
    async with AsyncConfluenceReaderClient.from_env() as client:
        tree = await client.fetch_tree(url, depth=depth, concurrency=concurrency)
    return _to_json(tree.to_dict())


@mcp.tool(
    name="docs.build_comparison_bundle",
    description=(
        "Build a git-style unified diff comparing PRD/System Overview/System "
        "Design/LLD against a Confluence page text."
    ),
)
async def build_comparison(
    confluenceText: Annotated[  # noqa: N803 - MCP argument name
        str,
        Field(description="Text extracted from Confluence (output of confluence.fetch_doc.extractedText)"),
    ],
    prd: Annotated[str | None, Field(description="Local PRD text")] = None,
    systemOverview: Annotated[  # noqa: N803 - MCP argument name
        str | None,
        Field(description="Local System Overview text"),
    ] = None,
    systemDesign: Annotated[  # noqa: N803 - MCP argument name
        str | None,
        Field(description="Local System Design text"),
    ] = None,
    lld: Annotated[str | None, Field(description="Local LLD text")] = None,
) -> str:
    texts = (prd, systemOverview, systemDesign, lld)
    bundle = build_comparison_bundle(
        confluenceText,
        list(zip(STANDARD_DOCUMENTS, texts)),
        context_lines=DEFAULT_CONTEXT_LINES,
    )
    return _to_json(bundle.to_dict())


@mcp.tool(
    name="docs.compare_tree",
    description=(
        "Fetch a Confluence page tree and return a git-style unified diff of "
        "its rendered text against a local document."
    ),
)
async def compare_tree(
    url: Annotated[str, Field(description="Confluence page URL or numeric page id")],
    localText: Annotated[str, Field(description="Local document text")],  # noqa: N803 - MCP argument name
    depth: Annotated[int, Field(ge=0, description="Child page levels to include")] = DEFAULT_TREE_DEPTH,
    concurrency: Annotated[
        int,
        Field(ge=1, description="Maximum parallel child fetches per level"),
    ] = DEFAULT_CONCURRENCY,
) -> str:
    async with AsyncConfluenceReaderClient.from_env() as client:
        entry = await client.compare_tree(
            url, localText, depth=depth, concurrency=concurrency,
        )
    return _to_json(entry.to_dict())


def main() -> None:
    """Console entry point: serve MCP over stdio."""
    log.info(
        "Starting MCP server",
        extra={"extra_fields": {"server": SERVER_NAME, "version": __version__}},
    )
    try:
        mcp.run(transport="stdio")
    except Exception:
        log.exception("MCP server failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
