"""confluence-reader -- read Confluence page trees and diff them against local docs.

Public re-exports
-----------------

* **Client:** :class:`AsyncConfluenceReaderClient`
* **Configuration:** :class:`ConfluenceReaderConfig`
* **Diff engine:** :func:`generate_unified_diff`, :func:`stats` (the
  structured :func:`confluence_reader.diff.diff` lives in its subpackage)
* **Tree fetching:** :class:`TreeFetcher`, :func:`fetch_tree`,
  :class:`ContentSource`, :func:`render_tree`
* **Errors:** Every :class:`ConfluenceReaderError` subclass and
  :class:`ErrorCode`
* **Models:** All result dataclasses and enums

Usage::

    from confluence_reader import stats
    from confluence_reader.diff import diff

    text, result = diff("a\\nb\\nc", "a\\nx\\nc")
    assert stats("a\\nb\\nc", "a\\nx\\nc").changes == 2
"""

from __future__ import annotations

__version__ = "0.1.0"

from confluence_reader.async_client import AsyncConfluenceReaderClient
from confluence_reader.comparison import build_comparison_bundle
from confluence_reader.config import ConfluenceReaderConfig
from confluence_reader.diff import generate_unified_diff, stats
from confluence_reader.errors import (
    ConfluenceReaderAPIError,
    ConfluenceReaderAuthError,
    ConfluenceReaderConfigError,
    ConfluenceReaderError,
    ConfluenceReaderNetworkError,
    ConfluenceReaderNotFoundError,
    ConfluenceReaderPermissionError,
    ConfluenceReaderRetryExhaustedError,
    ConfluenceReaderURLError,
    ConfluenceReaderValidationError,
    ErrorCode,
)
from confluence_reader.models import (
    ChildListing,
    ChildRef,
    ComparisonBundle,
    ComparisonEntry,
    ConfluencePage,
    DiffLine,
    DiffLineType,
    DiffResult,
    DiffStats,
    DocumentPayload,
    FetchConfig,
    Hunk,
    NodeContent,
    PageNode,
)
from confluence_reader.tree import ContentSource, TreeFetcher, fetch_tree, render_tree

__all__ = [
    "AsyncConfluenceReaderClient",
    "ConfluenceReaderAPIError",
    "ChildListing",
    "ChildRef",
    "ComparisonBundle",
    "ComparisonEntry",
    "ConfluencePage",
    "ConfluenceReaderAuthError",
    "ConfluenceReaderConfig",
    "ConfluenceReaderConfigError",
    "ConfluenceReaderError",
    "ConfluenceReaderNetworkError",
    "ConfluenceReaderNotFoundError",
    "ConfluenceReaderPermissionError",
    "ConfluenceReaderRetryExhaustedError",
    "ConfluenceReaderURLError",
    "ConfluenceReaderValidationError",
    "ContentSource",
    "DiffLine",
    "DiffLineType",
    "DiffResult",
    "DiffStats",
    "DocumentPayload",
    "ErrorCode",
    "FetchConfig",
    "Hunk",
    "NodeContent",
    "PageNode",
    "TreeFetcher",
    "__version__",
    "build_comparison_bundle",
    "fetch_tree",
    "generate_unified_diff",
    "render_tree",
    "stats",
]
