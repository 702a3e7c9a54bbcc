"""confluence_reader.confluence_api -- Confluence REST transport and endpoints.

This sub-package provides:

* :mod:`.rate_limit` -- Token bucket rate limiter.
* :mod:`.retries` -- Retry policy and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth, retries, and rate limiting.
* :mod:`.pages` -- Page endpoint wrappers.
* :mod:`.url` -- Page URL parsing.
* :mod:`.source` -- The tree fetcher's content source over Confluence.
"""

from __future__ import annotations

from .pages import AsyncPageAPI
from .rate_limit import AsyncTokenBucket
from .retries import RetryPolicy
from .source import ConfluenceContentSource
from .transport import AsyncConfluenceTransport, build_auth_headers, next_cursor
from .url import extract_page_id, resolve_page_ref

__all__ = [
    "AsyncConfluenceTransport",
    "AsyncPageAPI",
    "AsyncTokenBucket",
    "ConfluenceContentSource",
    "RetryPolicy",
    "build_auth_headers",
    "extract_page_id",
    "next_cursor",
    "resolve_page_ref",
]
