"""Resolve Confluence page URLs to page ids.

Supported forms::

    https://tenant.atlassian.net/wiki/spaces/KEY/pages/123456789/Title
    https://tenant.atlassian.net/wiki/pages/viewpage.action?pageId=123456789

Short links usually redirect to one of these, so callers should pass the
final URL.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

from confluence_reader.errors import ConfluenceReaderURLError

_PAGE_ID_RE = re.compile(r"^\d+$")
_PAGES_PATH_RE = re.compile(r"/pages/(\d+)(?:/|$)")


def extract_page_id(url: str) -> str:
    """Extract the numeric page id from a Confluence page URL.

    Raises
    ------
    ConfluenceReaderURLError
        If *url* is not an absolute URL or carries no page id.
    """
    parsed = urlparse(url.strip())
    if not parsed.scheme or not parsed.netloc:
        raise ConfluenceReaderURLError(
            message=f"Invalid URL: {url!r} is not an absolute URL.",
            context={"url": url},
        )

    for value in parse_qs(parsed.query).get("pageId", []):
        if _PAGE_ID_RE.match(value):
            return value

    match = _PAGES_PATH_RE.search(parsed.path)
    if match:
        return match.group(1)

    raise ConfluenceReaderURLError(
        message="Invalid URL: unsupported Confluence URL format (no pageId found).",
        context={"url": url},
    )


def resolve_page_ref(ref: str) -> str:
    """Accept either a bare numeric page id or a page URL."""
    ref = ref.strip()
    if _PAGE_ID_RE.match(ref):
        return ref
    return extract_page_id(ref)
