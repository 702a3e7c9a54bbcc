"""Recursive page-tree fetching.

Exports
-------
ContentSource
    Protocol for the remote node store.
TreeFetcher
    Bounded-concurrency recursive fetcher with per-child failure stubs.
fetch_tree
    One-call convenience wrapper around :class:`TreeFetcher`.
render_tree
    Flatten a fetched tree into text for diffing.
"""

from .fetcher import DEFAULT_CONCURRENCY, TreeFetcher, error_stub, fetch_tree
from .render import render_tree
from .source import ContentSource

__all__ = [
    "DEFAULT_CONCURRENCY",
    "ContentSource",
    "TreeFetcher",
    "error_stub",
    "fetch_tree",
    "render_tree",
]
