"""Compare local design documents against Confluence text.

Usage::

    from confluence_reader.comparison import build_comparison_bundle

    bundle = build_comparison_bundle(
        confluence_text,
        {"PRD": prd_text, "System Design": design_text},
    )
    bundle.to_dict()["totalComparisons"]
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from confluence_reader.diff import DEFAULT_CONTEXT_LINES, diff
from confluence_reader.models import ComparisonBundle, ComparisonEntry, DiffStats

CONFLUENCE_LABEL = "a/confluence"

STANDARD_DOCUMENTS: tuple[str, ...] = (
    "PRD",
    "System Overview",
    "System Design",
    "LLD",
)
"""Document slots offered by the MCP comparison tool, in output order."""

_WHITESPACE_RE = re.compile(r"\s+")


def document_label(name: str) -> str:
    """``"System Design"`` -> ``"b/system-design"``."""
    return f"b/{_WHITESPACE_RE.sub('-', name.lower())}"


def compare_texts(
    name: str,
    confluence_text: str,
    local_text: str,
    context_lines: int = DEFAULT_CONTEXT_LINES,
    old_label: str = CONFLUENCE_LABEL,
    new_label: str | None = None,
) -> ComparisonEntry:
    """Diff trimmed *confluence_text* (old side) against trimmed *local_text*."""
    text, result = diff(
        confluence_text.strip(),
        local_text.strip(),
        context_lines=context_lines,
        old_label=old_label,
        new_label=new_label if new_label is not None else document_label(name),
    )
    stats = DiffStats(additions=result.additions, deletions=result.deletions)
    return ComparisonEntry(name=name, diff=text, stats=stats)


def build_comparison_bundle(
    confluence_text: str,
    documents: Mapping[str, str | None] | Iterable[tuple[str, str | None]],
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> ComparisonBundle:
    """Diff each local document against the same Confluence text.

    Parameters
    ----------
    confluence_text:
        Text extracted from Confluence.
    documents:
        ``name -> text`` pairs, in output order.  Missing (``None``) and
        blank texts are skipped.
    context_lines:
        Context lines per hunk.
    """
    items = documents.items() if isinstance(documents, Mapping) else documents
    entries = [
        compare_texts(name, confluence_text, text, context_lines)
        for name, text in items
        if text is not None and text.strip()
    ]
    return ComparisonBundle(entries=entries)
