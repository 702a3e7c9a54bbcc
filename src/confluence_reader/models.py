"""Public data models for confluence-reader.

Every result type, enum and supporting dataclass referenced by the public
API lives here.  All types are plain dataclasses with no behaviour beyond
what is needed for structural equality and JSON-friendly export.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Diff engine
# ---------------------------------------------------------------------------

class DiffLineType(str, Enum):
    """Tag of a single line in an edit script."""

    CONTEXT = "context"
    """Line present, unchanged, in both sequences."""

    ADD = "add"
    """Line present only in the new sequence."""

    REMOVE = "remove"
    """Line present only in the old sequence."""


@dataclass(frozen=True)
class DiffLine:
    """One entry of a line-level edit script.

    Attributes
    ----------
    type:
        Context, addition or removal.
    text:
        The line text, without its terminator.
    old_lineno:
        1-based position in the old sequence (``None`` for additions).
    new_lineno:
        1-based position in the new sequence (``None`` for removals).
    """

    type: DiffLineType
    text: str
    old_lineno: int | None = None
    new_lineno: int | None = None

    @property
    def is_change(self) -> bool:
        return self.type is not DiffLineType.CONTEXT


@dataclass
class Hunk:
    """A contiguous diff region with bounded surrounding context."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: list[DiffLine] = field(default_factory=list)

    @property
    def header(self) -> str:
        return (
            f"@@ -{self.old_start},{self.old_count} "
            f"+{self.new_start},{self.new_count} @@"
        )


@dataclass
class DiffResult:
    """Hunks of a diff plus summary counts.

    ``additions`` and ``deletions`` count add / remove lines across all
    hunks; context lines are never counted.
    """

    hunks: list[Hunk] = field(default_factory=list)
    additions: int = 0
    deletions: int = 0

    @property
    def changes(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True)
class DiffStats:
    """Aggregate change counts between two texts."""

    additions: int = 0
    deletions: int = 0

    @property
    def changes(self) -> int:
        return self.additions + self.deletions

    def to_dict(self) -> dict[str, int]:
        return {
            "additions": self.additions,
            "deletions": self.deletions,
            "changes": self.changes,
        }


# ---------------------------------------------------------------------------
# Tree fetching
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChildRef:
    """An ``{id, title}`` entry of a child listing."""

    id: str
    title: str = ""


@dataclass
class ChildListing:
    """One page of a child listing.

    Attributes
    ----------
    children:
        Entries on this page, in source order.
    next_cursor:
        Opaque continuation token; ``None`` marks the final page.
    """

    children: list[ChildRef] = field(default_factory=list)
    next_cursor: str | None = None


@dataclass
class NodeContent:
    """A single node's own content as returned by a content source."""

    id: str
    title: str
    content: str


@dataclass
class PageNode:
    """A node of a fetched page tree.

    Children are owned by their parent; there are no back-references.
    """

    id: str
    title: str
    content: str
    children: list[PageNode] = field(default_factory=list)
    is_error: bool = False

    def iter_nodes(self) -> Iterator[tuple[int, PageNode]]:
        """Yield ``(depth, node)`` pairs in pre-order, starting at depth 0."""
        stack: list[tuple[int, PageNode]] = [(0, self)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            stack.extend((depth + 1, child) for child in reversed(node.children))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "children": [child.to_dict() for child in self.children],
        }
        if self.is_error:
            data["error"] = True
        return data


@dataclass(frozen=True)
class FetchConfig:
    """Bounds for one tree fetch.

    Attributes
    ----------
    concurrency:
        Maximum number of sibling fetches in flight per fan-out (>= 1).
    max_depth:
        Depth bound; ``0`` fetches the root only (>= 0).
    """

    concurrency: int = 5
    max_depth: int = 2

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")


# ---------------------------------------------------------------------------
# Confluence documents
# ---------------------------------------------------------------------------

@dataclass
class ConfluencePage:
    """The subset of a v2 ``/pages/{id}`` response this package uses."""

    id: str
    title: str
    status: str | None = None
    version: int | None = None
    space_id: str | None = None
    parent_id: str | None = None
    webui: str | None = None
    storage_html: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ConfluencePage:
        """Build from a raw API response dict.  Missing sections are tolerated."""
        version = data.get("version") or {}
        body = data.get("body") or {}
        storage = body.get("storage") or {}
        links = data.get("_links") or {}
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title", ""),
            status=data.get("status"),
            version=version.get("number"),
            space_id=data.get("spaceId"),
            parent_id=data.get("parentId"),
            webui=links.get("webui"),
            storage_html=storage.get("value") or "",
        )


@dataclass
class DocumentPayload:
    """Result of fetching a single page for analysis."""

    page_id: str
    title: str
    extracted_text: str
    status: str | None = None
    version: int | None = None
    webui: str | None = None
    storage_html: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "pageId": self.page_id,
            "title": self.title,
            "status": self.status,
            "version": self.version,
            "webui": self.webui,
            "extractedText": self.extracted_text,
        }
        if self.storage_html is not None:
            data["storageHtml"] = self.storage_html
        return data


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

@dataclass
class ComparisonEntry:
    """Diff of one local document against Confluence text."""

    name: str
    diff: str
    stats: DiffStats

    def to_dict(self) -> dict[str, Any]:
        return {
            "document": self.name,
            "additions": self.stats.additions,
            "deletions": self.stats.deletions,
            "totalChanges": self.stats.changes,
            "diff": self.diff,
        }


@dataclass
class ComparisonBundle:
    """All comparisons produced for one Confluence text."""

    entries: list[ComparisonEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalComparisons": len(self.entries),
            "diffs": [entry.to_dict() for entry in self.entries],
        }
