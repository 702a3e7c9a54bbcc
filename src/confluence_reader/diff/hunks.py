"""Group an edit script into context-bounded hunks.

A hunk starts at the first change after a quiet stretch and keeps growing
while the next change is at most ``context_lines`` unchanged lines away.
A longer run of unchanged lines closes it.  Each hunk carries up to
``context_lines`` of context on either side, truncated at the sequence
boundaries and never reaching back into lines the previous hunk already
shows.
"""

from __future__ import annotations

from confluence_reader.models import DiffLine, DiffLineType, Hunk


def hunk_ranges(script: list[DiffLine], context_lines: int = 3) -> list[tuple[int, int]]:
    """Return inclusive ``(start, end)`` index ranges of each hunk in *script*."""
    if context_lines < 0:
        raise ValueError(f"context_lines must be >= 0, got {context_lines}")

    changes = [idx for idx, line in enumerate(script) if line.is_change]
    if not changes:
        return []

    last_index = len(script) - 1
    ranges: list[tuple[int, int]] = []
    start = max(0, changes[0] - context_lines)
    last_change = changes[0]

    for idx in changes[1:]:
        gap = idx - last_change - 1
        if gap > context_lines:
            end = min(last_index, last_change + context_lines)
            ranges.append((start, end))
            start = max(end + 1, idx - context_lines)
        last_change = idx

    ranges.append((start, min(last_index, last_change + context_lines)))
    return ranges


def group_hunks(script: list[DiffLine], context_lines: int = 3) -> list[Hunk]:
    """Group *script* into :class:`Hunk` objects in ascending order.

    Hunk start positions follow the unified-diff convention: the 1-based
    line of the first line on that side, or the line *before* the hunk when
    the hunk has no lines on that side.
    """
    hunks: list[Hunk] = []
    old_seen = 0
    new_seen = 0
    cursor = 0

    for start, end in hunk_ranges(script, context_lines):
        for line in script[cursor:start]:
            if line.type is not DiffLineType.ADD:
                old_seen += 1
            if line.type is not DiffLineType.REMOVE:
                new_seen += 1

        lines = script[start:end + 1]
        old_count = sum(1 for line in lines if line.type is not DiffLineType.ADD)
        new_count = sum(1 for line in lines if line.type is not DiffLineType.REMOVE)
        hunks.append(
            Hunk(
                old_start=old_seen + 1 if old_count else old_seen,
                old_count=old_count,
                new_start=new_seen + 1 if new_count else new_seen,
                new_count=new_count,
                lines=lines,
            )
        )

        old_seen += old_count
        new_seen += new_count
        cursor = end + 1

    return hunks
