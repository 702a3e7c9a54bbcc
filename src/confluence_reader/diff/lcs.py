"""Longest Common Subsequence alignment over line sequences.

Uses the standard dynamic-programming LCS algorithm to find the longest
sequence of lines shared by the old and new text, then walks the table
back from the bottom-right corner to recover a line-level edit script.

When an addition and a removal are equally good the walk emits the
addition first (it is prepended last, so it ends up *after* the removal in
the final script).
"""

from __future__ import annotations

from collections.abc import Sequence

from confluence_reader.models import DiffLine, DiffLineType


def split_lines(text: str) -> list[str]:
    """Split *text* on ``"\\n"`` without trimming.

    An empty string is a single empty line, never an empty sequence.
    """
    return text.split("\n")


def lcs_table(old: Sequence[str], new: Sequence[str]) -> list[list[int]]:
    """Build the LCS length table for *old* and *new*.

    Returns
    -------
    list[list[int]]
        ``(len(old) + 1) x (len(new) + 1)`` table where ``dp[i][j]`` is the
        LCS length of ``old[:i]`` and ``new[:j]``.
    """
    m = len(old)
    n = len(new)
    dp: list[list[int]] = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        row = dp[i]
        prev = dp[i - 1]
        old_line = old[i - 1]
        for j in range(1, n + 1):
            if old_line == new[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])

    return dp


def edit_script(
    old: Sequence[str],
    new: Sequence[str],
    dp: list[list[int]] | None = None,
) -> list[DiffLine]:
    """Reconstruct the line-level edit script from an LCS table.

    Parameters
    ----------
    old, new:
        The two line sequences.
    dp:
        A table from :func:`lcs_table`; computed when omitted.

    Returns
    -------
    list[DiffLine]
        Context, add and remove lines in display order.  Reading the context
        and remove lines rebuilds *old*; the context and add lines rebuild
        *new*.
    """
    if dp is None:
        dp = lcs_table(old, new)

    script: list[DiffLine] = []
    i, j = len(old), len(new)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and old[i - 1] == new[j - 1]:
            script.append(DiffLine(DiffLineType.CONTEXT, old[i - 1], i, j))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            script.append(DiffLine(DiffLineType.ADD, new[j - 1], None, j))
            j -= 1
        else:
            script.append(DiffLine(DiffLineType.REMOVE, old[i - 1], i, None))
            i -= 1

    script.reverse()
    return script
