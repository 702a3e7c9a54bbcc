"""Git-style unified diff rendering and change statistics.

Usage::

    from confluence_reader.diff import diff, stats

    text, result = diff("a\\nb\\nc", "a\\nx\\nc")
    print(text)
    # --- a/original
    # +++ b/modified
    # @@ -1,3 +1,3 @@
    #  a
    # -b
    # +x
    #  c

    stats("a\\nb\\nc", "a\\nx\\nc").to_dict()
    # {"additions": 1, "deletions": 1, "changes": 2}

Both functions are pure: no I/O, no shared state, identical output for
identical input.
"""

from __future__ import annotations

from confluence_reader.models import DiffLineType, DiffResult, DiffStats, Hunk

from .hunks import group_hunks
from .lcs import edit_script, split_lines

DEFAULT_OLD_LABEL = "a/original"
DEFAULT_NEW_LABEL = "b/modified"
DEFAULT_CONTEXT_LINES = 3

NO_DIFFERENCES = "(no differences)"

_PREFIXES: dict[DiffLineType, str] = {
    DiffLineType.CONTEXT: " ",
    DiffLineType.ADD: "+",
    DiffLineType.REMOVE: "-",
}


def render_unified(
    hunks: list[Hunk],
    old_label: str = DEFAULT_OLD_LABEL,
    new_label: str = DEFAULT_NEW_LABEL,
) -> str:
    """Render *hunks* as unified-diff text.

    Lines are joined with ``"\\n"`` and the text has no trailing newline.
    Without hunks the body is the ``(no differences)`` sentinel followed
    by a newline.
    """
    if not hunks:
        return f"--- {old_label}\n+++ {new_label}\n{NO_DIFFERENCES}\n"

    output: list[str] = [f"--- {old_label}", f"+++ {new_label}"]
    for hunk in hunks:
        output.append(hunk.header)
        output.extend(_PREFIXES[line.type] + line.text for line in hunk.lines)
    return "\n".join(output)


def diff(
    old_text: str,
    new_text: str,
    context_lines: int = DEFAULT_CONTEXT_LINES,
    old_label: str = DEFAULT_OLD_LABEL,
    new_label: str = DEFAULT_NEW_LABEL,
) -> tuple[str, DiffResult]:
    """Diff two texts line by line.

    Parameters
    ----------
    old_text, new_text:
        Texts to compare.  They are split on ``"\\n"`` as-is; callers that
        want to ignore surrounding whitespace should trim first.
    context_lines:
        Unchanged lines shown around each change (>= 0).
    old_label, new_label:
        Names printed on the ``---`` / ``+++`` header lines.

    Returns
    -------
    tuple[str, DiffResult]
        The rendered unified diff and the structured hunks with counts.
    """
    script = edit_script(split_lines(old_text), split_lines(new_text))
    hunks = group_hunks(script, context_lines)

    additions = 0
    deletions = 0
    for hunk in hunks:
        for line in hunk.lines:
            if line.type is DiffLineType.ADD:
                additions += 1
            elif line.type is DiffLineType.REMOVE:
                deletions += 1

    result = DiffResult(hunks=hunks, additions=additions, deletions=deletions)
    return render_unified(hunks, old_label, new_label), result


def generate_unified_diff(
    old_text: str,
    new_text: str,
    old_label: str = DEFAULT_OLD_LABEL,
    new_label: str = DEFAULT_NEW_LABEL,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> str:
    """Return only the unified-diff text of :func:`diff`."""
    text, _ = diff(old_text, new_text, context_lines, old_label, new_label)
    return text


def stats(old_text: str, new_text: str) -> DiffStats:
    """Count added and removed lines between two texts."""
    additions = 0
    deletions = 0
    for line in edit_script(split_lines(old_text), split_lines(new_text)):
        if line.type is DiffLineType.ADD:
            additions += 1
        elif line.type is DiffLineType.REMOVE:
            deletions += 1
    return DiffStats(additions=additions, deletions=deletions)
