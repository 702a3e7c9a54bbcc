"""Line-based diff engine.

Exports
-------
diff
    Unified-diff text plus structured hunks and counts.
stats
    Addition / deletion / change counts between two texts.
generate_unified_diff
    Unified-diff text only.
lcs_table, edit_script
    The LCS alignment underneath.
group_hunks
    Context-bounded hunk grouping of an edit script.
"""

from .hunks import group_hunks, hunk_ranges
from .lcs import edit_script, lcs_table, split_lines
from .unified import (
    DEFAULT_CONTEXT_LINES,
    DEFAULT_NEW_LABEL,
    DEFAULT_OLD_LABEL,
    NO_DIFFERENCES,
    diff,
    generate_unified_diff,
    render_unified,
    stats,
)

__all__ = [
    "DEFAULT_CONTEXT_LINES",
    "DEFAULT_NEW_LABEL",
    "DEFAULT_OLD_LABEL",
    "NO_DIFFERENCES",
    "diff",
    "edit_script",
    "generate_unified_diff",
    "group_hunks",
    "hunk_ranges",
    "lcs_table",
    "render_unified",
    "split_lines",
    "stats",
]
