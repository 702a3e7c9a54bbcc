"""Tests for comparing local documents against Confluence text."""

from __future__ import annotations

from confluence_reader.comparison import (
    STANDARD_DOCUMENTS,
    build_comparison_bundle,
    compare_texts,
    document_label,
)
from confluence_reader.diff import NO_DIFFERENCES


class TestDocumentLabel:
    def test_labels(self):
        assert [document_label(n) for n in STANDARD_DOCUMENTS] == [
            "b/prd", "b/system-overview", "b/system-design", "b/lld",
        ]


class TestCompareTexts:
    def test_inputs_are_trimmed(self):
        entry = compare_texts("PRD", "\n  a\nb  \n", "a\nb")
        assert NO_DIFFERENCES in entry.diff
        assert entry.stats.changes == 0

    def test_labels_and_stats(self):
        entry = compare_texts("System Design", "a\nb\nc", "a\nx\nc")
        assert entry.diff.startswith("--- a/confluence\n+++ b/system-design\n@@ -1,3 +1,3 @@")
        assert entry.to_dict() == {
            "document": "System Design",
            "additions": 1,
            "deletions": 1,
            "totalChanges": 2,
            "diff": entry.diff,
        }

    def test_custom_new_label(self):
        entry = compare_texts("Root", "a", "b", new_label="b/local")
        assert "+++ b/local\n" in entry.diff


class TestBuildComparisonBundle:
    def test_skips_missing_and_blank_documents(self):
        bundle = build_comparison_bundle(
            "shared\ntext",
            list(zip(STANDARD_DOCUMENTS, ["shared\ntext", None, "   ", "other"])),
        )
        data = bundle.to_dict()
        assert data["totalComparisons"] == 2
        assert [d["document"] for d in data["diffs"]] == ["PRD", "LLD"]
        assert data["diffs"][0]["totalChanges"] == 0
        assert data["diffs"][1]["additions"] == 1
        assert data["diffs"][1]["deletions"] == 2

    def test_mapping_input_keeps_order(self):
        bundle = build_comparison_bundle("x", {"LLD": "y", "PRD": "z"})
        assert [e.name for e in bundle.entries] == ["LLD", "PRD"]

    def test_empty(self):
        assert build_comparison_bundle("x", {}).to_dict() == {"totalComparisons": 0, "diffs": []}

    def test_context_lines_forwarded(self):
        base = "\n".join(str(i) for i in range(10))
        local = base.replace("5", "five")
        narrow = build_comparison_bundle(base, {"PRD": local}, context_lines=0)
        assert narrow.entries[0].diff.endswith("@@ -6,1 +6,1 @@\n-5\n+five")
