"""Tests for the bounded-concurrency recursive tree fetcher."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from confluence_reader.models import ChildListing, ChildRef, FetchConfig, NodeContent
from confluence_reader.tree import ContentSource, TreeFetcher, error_stub, fetch_tree

# ---------------------------------------------------------------------------
# Fake source
# ---------------------------------------------------------------------------


class FakeSource:
    """In-memory :class:`ContentSource` with failure injection and
    concurrency tracking.

    ``tree`` maps a node id to its child ids; titles are ``"Title <id>"``
    and contents ``"Body <id>"``.
    """

    def __init__(
        self,
        tree: dict[str, list[str]],
        *,
        fail_fetch: set[str] | None = None,
        fail_list: set[str] | None = None,
        page_size: int | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.tree = tree
        self.fail_fetch = fail_fetch or set()
        self.fail_list = fail_list or set()
        self.page_size = page_size
        self.delays = delays or {}
        self.fetched: list[str] = []
        self.list_calls: list[tuple[str, str | None]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_node(self, node_id: str) -> NodeContent:
        self.fetched.append(node_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(node_id, 0.001))
            if node_id in self.fail_fetch:
                raise RuntimeError(f"boom {node_id}")
            return NodeContent(id=node_id, title=f"Title {node_id}", content=f"Body {node_id}")
        finally:
            self.in_flight -= 1

    async def list_children(self, node_id: str, cursor: str | None = None) -> ChildListing:
        self.list_calls.append((node_id, cursor))
        if node_id in self.fail_list:
            raise RuntimeError(f"list failed {node_id}")
        ids = self.tree.get(node_id, [])
        if self.page_size is None:
            return ChildListing(children=[ChildRef(i, f"Title {i}") for i in ids])
        start = int(cursor) if cursor is not None else 0
        end = start + self.page_size
        page = [ChildRef(i, f"Title {i}") for i in ids[start:end]]
        return ChildListing(children=page, next_cursor=str(end) if end < len(ids) else None)


class PerParentSource(FakeSource):
    """Tracks concurrent ``fetch_node`` calls grouped by the parent's id."""

    def __init__(self, tree: dict[str, list[str]], **kwargs) -> None:
        super().__init__(tree, **kwargs)
        self.parent_of = {child: parent for parent, kids in tree.items() for child in kids}
        self.by_parent: dict[str | None, int] = {}
        self.peak_by_parent: dict[str | None, int] = {}
        self.leaf_in_flight = 0
        self.peak_leaf_in_flight = 0

    async def fetch_node(self, node_id: str) -> NodeContent:
        parent = self.parent_of.get(node_id)
        leaf = node_id not in self.tree
        self.by_parent[parent] = self.by_parent.get(parent, 0) + 1
        self.peak_by_parent[parent] = max(self.peak_by_parent.get(parent, 0), self.by_parent[parent])
        if leaf:
            self.leaf_in_flight += 1
            self.peak_leaf_in_flight = max(self.peak_leaf_in_flight, self.leaf_in_flight)
        try:
            return await super().fetch_node(node_id)
        finally:
            self.by_parent[parent] -= 1
            if leaf:
                self.leaf_in_flight -= 1


def _ids(node) -> list[str]:
    return [child.id for child in node.children]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestContentSourceProtocol:
    def test_fake_satisfies_protocol(self):
        assert isinstance(FakeSource({}), ContentSource)


class TestFetchTree:
    async def test_failed_child_becomes_stub_and_siblings_survive(self):
        source = FakeSource({"R": ["C1", "C2", "C3"]}, fail_fetch={"C2"})
        root = await fetch_tree(source, "R", depth_bound=1, concurrency=2)

        assert root.id == "R"
        assert root.content == "Body R"
        assert _ids(root) == ["C1", "C2", "C3"]

        c1, c2, c3 = root.children
        assert c1.content == "Body C1"
        assert c3.content == "Body C3"
        assert c2.is_error
        assert c2.title == "Title C2"
        assert c2.content == "[error: boom C2]"
        assert c2.children == []
        assert source.max_in_flight <= 2

    async def test_depth_zero_returns_root_only(self):
        source = FakeSource({"R": ["C1", "C2"]})
        root = await fetch_tree(source, "R", depth_bound=0)
        assert root.children == []
        assert source.list_calls == []

    async def test_depth_bound_limits_recursion(self):
        source = FakeSource({"R": ["A"], "A": ["B"], "B": ["C"]})
        root = await fetch_tree(source, "R", depth_bound=2)
        [a] = root.children
        [b] = a.children
        assert b.id == "B"
        assert b.children == []
        assert "C" not in source.fetched
        assert ("B", None) not in source.list_calls

    async def test_children_keep_listing_order_despite_completion_order(self):
        source = FakeSource(
            {"R": ["slow", "fast", "medium"]},
            delays={"slow": 0.05, "fast": 0.0, "medium": 0.02},
        )
        root = await fetch_tree(source, "R", depth_bound=1, concurrency=3)
        assert _ids(root) == ["slow", "fast", "medium"]

    async def test_pagination_is_drained(self):
        children = [f"C{i}" for i in range(7)]
        source = FakeSource({"R": children}, page_size=3)
        root = await fetch_tree(source, "R", depth_bound=1)
        assert _ids(root) == children
        assert source.list_calls == [("R", None), ("R", "3"), ("R", "6")]

    @pytest.mark.parametrize("concurrency", [1, 2, 4])
    async def test_concurrency_cap_respected(self, concurrency):
        children = [f"C{i}" for i in range(10)]
        source = FakeSource({"R": children}, delays={c: 0.01 for c in children})
        root = await fetch_tree(source, "R", depth_bound=1, concurrency=concurrency)
        assert len(root.children) == 10
        # The root's own fetch has finished before children start.
        assert source.max_in_flight == concurrency

    async def test_concurrency_cap_applies_per_parent_at_every_level(self):
        parents = [f"P{i}" for i in range(3)]
        tree: dict[str, list[str]] = {"R": parents}
        for p in parents:
            tree[p] = [f"{p}.c{j}" for j in range(4)]
        leaves = [c for p in parents for c in tree[p]]
        source = PerParentSource(tree, delays={c: 0.02 for c in leaves})

        root = await fetch_tree(source, "R", depth_bound=2, concurrency=2)

        assert _ids(root) == parents
        assert all(_ids(p) == tree[p.id] for p in root.children)
        assert source.peak_by_parent[None] == 1
        assert source.peak_by_parent["R"] <= 2
        assert all(source.peak_by_parent[p] <= 2 for p in parents)
        # Two parents fan out side by side, so the leaf level as a whole
        # runs more fetches at once than a single fan-out allows.
        assert source.peak_leaf_in_flight > 2

    async def test_concurrency_above_child_count(self):
        source = FakeSource({"R": ["A", "B"]})
        root = await fetch_tree(source, "R", depth_bound=1, concurrency=50)
        assert _ids(root) == ["A", "B"]
        assert source.max_in_flight <= 2

    async def test_root_fetch_failure_propagates(self):
        source = FakeSource({"R": ["A"]}, fail_fetch={"R"})
        with pytest.raises(RuntimeError, match="boom R"):
            await fetch_tree(source, "R", depth_bound=1)

    async def test_root_listing_failure_propagates(self):
        source = FakeSource({"R": ["A"]}, fail_list={"R"})
        with pytest.raises(RuntimeError, match="list failed R"):
            await fetch_tree(source, "R", depth_bound=1)

    async def test_child_listing_failure_stubs_that_child(self):
        source = FakeSource({"R": ["A", "B"], "A": ["A1"], "B": ["B1"]}, fail_list={"A"})
        root = await fetch_tree(source, "R", depth_bound=2)
        a, b = root.children
        assert a.is_error
        assert a.content == "[error: list failed A]"
        assert not b.is_error
        assert _ids(b) == ["B1"]

    async def test_grandchild_failure_stays_local(self):
        source = FakeSource({"R": ["A"], "A": ["A1", "A2"]}, fail_fetch={"A2"})
        root = await fetch_tree(source, "R", depth_bound=2)
        [a] = root.children
        assert not a.is_error
        assert [c.is_error for c in a.children] == [False, True]

    async def test_cancellation_is_not_stubbed(self):
        class CancellingSource(FakeSource):
            async def fetch_node(self, node_id):
                if node_id == "A":
                    raise asyncio.CancelledError
                return await super().fetch_node(node_id)

        with pytest.raises(asyncio.CancelledError):
            await fetch_tree(CancellingSource({"R": ["A"]}), "R", depth_bound=1)

    async def test_every_listed_child_appears_once(self):
        tree = {"R": [f"C{i}" for i in range(12)]}
        source = FakeSource(tree, fail_fetch={"C3", "C7"})
        root = await fetch_tree(source, "R", depth_bound=1, concurrency=3)
        assert _ids(root) == tree["R"]
        assert sorted(source.fetched) == sorted(["R", *tree["R"]])


class TestTreeFetcher:
    async def test_default_config(self):
        fetcher = TreeFetcher(FakeSource({}))
        assert fetcher.config == FetchConfig(concurrency=5, max_depth=2)

    async def test_metrics(self):
        metrics = MagicMock()
        source = FakeSource({"R": ["A", "B"]}, fail_fetch={"B"})
        await TreeFetcher(source, FetchConfig(max_depth=1), metrics=metrics).fetch("R")
        counters = [c.args[0] for c in metrics.increment.call_args_list]
        assert counters.count("confluence_reader.tree_nodes_total") == 2
        assert counters.count("confluence_reader.tree_node_failures_total") == 1
        metrics.timing.assert_called_once()
        assert metrics.timing.call_args.args[0] == "confluence_reader.tree_fetch_duration_ms"

    async def test_iter_nodes_preorder(self):
        source = FakeSource({"R": ["A", "B"], "A": ["A1"]})
        root = await TreeFetcher(source, FetchConfig(max_depth=2)).fetch("R")
        assert [(d, n.id) for d, n in root.iter_nodes()] == [
            (0, "R"), (1, "A"), (2, "A1"), (1, "B"),
        ]


class TestFetchConfig:
    def test_rejects_zero_concurrency(self):
        with pytest.raises(ValueError, match="concurrency"):
            FetchConfig(concurrency=0)

    def test_rejects_negative_depth(self):
        with pytest.raises(ValueError, match="max_depth"):
            FetchConfig(max_depth=-1)


class TestErrorStub:
    def test_stub_shape(self):
        stub = error_stub(ChildRef("9", "Nine"), ValueError("bad"))
        assert stub.to_dict() == {
            "id": "9",
            "title": "Nine",
            "content": "[error: bad]",
            "children": [],
            "error": True,
        }
