"""
Unit tests for the BFS traversal engine.

All notes come from InMemoryDocumentSource, so no disk or database is needed.
Run with: pytest tests/test_graph_export/test_traversal.py -v
"""

import asyncio
import logging
from datetime import datetime, timezone

import pytest

from src.graph_export.exporters import flatten_tree, max_depth
from src.graph_export.traversal import BFSTraversal
from src.sources.memory import InMemoryDocumentSource


def _titles(node) -> list[str]:
    return [child.title for child in node.children]


# ──────────────────────────────────────────────────
# Tree shape
# ──────────────────────────────────────────────────


class TestTreeShape:
    """Breadth-first structure pass."""

    async def test_reference_scenario(self, scenario_source):
        engine = BFSTraversal(scenario_source, content_depth=1, title_depth=2)
        result = await engine.traverse("A")

        root = result.root
        assert root.title == "A"
        assert _titles(root) == ["B", "C"]
        b, c = root.children
        assert _titles(b) == ["D"]  # A-from-B suppressed
        assert c.children == []

        notes = flatten_tree(root)
        assert [n.title for n in notes] == ["A", "B", "C", "D"]
        assert max_depth(notes) == 2

    async def test_depths_increase_by_one_per_edge(self, scenario_source):
        engine = BFSTraversal(scenario_source, content_depth=1, title_depth=2)
        result = await engine.traverse("A")

        def check(node):
            for child in node.children:
                assert child.depth == node.depth + 1
                check(child)

        assert result.root.depth == 0
        check(result.root)

    async def test_root_without_links_is_single_node(self):
        source = InMemoryDocumentSource()
        source.add_note("Alone.md", body="just me")

        result = await BFSTraversal(source, 1, 3).traverse("Alone")

        assert result.root.children == []
        assert result.missing_notes == []
        assert max_depth(flatten_tree(result.root)) == 0

    async def test_absent_link_list_means_no_children(self):
        source = InMemoryDocumentSource()
        note = source.add_note("Broken.md", body="x")
        note.links = None

        result = await BFSTraversal(source, 1, 2).traverse("Broken")

        assert result.root.children == []
        assert result.missing_notes == []

    async def test_children_keep_link_order(self):
        source = InMemoryDocumentSource()
        source.add_note("Hub.md", links=["Zeta", "Alpha", "Mid"])
        for name in ("Zeta", "Alpha", "Mid"):
            source.add_note(f"{name}.md")

        result = await BFSTraversal(source, 1, 1).traverse("Hub")

        assert _titles(result.root) == ["Zeta", "Alpha", "Mid"]

    async def test_shallowest_path_wins(self):
        """C is linked from the root and from B; BFS attaches it to the root."""
        source = InMemoryDocumentSource()
        source.add_note("A.md", links=["B", "C"])
        source.add_note("B.md", links=["C"])
        source.add_note("C.md")

        result = await BFSTraversal(source, 1, 3).traverse("A")

        assert _titles(result.root) == ["B", "C"]
        assert result.root.children[0].children == []
        assert result.root.children[1].depth == 1

    async def test_layers_are_processed_in_fifo_order(self):
        source = InMemoryDocumentSource()
        source.add_note("A.md", links=["B", "C"])
        source.add_note("B.md", links=["E"])
        source.add_note("C.md", links=["D"])
        source.add_note("D.md")
        source.add_note("E.md")

        result = await BFSTraversal(source, 2, 2).traverse("A")

        assert [n.title for n in flatten_tree(result.root)] == ["A", "B", "C", "E", "D"]

    async def test_links_resolve_relative_to_linking_note(self):
        calls: list[tuple[str, str | None]] = []

        class RecordingSource(InMemoryDocumentSource):
            async def resolve_identifier(self, name, source_id=None):
                calls.append((name, source_id))
                return await super().resolve_identifier(name, source_id)

        source = RecordingSource()
        source.add_note("A.md", links=["B"])
        source.add_note("B.md")

        await BFSTraversal(source, 1, 1).traverse("A")

        assert calls == [("A", None), ("B", "A.md")]


# ──────────────────────────────────────────────────
# Deduplication
# ──────────────────────────────────────────────────


class TestDeduplication:
    """Each note appears at most once per tree."""

    async def test_diamond_produces_single_node(self):
        source = InMemoryDocumentSource()
        source.add_note("A.md", links=["B", "C"])
        source.add_note("B.md", links=["D"])
        source.add_note("C.md", links=["D"])
        source.add_note("D.md")

        result = await BFSTraversal(source, 2, 3).traverse("A")

        b, c = result.root.children
        assert _titles(b) == ["D"]
        assert c.children == []
        assert len(flatten_tree(result.root)) == 4

    async def test_cycle_does_not_repeat_nodes(self):
        source = InMemoryDocumentSource()
        source.add_note("A.md", links=["B"])
        source.add_note("B.md", links=["C"])
        source.add_note("C.md", links=["A", "B"])

        result = await BFSTraversal(source, 5, 5).traverse("A")

        ids = [n.id for n in flatten_tree(result.root)]
        assert ids == ["A.md", "B.md", "C.md"]
        assert len(result.root.children[0].children[0].children) == 0

    async def test_self_reference_is_ignored(self):
        source = InMemoryDocumentSource()
        source.add_note("Self.md", links=["Self", "Self.md"])

        result = await BFSTraversal(source, 1, 2).traverse("Self")

        assert result.root.children == []
        assert result.missing_notes == []

    async def test_duplicate_link_followed_once(self):
        source = InMemoryDocumentSource()
        source.add_note("A.md", links=["B", "B", "B"])
        source.add_note("B.md")

        result = await BFSTraversal(source, 1, 1).traverse("A")

        assert _titles(result.root) == ["B"]

    async def test_node_count_matches_unique_reachable_notes(self):
        source = InMemoryDocumentSource()
        names = [f"N{i}" for i in range(6)]
        for i, name in enumerate(names):
            # Every note links to every other note
            source.add_note(f"{name}.md", links=[n for n in names if n != name])

        result = await BFSTraversal(source, 1, 3).traverse("N0")

        notes = flatten_tree(result.root)
        assert len(notes) == 6
        assert {n.id for n in notes} == {f"{n}.md" for n in names}


# ──────────────────────────────────────────────────
# Depth thresholds
# ──────────────────────────────────────────────────


def _chain_source(length: int) -> InMemoryDocumentSource:
    """N0 -> N1 -> ... -> N{length-1}."""
    source = InMemoryDocumentSource()
    for i in range(length):
        links = [f"N{i + 1}"] if i + 1 < length else []
        source.add_note(f"N{i}.md", body=f"body {i}", links=links)
    return source


def _by_depth(root) -> dict[int, object]:
    return {node.depth: node for node in flatten_tree(root)}


class TestDepthThresholds:
    """content_depth and title_depth boundaries."""

    @pytest.mark.parametrize("k", [1, 2, 3])
    async def test_content_boundary(self, k):
        source = _chain_source(6)
        result = await BFSTraversal(source, content_depth=k, title_depth=5).traverse("N0")
        nodes = _by_depth(result.root)

        assert nodes[k].include_content is True
        assert nodes[k].content == f"body {k}"
        assert nodes[k + 1].include_content is False
        assert nodes[k + 1].content is None

    async def test_bodies_only_read_within_content_depth(self):
        source = _chain_source(5)

        await BFSTraversal(source, content_depth=1, title_depth=4).traverse("N0")

        assert source.body_reads == ["N0.md", "N1.md"]

    async def test_structure_only_run_reads_no_bodies(self):
        source = _chain_source(4)

        result = await BFSTraversal(
            source, content_depth=1, title_depth=3, read_content=False,
        ).traverse("N0")

        assert source.body_reads == []
        assert result.root.include_content is True
        assert result.root.content is None
        assert len(flatten_tree(result.root)) == 4

    @pytest.mark.parametrize("m", [1, 2, 4])
    async def test_title_boundary(self, m):
        source = _chain_source(8)
        result = await BFSTraversal(source, content_depth=1, title_depth=m).traverse("N0")
        nodes = _by_depth(result.root)

        assert max(nodes) == m
        assert nodes[m].children == []

    async def test_frontier_links_are_not_reported_missing(self):
        source = InMemoryDocumentSource()
        source.add_note("A.md", links=["B"])
        source.add_note("B.md", links=["Ghost"])

        result = await BFSTraversal(source, 1, 1).traverse("A")

        assert result.missing_notes == []

    async def test_root_always_has_content(self):
        source = _chain_source(2)
        result = await BFSTraversal(source, content_depth=0, title_depth=1).traverse("N0")

        assert result.root.include_content is True
        assert result.root.content == "body 0"
        assert result.root.children[0].content is None

    async def test_empty_body_stays_empty_string(self):
        source = InMemoryDocumentSource()
        source.add_note("Empty.md", body="")

        result = await BFSTraversal(source, 1, 1).traverse("Empty")

        assert result.root.content == ""


# ──────────────────────────────────────────────────
# Missing references and failures
# ──────────────────────────────────────────────────


class TestMissingReferences:
    """Unresolved links and an unresolved root."""

    async def test_ghost_reference_recorded(self):
        source = InMemoryDocumentSource()
        source.add_note("A.md", links=["Ghost"])

        result = await BFSTraversal(source, 1, 2).traverse("A")

        assert result.missing_notes == ["Ghost"]
        assert result.missing_count == 1
        assert "Ghost" not in [n.title for n in flatten_tree(result.root)]

    async def test_same_missing_name_from_two_notes_recorded_once(self):
        source = InMemoryDocumentSource()
        source.add_note("A.md", links=["B", "Ghost"])
        source.add_note("B.md", links=["Ghost", "Other Ghost", "Ghost"])

        result = await BFSTraversal(source, 1, 2).traverse("A")

        assert result.missing_notes == ["Ghost", "Other Ghost"]

    async def test_missing_root_returns_none(self, scenario_source, caplog):
        engine = BFSTraversal(scenario_source, 1, 2)

        with caplog.at_level(logging.ERROR, logger="graph_export.traversal"):
            result = await engine.traverse("Nowhere")

        assert result is None
        assert "Root note not found: Nowhere" in caplog.text

    async def test_get_missing_notes_reflects_last_run(self, scenario_source):
        engine = BFSTraversal(scenario_source, 1, 2)

        await engine.traverse("A")
        assert engine.get_missing_notes() == ["Ghost"]

        await engine.traverse("D")
        assert engine.get_missing_notes() == []


# ──────────────────────────────────────────────────
# Engine reuse, exclusions and suspending sources
# ──────────────────────────────────────────────────


class TestEngineLifecycle:
    """State handling across traverse() calls."""

    async def test_repeated_runs_produce_equal_trees(self, scenario_source):
        engine = BFSTraversal(scenario_source, 1, 2)

        first = await engine.traverse("A")
        second = await engine.traverse("A")

        assert [n.id for n in flatten_tree(first.root)] == [n.id for n in flatten_tree(second.root)]
        assert first.root is not second.root

    async def test_fresh_run_rereads_titles_and_timestamps(self):
        source = InMemoryDocumentSource()
        note = source.add_note("A.md", title="Old", modified=datetime(2024, 1, 1, tzinfo=timezone.utc))
        engine = BFSTraversal(source, 1, 1)

        await engine.traverse("A.md")
        note.title = "New"
        note.modified = datetime(2025, 6, 1, tzinfo=timezone.utc)
        result = await engine.traverse("A.md")

        assert result.root.title == "New"
        assert result.root.last_modified == datetime(2025, 6, 1, tzinfo=timezone.utc)

    async def test_nodes_arena_keyed_by_id(self, scenario_source):
        engine = BFSTraversal(scenario_source, 1, 2)
        await engine.traverse("A")

        assert set(engine.nodes) == {"A.md", "B.md", "C.md", "D.md"}
        assert engine.nodes["D.md"].depth == 2

    async def test_token_count_left_at_default(self, scenario_source):
        result = await BFSTraversal(scenario_source, 1, 2).traverse("A")

        assert all(n.token_count == 0 for n in flatten_tree(result.root))

    async def test_excluded_notes_are_skipped(self, scenario_source):
        engine = BFSTraversal(scenario_source, 1, 2, excluded_notes=["B", "Unknown"])
        result = await engine.traverse("A")

        assert [n.title for n in flatten_tree(result.root)] == ["A", "C"]
        assert result.missing_notes == ["Ghost"]

    async def test_root_cannot_be_excluded(self, scenario_source):
        engine = BFSTraversal(scenario_source, 1, 1, excluded_notes=["A"])
        result = await engine.traverse("A")

        assert result.root.title == "A"
        assert _titles(result.root) == ["B", "C"]

    async def test_order_holds_when_fetches_suspend(self, scenario_source):
        class SlowSource(InMemoryDocumentSource):
            async def resolve_identifier(self, name, source_id=None):
                await asyncio.sleep(0)
                return await super().resolve_identifier(name, source_id)

            async def get_body(self, handle):
                await asyncio.sleep(0.001)
                return await super().get_body(handle)

        slow = SlowSource()
        slow.add_note("A.md", body="a", links=["B", "C"])
        slow.add_note("B.md", body="b", links=["D"])
        slow.add_note("C.md", body="c")
        slow.add_note("D.md", body="d")

        result = await BFSTraversal(slow, 1, 2).traverse("A")

        assert [n.title for n in flatten_tree(result.root)] == ["A", "B", "C", "D"]
        assert slow.body_reads == ["A.md", "B.md", "C.md"]
