"""Shared fixtures for graph export tests."""

from datetime import datetime, timezone

import pytest

from src.graph_export.models import ExportNode
from src.sources.memory import InMemoryDocumentSource

FIXED_TIME = datetime(2025, 1, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)


@pytest.fixture
def fixed_time() -> datetime:
    return FIXED_TIME


@pytest.fixture
def make_node():
    """Factory for hand-built ExportNode trees."""

    def _make(
        title: str,
        node_id: str | None = None,
        depth: int = 0,
        content: str | None = "default",
        children: list[ExportNode] | None = None,
        include_content: bool = True,
    ) -> ExportNode:
        return ExportNode(
            id=node_id or f"{title}.md",
            title=title,
            depth=depth,
            include_content=include_content,
            content=f"Content for {title}" if content == "default" else content,
            children=children or [],
            token_count=10,
            last_modified=FIXED_TIME,
        )

    return _make


@pytest.fixture
def scenario_source() -> InMemoryDocumentSource:
    """A links to B and C; B links to D and back to A; C links to Ghost."""
    source = InMemoryDocumentSource()
    source.add_note("A.md", body="Body of A [[B]] [[C]]", links=["B", "C"])
    source.add_note("B.md", body="Body of B [[D]] [[A]]", links=["D", "A"])
    source.add_note("C.md", body="Body of C [[Ghost]]", links=["Ghost"])
    source.add_note("D.md", body="Body of D", links=[])
    return source
