"""
BFS Traversal — discovers the linked-note tree below a root note.

Two passes over the same tree:
  1. Breadth-first structure pass.  Builds one ExportNode per reachable
     note, layer by layer, stopping expansion at ``title_depth``.
  2. Pre-order content pass.  Reads bodies only for nodes within
     ``content_depth``.  Skipped entirely when ``read_content`` is False,
     which leaves every ``content`` as None.

Each ``traverse`` call starts from empty visited/missing state, so one
engine instance can be reused for many exports.
"""

import logging
from collections import deque
from typing import Iterable

from src.graph_export.document_source import DocumentHandle, DocumentSource
from src.graph_export.models import ExportNode, TraversalResult

logger = logging.getLogger("graph_export.traversal")


class BFSTraversal:
    """Breadth-first note discovery with separate content and title depths."""

    def __init__(
        self,
        source: DocumentSource,
        content_depth: int,
        title_depth: int,
        excluded_notes: Iterable[str] = (),
        read_content: bool = True,
    ):
        self._source = source
        self._read_content = read_content
        self._content_depth = content_depth
        self._title_depth = title_depth
        self._excluded_names = list(excluded_notes)

        self._visited: set[str] = set()
        self._excluded_ids: set[str] = set()
        self._nodes: dict[str, ExportNode] = {}
        self._missing: dict[str, None] = {}  # insertion-ordered set

    @property
    def content_depth(self) -> int:
        return self._content_depth

    @property
    def title_depth(self) -> int:
        return self._title_depth

    @property
    def nodes(self) -> dict[str, ExportNode]:
        """Nodes created by the last traversal, keyed by note id."""
        return dict(self._nodes)

    def get_missing_notes(self) -> list[str]:
        """Reference names from the last traversal that resolved to no note."""
        return list(self._missing)

    # ─── Public API ───────────────────────────────────────

    async def traverse(self, root_id: str) -> TraversalResult | None:
        """Build the export tree rooted at ``root_id``.

        Returns None when the root itself cannot be resolved; unresolved
        links further down are collected in ``missing_notes`` instead.
        """
        self._reset()

        root = await self._source.resolve_identifier(root_id)
        if root is None:
            logger.error("Root note not found: %s", root_id)
            return None

        await self._resolve_exclusions(root)

        root_node = await self._create_node(root, 0)
        self._visited.add(root.id)

        queue: deque[tuple[DocumentHandle, int, ExportNode]] = deque()
        queue.append((root, 0, root_node))

        while queue:
            handle, depth, parent = queue.popleft()

            if depth >= self._title_depth:
                continue

            references = await self._source.get_outgoing_references(handle)
            if not references:
                continue

            for reference in references:
                target = await self._source.resolve_identifier(reference, source_id=handle.id)
                if target is None:
                    self._missing.setdefault(reference, None)
                    continue
                if target.id in self._visited or target.id in self._excluded_ids:
                    continue

                self._visited.add(target.id)
                child = await self._create_node(target, depth + 1)
                parent.children.append(child)
                queue.append((target, depth + 1, child))

        if self._read_content:
            await self._hydrate_content(root_node)

        logger.info(
            "Traversal from %s found %d notes (%d missing references)",
            root.id, len(self._nodes), len(self._missing),
        )
        return TraversalResult(root=root_node, missing_notes=self.get_missing_notes())

    # ─── Internals ────────────────────────────────────────

    def _reset(self) -> None:
        self._visited.clear()
        self._excluded_ids.clear()
        self._nodes.clear()
        self._missing.clear()

    async def _resolve_exclusions(self, root: DocumentHandle) -> None:
        for name in self._excluded_names:
            handle = await self._source.resolve_identifier(name)
            if handle is None:
                logger.debug("Excluded note %s does not resolve; ignoring", name)
            elif handle.id != root.id:
                self._excluded_ids.add(handle.id)

    async def _create_node(self, handle: DocumentHandle, depth: int) -> ExportNode:
        node = ExportNode(
            id=handle.id,
            title=await self._source.get_title(handle),
            depth=depth,
            include_content=depth <= self._content_depth,
            last_modified=await self._source.get_last_modified(handle),
        )
        self._nodes[handle.id] = node
        return node

    async def _hydrate_content(self, node: ExportNode) -> None:
        if node.include_content:
            node.content = await self._source.get_body(DocumentHandle(node.id))
        else:
            node.content = None

        for child in node.children:
            await self._hydrate_content(child)
