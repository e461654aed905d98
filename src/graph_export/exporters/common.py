"""Helpers shared by the metadata-bearing exporters."""

from collections import deque
from datetime import datetime, timezone

from src.graph_export.models import ExportNode

PROCESSING_ORDER = "BFS (Breadth-First Search)"

DESCRIPTION_LINES = (
    "This export contains a knowledge graph of interconnected Obsidian notes.",
    "Notes are presented in breadth-first order starting from the root note.",
    "Links between notes are preserved as [[wiki-style links]].",
    "Missing notes (referenced but not found) are listed separately.",
)


def flatten_tree(root: ExportNode) -> list[ExportNode]:
    """Level-order walk of an in-memory tree, each id kept once.

    The list position (1-based) is the note number used in exports.
    """
    queue: deque[ExportNode] = deque([root])
    seen: set[str] = set()
    result: list[ExportNode] = []

    while queue:
        node = queue.popleft()
        if node.id in seen:
            continue
        seen.add(node.id)
        result.append(node)
        queue.extend(node.children)

    return result


def max_depth(notes: list[ExportNode]) -> int:
    return max((note.depth for note in notes), default=0)


def iso_timestamp(moment: datetime | None = None) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix.

    ``moment`` must be timezone-aware; naive datetimes raise ValueError.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None or moment.utcoffset() is None:
        raise ValueError(f"iso_timestamp needs a timezone-aware datetime, got {moment!r}")
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
