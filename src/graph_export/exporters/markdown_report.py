"""
Markdown Report Exporter

Front matter with export metadata, a numbered note list, then every
note's content under its own heading.  Notes appear in level order.
"""

from datetime import datetime

from src.graph_export.exporters.common import (
    DESCRIPTION_LINES,
    PROCESSING_ORDER,
    flatten_tree,
    iso_timestamp,
    max_depth,
)
from src.graph_export.models import ExportNode

NOTE_SEPARATOR = "\n\n---\n\n"


def export_markdown_report(
    root: ExportNode,
    vault_path: str,
    missing_notes: int = 0,
    exported_at: datetime | None = None,
) -> str:
    """Render the tree as a markdown report with YAML-style front matter.

    Args:
        root: Root of the export tree.
        vault_path: Display name of the vault, written as a quoted string.
        missing_notes: Number of unresolved references found while traversing.
        exported_at: Timestamp to stamp the export with (defaults to now).
    """
    notes = flatten_tree(root)

    front_matter = _front_matter(
        root, vault_path, len(notes), missing_notes, max_depth(notes), exported_at,
    )
    return f"{front_matter}\n\n{_note_structure(notes)}\n\n{_note_contents(notes)}"


def _front_matter(
    root: ExportNode,
    vault_path: str,
    total_notes: int,
    missing_notes: int,
    depth: int,
    exported_at: datetime | None,
) -> str:
    lines = [
        "---",
        f"export_timestamp: {iso_timestamp(exported_at)}",
        f'vault_path: "{vault_path}"',
        f'starting_note: "{root.title}"',
        f"total_notes_exported: {total_notes}",
        f"missing_notes_count: {missing_notes}",
        f"max_depth_used: {depth}",
        f"processing_order: {PROCESSING_ORDER}",
        "---",
    ]
    return "\n".join(lines)


def _note_structure(notes: list[ExportNode]) -> str:
    description = "\n".join(DESCRIPTION_LINES)
    included = "\n".join(
        f'- Note {index}: "{note.title}"' for index, note in enumerate(notes, start=1)
    )
    return (
        "## Note Structure\n\n"
        f"**Description**:\n{description}\n\n"
        f"**Included Notes**:\n{included}"
    )


def _note_contents(notes: list[ExportNode]) -> str:
    sections = NOTE_SEPARATOR.join(
        f'## Note {index}: "{note.title}"\n\n{note.content or ""}'
        for index, note in enumerate(notes, start=1)
    )
    return f"## Note Contents\n\n{sections}"
