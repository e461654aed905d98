"""
XML Exporter

Same metadata and numbering as the markdown report, as an XML document
meant for parsers and LLM prompts.  Titles and the vault path are
entity-escaped; note bodies go into CDATA sections untouched except for
the ``]]>`` terminator.
"""

from datetime import datetime
from xml.sax.saxutils import escape

from src.graph_export.exporters.common import (
    DESCRIPTION_LINES,
    PROCESSING_ORDER,
    flatten_tree,
    iso_timestamp,
    max_depth,
)
from src.graph_export.models import ExportNode

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
ROOT_ELEMENT = "obsidian_export"

_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_text(text: str) -> str:
    """Escape ``& < > " '`` for use in element text or attribute values."""
    return escape(text, _QUOTE_ENTITIES)


def escape_cdata(text: str) -> str:
    """Keep ``]]>`` inside content from closing the CDATA section early."""
    return text.replace("]]>", "]]&gt;")


def export_xml(
    root: ExportNode,
    vault_path: str,
    missing_notes: int = 0,
    exported_at: datetime | None = None,
) -> str:
    """Render the tree as an ``<obsidian_export>`` XML document."""
    notes = flatten_tree(root)

    metadata = _metadata(
        root, vault_path, len(notes), missing_notes, max_depth(notes), exported_at,
    )
    return "\n".join([
        XML_DECLARATION,
        f"<{ROOT_ELEMENT}>",
        metadata,
        _note_structure(notes),
        _note_contents(notes),
        f"</{ROOT_ELEMENT}>",
    ])


def _metadata(
    root: ExportNode,
    vault_path: str,
    total_notes: int,
    missing_notes: int,
    depth: int,
    exported_at: datetime | None,
) -> str:
    return "\n".join([
        "  <metadata>",
        f"    <export_timestamp>{iso_timestamp(exported_at)}</export_timestamp>",
        f"    <vault_path>{escape_text(vault_path)}</vault_path>",
        f"    <starting_note>{escape_text(root.title)}</starting_note>",
        f"    <total_notes_exported>{total_notes}</total_notes_exported>",
        f"    <missing_notes_count>{missing_notes}</missing_notes_count>",
        f"    <max_depth_used>{depth}</max_depth_used>",
        f"    <processing_order>{PROCESSING_ORDER}</processing_order>",
        "  </metadata>",
    ])


def _note_structure(notes: list[ExportNode]) -> str:
    description = "\n    ".join(DESCRIPTION_LINES)
    included = "\n".join(
        f'      <note id="{index}" name="{escape_text(note.title)}" />'
        for index, note in enumerate(notes, start=1)
    )
    return "\n".join([
        "  <note_structure>",
        f"    <description>{description}</description>",
        "    <included_notes>",
        included,
        "    </included_notes>",
        "  </note_structure>",
    ])


def _note_contents(notes: list[ExportNode]) -> str:
    entries = "\n".join(
        f'  <note id="{index}" name="{escape_text(note.title)}">\n'
        f"    <![CDATA[{escape_cdata(note.content or '')}]]>\n"
        "  </note>"
        for index, note in enumerate(notes, start=1)
    )
    return f"  <note_contents>\n{entries}\n  </note_contents>"
