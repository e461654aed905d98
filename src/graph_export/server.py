"""
Graph Export — MCP Server

Exposes the note-graph export as MCP tools so an assistant can pull a
root note and its linked neighbourhood into its context in one call.
Each tool returns a JSON string.

Run as:  python -m src.graph_export.server        (stdio transport)
"""

import json

from mcp.server.fastmcp import FastMCP

from src.graph_export.config import GraphExportSettings
from src.graph_export.exporters import EXPORT_FORMATS
from src.graph_export.service import GraphExportService
from src.shared.exceptions import ExportError
from src.shared.logging import setup_logging
from src.sources import open_document_source

logger = setup_logging("graph_export", level="INFO")

mcp = FastMCP("GraphExport")

# ─── Shared resources (lazy init) ─────────────────────────

_settings: GraphExportSettings | None = None
_service: GraphExportService | None = None


def _get_settings() -> GraphExportSettings:
    """Lazy-initialise settings from environment variables."""
    global _settings
    if _settings is None:
        _settings = GraphExportSettings()
        logger.setLevel(_settings.log_level.upper())
    return _settings


async def _get_service() -> GraphExportService:
    """Lazy-initialise the document source and export service on first tool call."""
    global _service
    if _service is None:
        settings = _get_settings()
        source = await open_document_source(settings)
        _service = GraphExportService(source, settings)
    return _service


def _split_names(raw: str) -> list[str]:
    return [name.strip() for name in raw.split(",") if name.strip()]


# ─── Tool 1 ──────────────────────────────────────────────


@mcp.tool()
async def export_note_graph(
    root_note: str,
    export_format: str = "",
    content_depth: int = 0,
    title_depth: int = 0,
    excluded_notes: str = "",
) -> str:
    """Export a note and the notes it links to, as one document.

    Starting from root_note, linked notes are discovered breadth-first.
    Notes up to content_depth links away are included with their full
    text; notes up to title_depth links away are listed by title only.

    Args:
        root_note: Note name or vault path, e.g. "Project Alpha" or
              "Projects/Project Alpha.md".
        export_format: "markdown" (report with front matter), "xml", or
              "print" (nested headings).  Empty = server default.
        content_depth: Link distance whose notes include full text.
              0 = server default.
        title_depth: Link distance at which discovery stops.  Must be
              >= content_depth.  0 = server default.
        excluded_notes: Comma-separated notes to leave out of the export.
    """
    try:
        service = await _get_service()
        config = service.build_config(
            root_note,
            export_format=export_format,
            content_depth=content_depth,
            title_depth=title_depth,
            excluded_notes=_split_names(excluded_notes),
        )
        outcome = await service.run(config)
    except ExportError as exc:
        logger.warning("export_note_graph failed: %s", exc)
        return json.dumps({"error": str(exc)})
    return json.dumps(outcome.to_dict(), default=str)


# ─── Tool 2 ──────────────────────────────────────────────


@mcp.tool()
async def find_missing_notes(root_note: str, title_depth: int = 0) -> str:
    """List links reachable from root_note that point at notes that do not exist.

    Args:
        root_note: Note name or vault path to start from.
        title_depth: How many links away to look.  0 = server default.
    """
    try:
        service = await _get_service()
        missing = await service.find_missing(root_note, title_depth or None)
    except ExportError as exc:
        logger.warning("find_missing_notes failed: %s", exc)
        return json.dumps({"error": str(exc)})
    if missing is None:
        return json.dumps({"error": f"Root note not found: {root_note}"})
    return json.dumps({
        "root_note": root_note,
        "missing_notes": missing,
        "count": len(missing),
    })


# ─── Tool 3 ──────────────────────────────────────────────


@mcp.tool()
def list_export_formats() -> str:
    """List the export formats export_note_graph accepts."""
    return json.dumps({
        "formats": sorted(EXPORT_FORMATS),
        "default": _get_settings().export_format,
    })


if __name__ == "__main__":
    mcp.run()
