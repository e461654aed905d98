"""
Entry point — runs one export directly, without the MCP server.

Reads the vault location and depth defaults from GRAPH_EXPORT_* settings
(.env is honoured) and prints the rendered export to stdout.

Usage:
    python main.py "Root Note" [markdown|xml|print]

For MCP server mode (stdio transport):
    python -m src.graph_export.server
"""

import asyncio
import sys

from src.graph_export.config import GraphExportSettings
from src.graph_export.service import GraphExportService
from src.shared.exceptions import ExportError
from src.shared.logging import setup_logging
from src.sources import open_document_source


async def main(argv: list[str]) -> int:
    if not argv:
        print(__doc__, file=sys.stderr)
        return 2

    settings = GraphExportSettings()
    logger = setup_logging("graph_export", level=settings.log_level)

    root_note = argv[0]
    export_format = argv[1] if len(argv) > 1 else ""

    try:
        source = await open_document_source(settings)
        service = GraphExportService(source, settings)
        outcome = await service.run(service.build_config(root_note, export_format=export_format))
    except ExportError as exc:
        logger.error("Export failed: %s", exc)
        return 1

    if not outcome.succeeded:
        logger.error(outcome.error)
        return 1

    print(outcome.output)
    if outcome.missing_notes:
        logger.info("Missing notes: %s", ", ".join(outcome.missing_notes))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
