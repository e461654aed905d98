"""Graph Export — linked-note discovery and rendering to markdown, XML or print view."""

from src.graph_export.document_source import DocumentHandle, DocumentSource
from src.graph_export.exporters import (
    EXPORT_FORMATS,
    export_markdown_report,
    export_print_markdown,
    export_xml,
    render_export,
)
from src.graph_export.models import (
    ExportConfiguration,
    ExportNode,
    ExportOutcome,
    TraversalResult,
)
from src.graph_export.service import GraphExportService
from src.graph_export.traversal import BFSTraversal

__all__ = [
    "BFSTraversal",
    "DocumentHandle",
    "DocumentSource",
    "EXPORT_FORMATS",
    "ExportConfiguration",
    "ExportNode",
    "ExportOutcome",
    "GraphExportService",
    "TraversalResult",
    "export_markdown_report",
    "export_print_markdown",
    "export_xml",
    "render_export",
]
