"""Exporters — pure ``tree -> str`` renderers, one per output format."""

from typing import Callable

from src.graph_export.exporters.common import flatten_tree, iso_timestamp, max_depth
from src.graph_export.exporters.markdown_report import export_markdown_report
from src.graph_export.exporters.print_markdown import export_print_markdown
from src.graph_export.exporters.xml_export import export_xml
from src.graph_export.models import ExportNode
from src.shared.exceptions import UnknownFormatError

EXPORT_FORMATS: dict[str, Callable[..., str]] = {
    "markdown": export_markdown_report,
    "xml": export_xml,
    "print": export_print_markdown,
}

# Formats whose output carries vault name and missing-note metadata
METADATA_FORMATS = {"markdown", "xml"}


def render_export(
    export_format: str,
    root: ExportNode,
    vault_path: str,
    missing_notes: int = 0,
) -> str:
    """Render ``root`` with the named exporter.

    Raises:
        UnknownFormatError: If ``export_format`` is not registered.
    """
    exporter = EXPORT_FORMATS.get(export_format)
    if exporter is None:
        raise UnknownFormatError(
            f"Unknown export format: {export_format!r}. Valid: {sorted(EXPORT_FORMATS)}"
        )
    if export_format in METADATA_FORMATS:
        return exporter(root, vault_path, missing_notes)
    return exporter(root)


__all__ = [
    "EXPORT_FORMATS",
    "export_markdown_report",
    "export_print_markdown",
    "export_xml",
    "flatten_tree",
    "iso_timestamp",
    "max_depth",
    "render_export",
]
