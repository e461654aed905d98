"""
Print-Friendly Markdown Exporter

Nested headings that mirror the tree: the root is ``#``, its children
``##`` and so on.  No metadata, numbering or escaping.

The tree must be acyclic.  Trees built by BFSTraversal always are; a
hand-built tree with a cycle recurses until Python's recursion limit.
"""

from src.graph_export.models import ExportNode


def export_print_markdown(root: ExportNode) -> str:
    return _render_node(root, 0)


def _render_node(node: ExportNode, level: int) -> str:
    parts = [f"{'#' * (level + 1)} {node.title}\n\n"]

    if node.content and node.include_content:
        parts.append(f"{node.content}\n\n")

    for child in node.children:
        parts.append(_render_node(child, level + 1))

    return "".join(parts)
