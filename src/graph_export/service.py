"""
Export Service — validate, traverse, render.

Ties a DocumentSource, the BFS traversal engine and the exporters into
one call that the MCP server and the CLI share.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from src.graph_export.config import GraphExportSettings
from src.graph_export.document_source import DocumentSource, RefreshableSource
from src.graph_export.exporters import EXPORT_FORMATS, flatten_tree, max_depth, render_export
from src.graph_export.models import ExportConfiguration, ExportOutcome
from src.graph_export.traversal import BFSTraversal
from src.shared.exceptions import ConfigurationError, UnknownFormatError
from src.shared.logging import generate_run_id

logger = logging.getLogger("graph_export.service")


class GraphExportService:
    """Runs exports against a single document source."""

    def __init__(
        self,
        source: DocumentSource,
        settings: GraphExportSettings | None = None,
        vault_name: str | None = None,
    ):
        self._source = source
        self._settings = settings or GraphExportSettings()
        self._vault_name = (
            vault_name
            or self._settings.vault_name
            or Path(self._settings.vault_path).name
            or "vault"
        )

    @property
    def vault_name(self) -> str:
        return self._vault_name

    def build_config(self, root_note: str, **overrides) -> ExportConfiguration:
        """Fill unset request fields from settings and validate the result.

        Falsy overrides (0, "", None, empty list) mean "use the default".

        Raises:
            ConfigurationError: If the combined values fail validation.
            UnknownFormatError: If the export format is not registered.
        """
        values = {
            "root_note": root_note,
            "content_depth": self._settings.content_depth,
            "title_depth": self._settings.title_depth,
            "export_format": self._settings.export_format,
        }
        values.update({key: value for key, value in overrides.items() if value})
        return self.validate(values)

    def validate(self, config: ExportConfiguration | dict) -> ExportConfiguration:
        if not isinstance(config, ExportConfiguration):
            try:
                config = ExportConfiguration.model_validate(config)
            except ValidationError as exc:
                raise ConfigurationError(str(exc)) from exc

        if config.title_depth > self._settings.max_depth:
            raise ConfigurationError(
                f"title_depth {config.title_depth} exceeds max_depth {self._settings.max_depth}"
            )
        if config.export_format not in EXPORT_FORMATS:
            raise UnknownFormatError(
                f"Unknown export format: {config.export_format!r}. "
                f"Valid: {sorted(EXPORT_FORMATS)}"
            )
        return config

    async def run(self, config: ExportConfiguration | dict) -> ExportOutcome:
        """Traverse from the configured root and render the chosen format.

        A root that cannot be resolved yields an outcome with ``error`` set
        and no output; it is not raised.
        """
        config = self.validate(config)
        run_id = generate_run_id()
        logger.info(
            "[%s] Export %s: root=%s content_depth=%d title_depth=%d",
            run_id, config.export_format, config.root_note,
            config.content_depth, config.title_depth,
        )

        await self._refresh_source()
        engine = BFSTraversal(
            self._source,
            content_depth=config.content_depth,
            title_depth=config.title_depth,
            excluded_notes=config.excluded_notes,
        )
        result = await engine.traverse(config.root_note)

        outcome = ExportOutcome(
            run_id=run_id,
            root_note=config.root_note,
            export_format=config.export_format,
        )
        if result is None:
            outcome.error = f"Root note not found: {config.root_note}"
            logger.warning("[%s] %s", run_id, outcome.error)
            return outcome

        notes = flatten_tree(result.root)
        outcome.output = render_export(
            config.export_format, result.root, self._vault_name, result.missing_count,
        )
        outcome.total_notes = len(notes)
        outcome.max_depth = max_depth(notes)
        outcome.missing_notes = result.missing_notes

        logger.info(
            "[%s] Exported %d notes (%d missing, %d chars)",
            run_id, outcome.total_notes, len(outcome.missing_notes), len(outcome.output),
        )
        return outcome

    async def find_missing(self, root_note: str, title_depth: int | None = None) -> list[str] | None:
        """List unresolved references reachable from ``root_note``.

        No note bodies are hydrated; links are still read to walk the graph.
        Returns None when the root is not found.
        """
        depth = title_depth or self._settings.title_depth
        if depth > self._settings.max_depth:
            raise ConfigurationError(
                f"title_depth {depth} exceeds max_depth {self._settings.max_depth}"
            )
        await self._refresh_source()
        engine = BFSTraversal(
            self._source, content_depth=0, title_depth=depth, read_content=False,
        )
        result = await engine.traverse(root_note)
        return result.missing_notes if result else None

    async def _refresh_source(self) -> None:
        # Sources that cache a note index rebuild it so each run sees current notes
        if isinstance(self._source, RefreshableSource):
            await self._source.refresh()
