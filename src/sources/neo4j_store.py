"""
Neo4j Document Source — notes stored as ``:Note`` nodes.

Schema::

    (:Note {path, name, title, content, modified, links})

``path`` is the canonical id, ``name`` the lookup name links use and
``links`` the ordered list of raw reference names found in the note
(unresolvable ones included, so they can be reported as missing).
"""

import logging
from datetime import datetime, timezone
from typing import Any

from src.graph_export.document_source import DocumentHandle
from src.shared.database import Neo4jHandler
from src.shared.exceptions import DocumentSourceError

logger = logging.getLogger("graph_export.neo4j_store")

_RESOLVE_BY_PATH = (
    "MATCH (n:Note) WHERE n.path = $name OR n.path = $name + '.md' "
    "RETURN n.path AS path ORDER BY size(n.path) LIMIT 1"
)
_RESOLVE_BY_NAME = (
    "MATCH (n:Note) WHERE toLower(n.name) = toLower($name) "
    "RETURN n.path AS path ORDER BY size(n.path), n.path LIMIT 1"
)
_NOTE_FIELD = "MATCH (n:Note {path: $path}) RETURN n.{field} AS value LIMIT 1"
_UPSERT_NOTE = (
    "MERGE (n:Note {path: $path}) "
    "SET n.name = $name, n.title = $title, n.content = $content, "
    "    n.links = $links, n.modified = $modified"
)
_ENSURE_CONSTRAINT = (
    "CREATE CONSTRAINT note_path IF NOT EXISTS "
    "FOR (n:Note) REQUIRE n.path IS UNIQUE"
)


def _to_datetime(value: Any) -> datetime:
    """Normalise a stored ``modified`` value (epoch millis, ISO string or neo4j DateTime)."""
    if value is None:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    if hasattr(value, "to_native"):
        return _to_datetime(value.to_native())
    raise DocumentSourceError(f"Unsupported modified value: {value!r}")


class Neo4jDocumentSource:
    """Read-mostly document source over a Neo4j note store."""

    def __init__(self, handler: Neo4jHandler):
        self._handler = handler

    async def ensure_schema(self) -> None:
        await self._handler.write(_ENSURE_CONSTRAINT)

    async def upsert_note(
        self,
        path: str,
        content: str,
        links: list[str],
        title: str | None = None,
        modified: datetime | None = None,
    ) -> None:
        """Create or replace a note in the store."""
        name = path.rsplit("/", 1)[-1].removesuffix(".md")
        await self._handler.write(_UPSERT_NOTE, {
            "path": path,
            "name": name,
            "title": title or name,
            "content": content,
            "links": list(links),
            "modified": (modified or datetime.now(timezone.utc)).isoformat(),
        })

    async def _field(self, handle: DocumentHandle, field: str) -> Any:
        row = await self._handler.run_single(
            _NOTE_FIELD.replace("{field}", field), {"path": handle.id},
        )
        if row is None:
            raise DocumentSourceError(f"Note vanished from store: {handle.id}")
        return row["value"]

    # ─── DocumentSource ───────────────────────────────────

    async def resolve_identifier(
        self, name: str, source_id: str | None = None
    ) -> DocumentHandle | None:
        name = name.strip()
        if not name:
            return None
        for query in (_RESOLVE_BY_PATH, _RESOLVE_BY_NAME):
            row = await self._handler.run_single(query, {"name": name})
            if row:
                return DocumentHandle(row["path"])
        return None

    async def get_outgoing_references(self, handle: DocumentHandle) -> list[str] | None:
        links = await self._field(handle, "links")
        if not isinstance(links, list):
            if links is not None:
                logger.warning("Ignoring malformed links on %s: %r", handle.id, links)
            return None
        return [str(link) for link in links]

    async def get_title(self, handle: DocumentHandle) -> str:
        title = await self._field(handle, "title")
        return title or handle.id.rsplit("/", 1)[-1].removesuffix(".md")

    async def get_last_modified(self, handle: DocumentHandle) -> datetime:
        return _to_datetime(await self._field(handle, "modified"))

    async def get_body(self, handle: DocumentHandle) -> str:
        return await self._field(handle, "content") or ""
