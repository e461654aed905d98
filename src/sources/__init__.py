"""Document sources — concrete backends for the traversal engine."""

from src.graph_export.config import GraphExportSettings
from src.graph_export.document_source import DocumentSource
from src.shared.database import Neo4jHandler
from src.shared.exceptions import ConfigurationError
from src.sources.memory import InMemoryDocumentSource, MemoryNote
from src.sources.neo4j_store import Neo4jDocumentSource
from src.sources.vault import VaultDocumentSource, extract_references


async def open_document_source(settings: GraphExportSettings) -> DocumentSource:
    """Create (and connect, where needed) the backend named in settings."""
    backend = settings.source_backend.lower()
    if backend == "vault":
        if not settings.vault_path:
            raise ConfigurationError("GRAPH_EXPORT_VAULT_PATH is not set")
        return VaultDocumentSource(settings.vault_path)
    if backend == "neo4j":
        handler = Neo4jHandler.from_settings(settings)
        await handler.connect()
        return Neo4jDocumentSource(handler)
    raise ConfigurationError(f"Unknown source backend: {settings.source_backend!r}")


__all__ = [
    "InMemoryDocumentSource",
    "MemoryNote",
    "Neo4jDocumentSource",
    "VaultDocumentSource",
    "extract_references",
    "open_document_source",
]
