"""
Neo4j Connection Handler

Owns the async Neo4j driver used by the database-backed note store.
Credentials come from explicit arguments, a settings object, or the
environment (.env is loaded on import).
"""

import os
import logging
from typing import Any

from dotenv import load_dotenv
from neo4j import AsyncGraphDatabase, AsyncDriver

from src.shared.config import BaseExportSettings
from src.shared.exceptions import NoteStoreConnectionError

load_dotenv()

logger = logging.getLogger("graph_export.neo4j_handler")


class Neo4jHandler:
    """
    Manages a single async Neo4j driver for the note store.

    Usage
    -----
    handler = Neo4jHandler()          # reads from .env
    await handler.connect()
    rows = await handler.run("MATCH (n:Note) RETURN n.path AS path")
    await handler.close()

    The handler can also be used as an async context-manager:

        async with Neo4jHandler() as handler:
            await handler.run(...)
    """

    def __init__(
        self,
        uri: str | None = None,
        username: str | None = None,
        password: str | None = None,
        database: str | None = None,
    ):
        self._uri = uri or os.getenv("NEO4J_URI")
        self._username = username or os.getenv("NEO4J_USERNAME")
        self._password = password or os.getenv("NEO4J_PASSWORD")
        self._database = database or os.getenv("NEO4J_DATABASE", "neo4j")
        self._driver: AsyncDriver | None = None

        if not self._uri:
            raise NoteStoreConnectionError("NEO4J_URI is not set (env or argument)")
        if not self._username:
            raise NoteStoreConnectionError("NEO4J_USERNAME is not set (env or argument)")
        if not self._password:
            raise NoteStoreConnectionError("NEO4J_PASSWORD is not set (env or argument)")

    @classmethod
    def from_settings(cls, settings: BaseExportSettings) -> "Neo4jHandler":
        """Build a handler from the shared settings, falling back to env vars."""
        return cls(
            uri=settings.neo4j_uri or None,
            username=settings.neo4j_username or None,
            password=settings.neo4j_password or None,
            database=settings.neo4j_database or None,
        )

    # ─── Lifecycle ──────────────────────────────────────────

    async def connect(self) -> "Neo4jHandler":
        """Create the async driver and verify connectivity.

        Returns:
            Self for method chaining.

        Raises:
            NoteStoreConnectionError: If the database cannot be reached.
        """
        if self._driver is not None:
            return self

        self._driver = AsyncGraphDatabase.driver(
            self._uri, auth=(self._username, self._password)
        )
        try:
            await self._driver.verify_connectivity()
            logger.info("Connected to note store at %s (db=%s)", self._uri, self._database)
        except Exception as exc:
            logger.error("Failed to connect to note store at %s", self._uri)
            await self._driver.close()
            self._driver = None
            raise NoteStoreConnectionError(str(exc)) from exc
        return self

    async def close(self) -> None:
        """Close the underlying driver."""
        if self._driver:
            await self._driver.close()
            self._driver = None
            logger.info("Note store connection closed")

    async def __aenter__(self) -> "Neo4jHandler":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ─── Properties ─────────────────────────────────────────

    @property
    def driver(self) -> AsyncDriver:
        """Return the raw async driver.

        Raises:
            RuntimeError: If handler is not connected (call connect() first).
        """
        if self._driver is None:
            raise RuntimeError("Neo4jHandler is not connected — call connect() first")
        return self._driver

    @property
    def database(self) -> str:
        """Return the configured database name."""
        return self._database

    # ─── Query Helpers ──────────────────────────────────────

    async def run(self, query: str, params: dict[str, Any] | None = None) -> list[dict]:
        """Execute a Cypher query and return all records as dicts."""
        async with self.driver.session(database=self._database) as session:
            result = await session.run(query, params or {})
            return [record.data() async for record in result]

    async def run_single(self, query: str, params: dict[str, Any] | None = None) -> dict | None:
        """Execute a Cypher query and return the first record, or None."""
        results = await self.run(query, params)
        return results[0] if results else None

    async def write(self, query: str, params: dict[str, Any] | None = None) -> None:
        """Execute a write query (no return value)."""
        async with self.driver.session(database=self._database) as session:
            await session.run(query, params or {})
