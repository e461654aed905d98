"""
Document Source — the capability the traversal engine reads notes through.

Any backend (a vault on disk, a database-backed note store, an in-memory
fixture) works as long as it implements these five coroutines.  The engine
awaits one call at a time, so implementations need no locking.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class DocumentHandle:
    """Opaque reference to a resolved note.  ``id`` is its canonical path."""

    id: str


@runtime_checkable
class DocumentSource(Protocol):
    """Read-only access to notes and their outgoing links."""

    async def resolve_identifier(
        self, name: str, source_id: str | None = None
    ) -> DocumentHandle | None:
        """Resolve a link or path to a note, or None when nothing matches.

        ``source_id`` is the note containing the link, for sources that
        resolve links relative to the linking note.
        """
        ...

    async def get_outgoing_references(self, handle: DocumentHandle) -> list[str] | None:
        """Raw reference names in the order they appear in the note."""
        ...

    async def get_title(self, handle: DocumentHandle) -> str:
        ...

    async def get_last_modified(self, handle: DocumentHandle) -> datetime:
        ...

    async def get_body(self, handle: DocumentHandle) -> str:
        ...


@runtime_checkable
class RefreshableSource(Protocol):
    """A source that caches an index of its notes and can rebuild it.

    The export service calls ``refresh`` before every traversal so each
    run sees notes created or deleted since the previous one.
    """

    async def refresh(self) -> int:
        ...
