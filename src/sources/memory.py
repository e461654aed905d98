"""
In-memory Document Source.

Holds notes in a dict keyed by id.  Handy for tests and for callers that
already have their notes loaded from somewhere else.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.graph_export.document_source import DocumentHandle


@dataclass
class MemoryNote:
    """A note held in memory.  ``links`` may be None for an absent link list."""

    id: str
    title: str
    body: str = ""
    links: list[str] | None = field(default_factory=list)
    modified: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryDocumentSource:
    """Document source over a dict of MemoryNote objects.

    Names resolve by exact id first, then ``<name>.md``, then by title.
    Every body read is recorded in ``body_reads`` so callers can check
    which notes were actually hydrated.
    """

    def __init__(self, notes: list[MemoryNote] | None = None):
        self._notes: dict[str, MemoryNote] = {}
        self.body_reads: list[str] = []
        for note in notes or []:
            self._notes[note.id] = note

    def add_note(
        self,
        note_id: str,
        body: str = "",
        links: list[str] | None = None,
        title: str | None = None,
        modified: datetime | None = None,
    ) -> MemoryNote:
        note = MemoryNote(
            id=note_id,
            title=title or note_id.rsplit("/", 1)[-1].removesuffix(".md"),
            body=body,
            links=list(links) if links is not None else [],
            modified=modified or datetime.now(timezone.utc),
        )
        self._notes[note_id] = note
        return note

    def _lookup(self, name: str) -> MemoryNote | None:
        if name in self._notes:
            return self._notes[name]
        if f"{name}.md" in self._notes:
            return self._notes[f"{name}.md"]
        for note in self._notes.values():
            if note.title == name:
                return note
        return None

    async def resolve_identifier(
        self, name: str, source_id: str | None = None
    ) -> DocumentHandle | None:
        note = self._lookup(name)
        return DocumentHandle(note.id) if note else None

    async def get_outgoing_references(self, handle: DocumentHandle) -> list[str] | None:
        links = self._notes[handle.id].links
        return list(links) if links is not None else None

    async def get_title(self, handle: DocumentHandle) -> str:
        return self._notes[handle.id].title

    async def get_last_modified(self, handle: DocumentHandle) -> datetime:
        return self._notes[handle.id].modified

    async def get_body(self, handle: DocumentHandle) -> str:
        self.body_reads.append(handle.id)
        return self._notes[handle.id].body
