"""
Vault Document Source

Reads a folder of markdown notes (an Obsidian-style vault) directly from
disk.  Note ids are vault-relative POSIX paths such as ``Projects/Alpha.md``.

Outgoing references are the wiki links and internal markdown links of a
note, in document order, with code blocks ignored.  Link resolution
follows the usual vault rules: exact path first, then note name, with
ties broken by the linking note's folder and then by the shortest path.
"""

import asyncio
import logging
import posixpath
import re
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from urllib.parse import unquote

from src.graph_export.document_source import DocumentHandle
from src.shared.exceptions import DocumentSourceError

logger = logging.getLogger("graph_export.vault")

NOTE_SUFFIX = ".md"

# Link targets with these suffixes are attachments, not notes
ATTACHMENT_SUFFIXES = {
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg", ".webp", ".avif",
    ".pdf", ".mp3", ".wav", ".m4a", ".ogg", ".flac", ".mp4", ".webm",
    ".mov", ".mkv", ".canvas", ".excalidraw", ".csv", ".zip",
}

_FENCED_CODE = re.compile(r"^(`{3,}|~{3,}).*?^\1[ \t]*$", re.MULTILINE | re.DOTALL)
_INLINE_CODE = re.compile(r"`[^`\n]*`")

# [[target]], [[target|alias]], [[target#heading]], ![[embed]]  or  [text](target.md)
_LINK_PATTERN = re.compile(
    r"!?\[\[(?P<wiki>[^\[\]|#^]*)(?:[#^][^\[\]|]*)?(?:\|[^\[\]]*)?\]\]"
    r"|(?<!!)\[[^\[\]]*\]\((?P<md>[^()\s]+?\.md)(?:#[^()\s]*)?\)"
)


def extract_references(text: str) -> list[str]:
    """Return link targets of a note body in the order they appear."""
    text = _FENCED_CODE.sub("", text)
    text = _INLINE_CODE.sub("", text)

    references: list[str] = []
    for match in _LINK_PATTERN.finditer(text):
        if match.group("wiki") is not None:
            target = match.group("wiki").strip()
        else:
            target = unquote(match.group("md")).strip()
            if "://" in target:
                continue
        if not target:
            continue  # same-note heading link
        if PurePosixPath(target).suffix.lower() in ATTACHMENT_SUFFIXES:
            continue
        references.append(target)
    return references


class VaultDocumentSource:
    """Document source backed by a vault directory on disk."""

    def __init__(self, vault_path: str | Path):
        self._root = Path(vault_path).expanduser().resolve()
        if not self._root.is_dir():
            raise FileNotFoundError(f"Vault directory not found: {self._root}")
        self._by_path: dict[str, Path] | None = None
        self._by_name: dict[str, list[str]] = {}

    @property
    def root(self) -> Path:
        return self._root

    @property
    def name(self) -> str:
        return self._root.name

    # ─── Index ────────────────────────────────────────────

    async def refresh(self) -> int:
        """Rebuild the note index from disk.  Returns the number of notes."""
        by_path, by_name = await asyncio.to_thread(self._scan)
        self._by_path = by_path
        self._by_name = by_name
        logger.info("Indexed %d notes in %s", len(by_path), self._root)
        return len(by_path)

    def _scan(self) -> tuple[dict[str, Path], dict[str, list[str]]]:
        by_path: dict[str, Path] = {}
        by_name: dict[str, list[str]] = {}

        for file_path in sorted(self._root.rglob(f"*{NOTE_SUFFIX}")):
            relative = file_path.relative_to(self._root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            note_id = relative.as_posix()
            by_path[note_id] = file_path
            by_name.setdefault(file_path.stem.lower(), []).append(note_id)
        return by_path, by_name

    async def _index(self) -> dict[str, Path]:
        if self._by_path is None:
            await self.refresh()
        return self._by_path

    async def note_ids(self) -> list[str]:
        return list(await self._index())

    async def _file(self, handle: DocumentHandle) -> Path:
        path = (await self._index()).get(handle.id)
        if path is None:
            raise DocumentSourceError(f"Note not in vault index: {handle.id}")
        return path

    # ─── DocumentSource ───────────────────────────────────

    async def resolve_identifier(
        self, name: str, source_id: str | None = None
    ) -> DocumentHandle | None:
        by_path = await self._index()
        key = name.strip().replace("\\", "/").lstrip("/")
        if not key:
            return None
        if source_id is not None and key.startswith(("../", "./")):
            key = posixpath.normpath(posixpath.join(posixpath.dirname(source_id), key))

        for candidate in (key, f"{key}{NOTE_SUFFIX}"):
            if candidate in by_path:
                return DocumentHandle(candidate)

        stem = PurePosixPath(key).name
        if stem.lower().endswith(NOTE_SUFFIX):
            stem = stem[: -len(NOTE_SUFFIX)]
        candidates = self._by_name.get(stem.lower(), [])

        if "/" in key:
            # Partial path such as "Projects/Alpha": match on the path tail
            tail = key.lower().removesuffix(NOTE_SUFFIX)
            candidates = [
                note_id for note_id in candidates
                if note_id.lower().removesuffix(NOTE_SUFFIX).endswith(tail)
            ]

        if not candidates:
            return None
        return DocumentHandle(self._pick_closest(candidates, source_id))

    @staticmethod
    def _pick_closest(candidates: list[str], source_id: str | None) -> str:
        if source_id is not None and len(candidates) > 1:
            folder = PurePosixPath(source_id).parent
            for note_id in candidates:
                if PurePosixPath(note_id).parent == folder:
                    return note_id
        return min(candidates, key=lambda note_id: (note_id.count("/"), note_id))

    async def get_outgoing_references(self, handle: DocumentHandle) -> list[str] | None:
        try:
            text = await self.get_body(handle)
        except DocumentSourceError as exc:
            logger.warning("Could not read links of %s: %s", handle.id, exc)
            return None
        return extract_references(text)

    async def get_title(self, handle: DocumentHandle) -> str:
        return (await self._file(handle)).stem

    async def get_last_modified(self, handle: DocumentHandle) -> datetime:
        path = await self._file(handle)
        try:
            stat = await asyncio.to_thread(path.stat)
        except OSError as exc:
            raise DocumentSourceError(f"Cannot stat {handle.id}: {exc}") from exc
        return datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)

    async def get_body(self, handle: DocumentHandle) -> str:
        path = await self._file(handle)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
        except OSError as exc:
            raise DocumentSourceError(f"Cannot read {handle.id}: {exc}") from exc
