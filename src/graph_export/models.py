"""
Export Models

Data classes for the discovered note tree and the request/response
shapes used by the export service and MCP server.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator, model_validator


@dataclass
class ExportNode:
    """A note in the discovered tree.

    ``content`` is None (not an empty string) when the note sits beyond
    the content depth.
    """

    id: str
    title: str
    depth: int
    include_content: bool
    content: str | None = None
    children: list["ExportNode"] = field(default_factory=list)
    token_count: int = 0  # Reserved, not computed by the engine
    last_modified: datetime = field(
        default_factory=lambda: datetime.fromtimestamp(0, tz=timezone.utc)
    )


@dataclass
class TraversalResult:
    """Root of a finished traversal plus the references that did not resolve."""

    root: ExportNode
    missing_notes: list[str] = field(default_factory=list)

    @property
    def missing_count(self) -> int:
        return len(self.missing_notes)


class ExportConfiguration(BaseModel):
    """Validated parameters for one export run."""

    root_note: str = Field(min_length=1, description="Identifier or name of the starting note")
    content_depth: int = Field(default=1, ge=1, description="Deepest layer whose body is included")
    title_depth: int = Field(default=2, ge=1, description="Deepest layer that appears at all")
    excluded_notes: list[str] = Field(
        default_factory=list,
        description="Notes never added to the tree (the root is never excluded)",
    )
    export_format: str = Field(default="markdown", description="markdown, xml or print")

    @field_validator("export_format")
    @classmethod
    def _normalise_format(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("excluded_notes")
    @classmethod
    def _drop_blank_exclusions(cls, value: list[str]) -> list[str]:
        return [name.strip() for name in value if name.strip()]

    @model_validator(mode="after")
    def _check_depth_policy(self) -> "ExportConfiguration":
        if self.title_depth < self.content_depth:
            raise ValueError(
                f"title_depth ({self.title_depth}) must be >= content_depth ({self.content_depth})"
            )
        return self


@dataclass
class ExportOutcome:
    """Result of one export run, ready for JSON serialisation."""

    run_id: str
    root_note: str
    export_format: str
    output: str = ""
    total_notes: int = 0
    missing_notes: list[str] = field(default_factory=list)
    max_depth: int = 0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        d = {
            "run_id": self.run_id,
            "root_note": self.root_note,
            "export_format": self.export_format,
            "total_notes": self.total_notes,
            "missing_notes": self.missing_notes,
            "missing_notes_count": len(self.missing_notes),
            "max_depth": self.max_depth,
            "output": self.output,
        }
        if self.error is not None:
            d["error"] = self.error
        return d
