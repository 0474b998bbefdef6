"""Models for representing windowed diff reports."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DiffRowType(str, Enum):
    """Classification of a row in a unified comparison."""

    CONTEXT = "context"
    REMOVED = "removed"
    ADDED = "added"


class DiffEntry(BaseModel):
    """A single classified row of a unified comparison."""

    model_config = ConfigDict(frozen=True)

    type: DiffRowType
    old_line: int | None  # None for added rows
    new_line: int | None  # None for removed rows
    text: str

    @property
    def display_line(self) -> int:
        """Line number shown for the row: new-file number for additions, old otherwise."""
        if self.type == DiffRowType.ADDED:
            return self.new_line  # type: ignore[return-value]
        return self.old_line  # type: ignore[return-value]

    @property
    def is_change(self) -> bool:
        return self.type != DiffRowType.CONTEXT


class DiffReport(BaseModel):
    """Bounded, line-numbered change report for one edit."""

    model_config = ConfigDict(frozen=False)

    diff: str = ""  # Rendered report; empty when nothing changed
    first_changed_line: int | None = None
    added: int = 0
    removed: int = 0
    entries: list[DiffEntry] = Field(default_factory=list)  # Rows kept in the window

    @property
    def has_changes(self) -> bool:
        return self.added > 0 or self.removed > 0

    def summary(self) -> str:
        """Compact ``N added, M removed`` summary; empty when nothing changed."""
        parts: list[str] = []
        if self.added > 0:
            parts.append(f"{self.added} added")
        if self.removed > 0:
            parts.append(f"{self.removed} removed")
        return ", ".join(parts)
