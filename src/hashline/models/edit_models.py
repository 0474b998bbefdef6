"""Models for the edit path: requests, snapshots and mutation outcomes."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from hashline.models.diff_models import DiffReport

NO_CHANGES = "NO_CHANGES"


class EditMode(str, Enum):
    """Operation performed by an edit request."""

    CREATE = "create"
    INSERT = "insert"
    REPLACE = "replace"
    DELETE = "delete"


class Snapshot(BaseModel):
    """Lines of a file read at one instant. Never reused across edit calls."""

    model_config = ConfigDict(frozen=True)

    path: str
    lines: list[str]
    read_at: datetime = Field(default_factory=datetime.now)

    def line(self, number: int) -> str:
        """Return the text of a 1-indexed line."""
        return self.lines[number - 1]

    def __len__(self) -> int:
        return len(self.lines)


class EditRequest(BaseModel):
    """What the caller wants changed.

    No start anchor means create/overwrite with ``content`` verbatim.
    A start anchor without content means delete.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    start: str | None = None
    stop: str | None = None
    offset: int | None = None  # Offset disambiguator for the start anchor
    context: str | None = None  # Context disambiguator for the start anchor
    content: str | None = None

    @property
    def mode(self) -> EditMode:
        if self.start is None:
            return EditMode.CREATE
        if not self.content:
            return EditMode.DELETE
        if self.stop is not None:
            return EditMode.REPLACE
        return EditMode.INSERT


class MutationRequest(BaseModel):
    """Line-range operation handed to a mutation executor."""

    model_config = ConfigDict(frozen=True)

    path: str
    mode: EditMode
    start: int = 0  # 1-indexed; unused for CREATE
    stop: int = 0  # 1-indexed inclusive; unused for CREATE and INSERT
    content: str = ""


class MutationOutcome(BaseModel):
    """What the executor reports back: a sentinel or the raw comparison."""

    model_config = ConfigDict(frozen=True)

    no_changes: bool = False
    raw_diff: str = ""

    @classmethod
    def from_output(cls, output: str) -> "MutationOutcome":
        text = output.strip("\n")
        if text.strip() == NO_CHANGES:
            return cls(no_changes=True)
        return cls(raw_diff=text)


class EditResult(BaseModel):
    """Human-readable summary plus the diff report and continuation anchors."""

    model_config = ConfigDict(frozen=False)

    path: str
    mode: EditMode
    message: str
    report: DiffReport | None = None
    warnings: list[str] = Field(default_factory=list)
    new_anchors: list[str] = Field(default_factory=list)  # First (and last) written line
    lines_written: int = 0
