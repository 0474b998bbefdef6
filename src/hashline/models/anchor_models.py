"""Models for tagged lines and resolved anchors."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TagPolicy(str, Enum):
    """Which duplicated lines expose their anchor on read."""

    MARK_ALL = "mark-all"
    FIRST_OCCURRENCE = "first-occurrence"


class TaggedLine(BaseModel):
    """One line of a snapshot with the anchor shown for it."""

    model_config = ConfigDict(frozen=True)

    line: int  # 1-indexed
    anchor: str | None  # None renders the blank marker
    content: str


class ResolvedAnchor(BaseModel):
    """Outcome of resolving one anchor against a snapshot."""

    model_config = ConfigDict(frozen=True)

    anchor: str
    line: int  # 1-indexed
    ambiguous: bool = False  # True when picked among duplicates without a disambiguator
    candidates: list[int] = Field(default_factory=list)


class ResolvedRange(BaseModel):
    """Start (and optional stop) of an edit, both resolved."""

    model_config = ConfigDict(frozen=True)

    start: ResolvedAnchor
    stop: ResolvedAnchor | None = None

    @property
    def first_line(self) -> int:
        return self.start.line

    @property
    def last_line(self) -> int:
        return self.stop.line if self.stop is not None else self.start.line
