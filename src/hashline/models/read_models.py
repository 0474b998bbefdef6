"""Models for the read path."""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class TruncationResult(BaseModel):
    """Line/byte accounting for a block bounded by the truncator."""

    model_config = ConfigDict(frozen=True)

    content: str
    truncated: bool
    truncated_by: Literal["lines", "bytes"] | None = None
    total_lines: int
    total_bytes: int
    output_lines: int
    output_bytes: int
    first_line_exceeds_limit: bool = False
    max_lines: int
    max_bytes: int


class ReadRequest(BaseModel):
    """Parameters of a read call."""

    model_config = ConfigDict(frozen=True)

    path: str
    offset: int | None = None  # 1-indexed start line
    limit: int | None = None
    tags: bool = False


class ReadResult(BaseModel):
    """Text (or image) returned to the caller plus continuation metadata."""

    model_config = ConfigDict(frozen=False)

    path: str
    text: str
    total_lines: int = 0
    start_line: int = 1
    end_line: int = 0
    next_offset: int | None = None  # Set when more lines remain
    truncation: TruncationResult | None = None
    mime_type: str | None = None  # Set for image files
    image_data: str | None = None  # Base64 payload for image files
