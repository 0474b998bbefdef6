"""Bound the size of text returned on read.

Pure line/byte accounting: whole lines are kept from the head of the block
until either ceiling is reached. No hashing takes part here.
"""

from hashline.models.read_models import TruncationResult

DEFAULT_MAX_LINES = 2000
DEFAULT_MAX_BYTES = 50 * 1024


def format_size(num_bytes: int) -> str:
    """Human-readable size: ``512B``, ``50.0KB``, ``1.2MB``."""
    if num_bytes < 1024:
        return f"{num_bytes}B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f}KB"
    return f"{num_bytes / (1024 * 1024):.1f}MB"


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def truncate_head(
    content: str,
    max_lines: int = DEFAULT_MAX_LINES,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> TruncationResult:
    """Keep complete lines from the start of ``content`` within both ceilings.

    If the first line alone exceeds ``max_bytes`` nothing is kept and
    ``first_line_exceeds_limit`` is set; a partial line is never emitted.
    """
    total_bytes = _byte_len(content)
    lines = content.split("\n")
    total_lines = len(lines)
    limits = {"max_lines": max_lines, "max_bytes": max_bytes}

    if total_lines <= max_lines and total_bytes <= max_bytes:
        return TruncationResult(
            content=content,
            truncated=False,
            total_lines=total_lines,
            total_bytes=total_bytes,
            output_lines=total_lines,
            output_bytes=total_bytes,
            **limits,
        )

    if _byte_len(lines[0]) > max_bytes:
        return TruncationResult(
            content="",
            truncated=True,
            truncated_by="bytes",
            total_lines=total_lines,
            total_bytes=total_bytes,
            output_lines=0,
            output_bytes=0,
            first_line_exceeds_limit=True,
            **limits,
        )

    kept: list[str] = []
    output_bytes = 0
    truncated_by = "lines"
    for i, line in enumerate(lines[:max_lines]):
        line_bytes = _byte_len(line) + (1 if i > 0 else 0)
        if output_bytes + line_bytes > max_bytes:
            truncated_by = "bytes"
            break
        kept.append(line)
        output_bytes += line_bytes

    return TruncationResult(
        content="\n".join(kept),
        truncated=True,
        truncated_by=truncated_by,
        total_lines=total_lines,
        total_bytes=total_bytes,
        output_lines=len(kept),
        output_bytes=output_bytes,
        **limits,
    )
