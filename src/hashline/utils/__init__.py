"""Utilities for diffs, truncation and logging."""

from hashline.utils.diff_generator import generate_unified_diff, split_lines_keepends
from hashline.utils.diff_window import (
    DEFAULT_CONTEXT,
    format_unified_diff,
    parse_unified_diff,
    summarize_diff,
)
from hashline.utils.truncation import (
    DEFAULT_MAX_BYTES,
    DEFAULT_MAX_LINES,
    format_size,
    truncate_head,
)

__all__ = [
    "DEFAULT_CONTEXT",
    "DEFAULT_MAX_BYTES",
    "DEFAULT_MAX_LINES",
    "format_size",
    "format_unified_diff",
    "generate_unified_diff",
    "parse_unified_diff",
    "split_lines_keepends",
    "summarize_diff",
    "truncate_head",
]
