"""Line anchors: hashing, tagging and resolution."""

from hashline.anchors.exceptions import (
    AmbiguousAnchorError,
    AmbiguousContextError,
    AnchorError,
    AnchorFormatError,
    InvalidRangeError,
    StaleAnchorError,
)
from hashline.anchors.hasher import (
    ALPHABET,
    BLANK_MARKER,
    HASH_SPACE,
    is_anchor,
    line_hash,
    pin_anchor,
    split_pinned,
)
from hashline.anchors.resolver import anchor_for_line, find_candidates, resolve_anchor, resolve_range
from hashline.anchors.tagger import render_tagged, seed_seen, tag_lines, tag_window

__all__ = [
    "ALPHABET",
    "BLANK_MARKER",
    "HASH_SPACE",
    "AmbiguousAnchorError",
    "AmbiguousContextError",
    "AnchorError",
    "AnchorFormatError",
    "InvalidRangeError",
    "StaleAnchorError",
    "anchor_for_line",
    "find_candidates",
    "is_anchor",
    "line_hash",
    "pin_anchor",
    "render_tagged",
    "resolve_anchor",
    "resolve_range",
    "seed_seen",
    "split_pinned",
    "tag_lines",
    "tag_window",
]
