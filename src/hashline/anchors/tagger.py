"""Tag snapshot lines with anchors, applying a duplicate-visibility policy."""

from typing import Iterable, Sequence

from hashline.anchors.hasher import BLANK_MARKER, line_hash
from hashline.models.anchor_models import TaggedLine, TagPolicy

TAG_SEPARATOR = "|"


def seed_seen(lines: Iterable[str]) -> set[str]:
    """Collect the hashes of every non-empty line.

    Used to pre-seed duplicate detection with the lines that sit before a
    ranged read, so the window is tagged exactly as a full read would tag it.
    """
    return {line_hash(line) for line in lines if line}


def tag_lines(
    lines: Sequence[str],
    policy: TagPolicy = TagPolicy.MARK_ALL,
    start: int = 1,
    seen: set[str] | None = None,
) -> list[TaggedLine]:
    """Annotate each line with the anchor it exposes.

    Empty lines never expose an anchor. Under ``FIRST_OCCURRENCE`` a line whose
    hash was already seen (in ``seen`` or earlier in ``lines``) is hidden too.

    Args:
        lines: Lines of the window, without line endings.
        policy: Duplicate-visibility policy.
        start: 1-indexed line number of ``lines[0]`` in the file.
        seen: Hashes of lines before the window. Not mutated.

    Returns:
        One TaggedLine per input line, in order.
    """
    tracker = set(seen or ())
    tagged: list[TaggedLine] = []
    for number, content in enumerate(lines, start=start):
        anchor: str | None = None
        if content:
            h = line_hash(content)
            if policy == TagPolicy.MARK_ALL or h not in tracker:
                anchor = h
            tracker.add(h)
        tagged.append(TaggedLine(line=number, anchor=anchor, content=content))
    return tagged


def tag_window(
    all_lines: Sequence[str],
    offset: int = 1,
    limit: int | None = None,
    policy: TagPolicy = TagPolicy.MARK_ALL,
) -> list[TaggedLine]:
    """Tag a window of a file, keeping duplicate detection file-wide.

    Args:
        all_lines: Every line of the snapshot.
        offset: 1-indexed first line of the window.
        limit: Maximum number of lines in the window, None for all.
        policy: Duplicate-visibility policy.
    """
    start = max(offset, 1) - 1
    end = len(all_lines) if limit is None else min(start + limit, len(all_lines))
    seen = seed_seen(all_lines[:start]) if policy == TagPolicy.FIRST_OCCURRENCE else None
    return tag_lines(all_lines[start:end], policy=policy, start=start + 1, seen=seen)


def render_tagged(tagged: Iterable[TaggedLine]) -> list[str]:
    """Render tagged lines as ``<anchor>|<content>``."""
    return [
        f"{line.anchor if line.anchor is not None else BLANK_MARKER}{TAG_SEPARATOR}{line.content}"
        for line in tagged
    ]
