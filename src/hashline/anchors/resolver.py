"""Resolve anchors to authoritative line numbers against a fresh snapshot.

Resolution never picks silently among duplicates: it either uses a
disambiguator (offset or context anchor), fails, or flags the result as
ambiguous so the caller can surface a warning.
"""

from typing import Sequence

from hashline.anchors.exceptions import (
    AmbiguousAnchorError,
    AmbiguousContextError,
    AnchorFormatError,
    InvalidRangeError,
    StaleAnchorError,
)
from hashline.anchors.hasher import is_anchor, line_hash, pin_anchor, split_pinned
from hashline.models.anchor_models import ResolvedAnchor, ResolvedRange, TagPolicy
from hashline.utils.logging import get_logger

logger = get_logger(__name__)


def _normalize_anchor(anchor: str) -> str:
    value = anchor.strip()
    if not is_anchor(value):
        raise AnchorFormatError(
            f'Invalid anchor "{anchor}". Anchors are the 2-char hash shown before "|" in tagged read output.',
            anchor=anchor,
        )
    return value


def _parse_anchor(anchor: str) -> tuple[str, int | None]:
    """Split an optional pinned line off ``anchor`` and validate the rest."""
    value, pinned_line = split_pinned(anchor.strip())
    return _normalize_anchor(value), pinned_line


def find_candidates(lines: Sequence[str], anchor: str) -> list[int]:
    """Return every 1-indexed line whose content hashes to ``anchor``.

    Empty lines are never candidates.
    """
    return [
        number
        for number, content in enumerate(lines, start=1)
        if content and line_hash(content) == anchor
    ]


def _resolve_context(lines: Sequence[str], context: str) -> int:
    """Resolve a context anchor, demanding exactly one candidate."""
    context = _normalize_anchor(context)
    matches = find_candidates(lines, context)
    if not matches:
        raise StaleAnchorError(
            f'Context hash "{context}" not found in file. The file may have changed, re-read before editing.',
            anchor=context,
        )
    if len(matches) > 1:
        raise AmbiguousContextError(
            f'Context hash "{context}" is also ambiguous (lines {", ".join(map(str, matches))}). '
            "Pick a unique hash near the target line as context.",
            anchor=context,
            lines=matches,
        )
    return matches[0]


def resolve_anchor(
    lines: Sequence[str],
    anchor: str,
    *,
    offset: int | None = None,
    context: str | None = None,
    policy: TagPolicy = TagPolicy.MARK_ALL,
    strict: bool = False,
) -> ResolvedAnchor:
    """Map an anchor to a 1-indexed line number.

    Args:
        lines: Snapshot lines, read immediately before this call.
        anchor: Two-char anchor to resolve, optionally pinned as ``xE@3``.
        offset: Offset disambiguator; the first candidate at or after this line wins.
            Ignored for a pinned anchor, which resolves only to its own line.
        context: Context disambiguator; the candidate closest to this (unique)
            anchor's line wins, lower line number on equal distance.
        policy: Tagging policy the anchor was shown under.
        strict: Raise instead of returning an ambiguous result.

    Raises:
        AnchorFormatError: If anchor or context is malformed.
        StaleAnchorError: If no candidate exists (at or after ``offset``), or a
            pinned line no longer holds the hashed content.
        AmbiguousContextError: If the context anchor matches several lines.
        AmbiguousAnchorError: If ``strict`` and the result would be ambiguous.
    """
    anchor, pinned_line = _parse_anchor(anchor)
    candidates = find_candidates(lines, anchor)

    if pinned_line is not None:
        if pinned_line not in candidates:
            raise StaleAnchorError(
                f'Hash "{anchor}" not found at line {pinned_line}. The file may have changed, re-read before editing.',
                anchor=anchor,
                lines=candidates,
            )
        return ResolvedAnchor(anchor=anchor, line=pinned_line, candidates=candidates)

    if not candidates:
        raise StaleAnchorError(
            f'Hash "{anchor}" not found in file. The file may have changed, re-read before editing.',
            anchor=anchor,
        )

    if len(candidates) == 1:
        return ResolvedAnchor(anchor=anchor, line=candidates[0], candidates=candidates)

    pool = candidates
    if offset is not None:
        start = max(offset, 1)
        pool = [number for number in candidates if number >= start]
        if not pool:
            raise StaleAnchorError(
                f'Hash "{anchor}" not found at or after line {start} '
                f"(matches lines {', '.join(map(str, candidates))}). Re-read before editing.",
                anchor=anchor,
                lines=candidates,
            )

    if context is not None:
        context_line = _resolve_context(lines, context)
        # min() keeps the first of equal keys, and pool is ascending.
        best = min(pool, key=lambda number: abs(number - context_line))
        logger.debug("anchor_resolved_by_context", anchor=anchor, line=best, context_line=context_line)
        return ResolvedAnchor(anchor=anchor, line=best, candidates=candidates)

    if offset is not None:
        return ResolvedAnchor(anchor=anchor, line=pool[0], candidates=candidates)

    if policy == TagPolicy.FIRST_OCCURRENCE:
        # Only the first occurrence was ever shown, so the anchor is unique as read.
        return ResolvedAnchor(anchor=anchor, line=candidates[0], candidates=candidates)

    if strict:
        raise AmbiguousAnchorError(
            f'Hash "{anchor}" is ambiguous, matches lines {", ".join(map(str, candidates))}. '
            "Provide offset or a nearby unique hash as context to disambiguate.",
            anchor=anchor,
            lines=candidates,
        )

    logger.info("anchor_ambiguous", anchor=anchor, candidates=candidates)
    return ResolvedAnchor(anchor=anchor, line=candidates[0], ambiguous=True, candidates=candidates)


def resolve_range(
    lines: Sequence[str],
    start: str,
    stop: str | None = None,
    *,
    offset: int | None = None,
    context: str | None = None,
    policy: TagPolicy = TagPolicy.MARK_ALL,
    strict: bool = False,
) -> ResolvedRange:
    """Resolve a start anchor and an optional stop anchor.

    The stop anchor is searched at or after the resolved start line.

    Raises:
        InvalidRangeError: If the stop line precedes the start line.
        AnchorError: Any failure from :func:`resolve_anchor`.
    """
    resolved_start = resolve_anchor(
        lines, start, offset=offset, context=context, policy=policy, strict=strict
    )
    if stop is None:
        return ResolvedRange(start=resolved_start)

    resolved_stop = resolve_anchor(
        lines, stop, offset=resolved_start.line, policy=policy, strict=strict
    )
    if resolved_stop.line < resolved_start.line:
        raise InvalidRangeError(
            f'hash_stop "{resolved_stop.anchor}" resolves to line {resolved_stop.line}, which is before '
            f'hash_start "{resolved_start.anchor}" at line {resolved_start.line}.',
            anchor=resolved_stop.anchor,
            lines=[resolved_start.line, resolved_stop.line],
        )
    return ResolvedRange(start=resolved_start, stop=resolved_stop)


def anchor_for_line(
    lines: Sequence[str],
    number: int,
    policy: TagPolicy = TagPolicy.MARK_ALL,
) -> str | None:
    """Return an anchor that resolves back to line ``number`` under ``policy``.

    The bare hash is returned when resolving it lands on ``number`` without
    ambiguity. Otherwise the hash is pinned to the line (``xE@3``). Empty lines
    have no anchor and give None.
    """
    content = lines[number - 1]
    if not content:
        return None
    anchor = line_hash(content)
    resolved = resolve_anchor(lines, anchor, policy=policy)
    if resolved.line == number and not resolved.ambiguous:
        return anchor
    return pin_anchor(anchor, number)
