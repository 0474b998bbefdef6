"""Clean-up helpers applied to caller-supplied content before a mutation."""

import re

from hashline.anchors.hasher import line_hash

_TAG_PREFIX_RE = re.compile(r"^(?:[0-9A-Za-z]{2}|  )\|")


def strip_anchor_prefixes(content: str) -> tuple[str, bool]:
    """Remove ``<anchor>|`` prefixes pasted from tagged read output.

    Only strips when two or more non-empty lines all carry the prefix; a
    single line is left alone since literal text can match the pattern.

    Returns:
        The (possibly) cleaned content and whether anything was stripped.
    """
    lines = content.split("\n")
    non_empty = [line for line in lines if line]
    if len(non_empty) < 2:
        return content, False
    if not all(_TAG_PREFIX_RE.match(line) for line in non_empty):
        return content, False
    return "\n".join(_TAG_PREFIX_RE.sub("", line, count=1) for line in lines), True


def drop_insert_echo(content: str, anchor_line: str) -> tuple[str, bool]:
    """Drop a trailing repeat of the line being inserted before.

    Callers often end inserted content with the anchor line itself; keeping
    it would duplicate that line. Requires at least two content lines so the
    insert never becomes empty.
    """
    lines = content.split("\n")
    trailing_newline = len(lines) > 1 and lines[-1] == ""
    body = lines[:-1] if trailing_newline else lines
    if len(body) < 2 or not body[-1] or not anchor_line:
        return content, False
    if line_hash(body[-1]) != line_hash(anchor_line):
        return content, False
    body = body[:-1]
    return "\n".join(body) + ("\n" if trailing_newline else ""), True


def ensure_trailing_newline(content: str) -> str:
    """Terminate content so it forms complete lines when spliced."""
    if content and not content.endswith("\n"):
        return content + "\n"
    return content


def count_lines(content: str) -> int:
    """Number of lines as a reader would count them (``\\n``-split)."""
    return len(content.split("\n")) if content else 0
