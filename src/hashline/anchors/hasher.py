"""Content hash used as a line anchor.

Every line gets a 2-char base-62 digest of its content. The same function is
used by the tagger (read path) and the resolver (edit path), so an anchor
shown to a caller always resolves against the same content.
"""

import re

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
HASH_SPACE = len(ALPHABET) * len(ALPHABET)  # 3844

# Rendered in place of an anchor for empty lines and hidden duplicates.
BLANK_MARKER = "  "

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193

_ANCHOR_RE = re.compile(r"^[0-9A-Za-z]{2}$")

# An anchor pinned to a line: "xE@3". It resolves to that line or not at all.
PIN_SEPARATOR = "@"
_PINNED_RE = re.compile(r"^([0-9A-Za-z]{2})@([1-9][0-9]*)$")


def line_hash(content: str) -> str:
    """Compute the anchor for a line of text.

    FNV-1a 32-bit over the code points of ``content``, reduced modulo 3844
    and split into two base-62 digits. The line must not include its
    trailing newline.

    Hashing runs over code points, so characters outside the Basic
    Multilingual Plane (emoji, for instance) feed one value each rather than
    a surrogate pair, and their lines hash differently than under a UTF-16
    implementation.

    Args:
        content: Raw line text (may be empty).

    Returns:
        Two characters from ``ALPHABET``.
    """
    h = FNV_OFFSET_BASIS
    for char in content:
        h ^= ord(char)
        h = (h * FNV_PRIME) & 0xFFFFFFFF
    n = h % HASH_SPACE
    return ALPHABET[n // len(ALPHABET)] + ALPHABET[n % len(ALPHABET)]


def is_anchor(value: str) -> bool:
    """Return True if value has the shape of an anchor (two base-62 symbols)."""
    return bool(_ANCHOR_RE.match(value))


def pin_anchor(anchor: str, line: int) -> str:
    """Render ``anchor`` pinned to a 1-indexed line, e.g. ``xE@3``."""
    return f"{anchor}{PIN_SEPARATOR}{line}"


def split_pinned(value: str) -> tuple[str, int | None]:
    """Split ``xE@3`` into ``("xE", 3)``; a plain anchor gives ``(value, None)``."""
    match = _PINNED_RE.match(value)
    if match is None:
        return value, None
    return match.group(1), int(match.group(2))
