"""Tests for the line hash used as an anchor."""

import pytest

from hashline.anchors.hasher import (
    ALPHABET,
    BLANK_MARKER,
    HASH_SPACE,
    is_anchor,
    line_hash,
    pin_anchor,
    split_pinned,
)


def test_known_values():
    """FNV-1a 32-bit reduced modulo 3844, two base-62 digits."""
    assert line_hash("") == "zd"
    assert line_hash("a") == "xE"
    assert line_hash("hello") == "qx"
    assert line_hash("func f() {") == "D5"


def test_hash_space():
    assert HASH_SPACE == 3844
    assert len(ALPHABET) == 62


@pytest.mark.parametrize("content", ["", "x", "  return 1", "é ü 中文", "\t\tindented", "a" * 5000])
def test_deterministic_and_in_range(content):
    """Repeated calls agree and both characters come from the alphabet."""
    first = line_hash(content)
    assert first == line_hash(content)
    assert len(first) == 2
    assert all(ch in ALPHABET for ch in first)
    assert ALPHABET.index(first[0]) * 62 + ALPHABET.index(first[1]) < HASH_SPACE


def test_equal_content_equal_hash():
    assert line_hash("same line") == line_hash("".join(["same", " ", "line"]))



class TestIsAnchor:
    def test_valid(self):
        assert is_anchor("xE")
        assert is_anchor("09")

    @pytest.mark.parametrize("value", ["", "x", "abc", "x|", BLANK_MARKER, "é1"])
    def test_invalid(self, value):
        assert not is_anchor(value)


class TestPinnedAnchor:
    def test_pin_and_split(self):
        assert pin_anchor("xE", 3) == "xE@3"
        assert split_pinned("xE@3") == ("xE", 3)

    def test_plain_anchor_has_no_line(self):
        assert split_pinned("xE") == ("xE", None)

    @pytest.mark.parametrize("value", ["xE@0", "xE@", "xE@-1", "xE@3x", "xEx@3"])
    def test_malformed_pin_left_whole(self, value):
        assert split_pinned(value) == (value, None)

    def test_pinned_form_is_not_a_plain_anchor(self):
        assert not is_anchor("xE@3")


def test_astral_characters_hash_per_code_point():
    """One code point, not two UTF-16 units, feeds the hash for an emoji."""
    h = 0x811C9DC5
    h ^= ord("\U0001F600")
    h = (h * 0x01000193) & 0xFFFFFFFF
    n = h % HASH_SPACE
    assert line_hash("\U0001F600") == ALPHABET[n // 62] + ALPHABET[n % 62]
