"""Tests for tagging lines under the duplicate-visibility policies."""

from hashline.anchors.hasher import line_hash
from hashline.anchors.tagger import render_tagged, seed_seen, tag_lines, tag_window
from hashline.models import TagPolicy


class TestTagLines:
    def test_mark_all_tags_every_duplicate(self):
        tagged = tag_lines(["a", "b", "a"])
        assert [t.anchor for t in tagged] == ["xE", "pV", "xE"]
        assert [t.line for t in tagged] == [1, 2, 3]

    def test_first_occurrence_hides_repeats(self):
        tagged = tag_lines(["a", "b", "a"], policy=TagPolicy.FIRST_OCCURRENCE)
        assert [t.anchor for t in tagged] == ["xE", "pV", None]

    def test_empty_lines_never_tagged(self):
        for policy in TagPolicy:
            tagged = tag_lines(["", "a", ""], policy=policy)
            assert [t.anchor for t in tagged] == [None, "xE", None]

    def test_start_offsets_line_numbers(self):
        tagged = tag_lines(["x", "y"], start=10)
        assert [t.line for t in tagged] == [10, 11]

    def test_seen_is_not_mutated(self):
        seen = {line_hash("a")}
        tag_lines(["b"], policy=TagPolicy.FIRST_OCCURRENCE, seen=seen)
        assert seen == {line_hash("a")}


class TestTagWindow:
    def test_first_occurrence_window_is_seeded(self):
        """A ranged read hides a duplicate whose first occurrence is above the window."""
        tagged = tag_window(["a", "b", "a"], offset=3, policy=TagPolicy.FIRST_OCCURRENCE)
        assert len(tagged) == 1
        assert tagged[0].line == 3
        assert tagged[0].anchor is None

    def test_mark_all_window(self):
        tagged = tag_window(["a", "b", "a"], offset=3)
        assert tagged[0].anchor == "xE"

    def test_limit(self):
        tagged = tag_window(["one", "two", "three", "L1"], offset=2, limit=2)
        assert [t.content for t in tagged] == ["two", "three"]
        assert [t.line for t in tagged] == [2, 3]

    def test_window_matches_full_read(self):
        lines = ["def main():", "    pass", "", "def main():", "    pass", "print(1)"]
        full = tag_lines(lines, policy=TagPolicy.FIRST_OCCURRENCE)
        window = tag_window(lines, offset=4, limit=2, policy=TagPolicy.FIRST_OCCURRENCE)
        assert window == full[3:5]


def test_seed_seen_skips_empty_lines():
    assert seed_seen(["", "a"]) == {"xE"}


def test_render_tagged():
    tagged = tag_lines(["a", "", "a"], policy=TagPolicy.FIRST_OCCURRENCE)
    assert render_tagged(tagged) == ["xE|a", "  |", "  |a"]
