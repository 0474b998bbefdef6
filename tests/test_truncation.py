"""Tests for head truncation on the read path."""

import pytest

from hashline.utils.truncation import DEFAULT_MAX_BYTES, DEFAULT_MAX_LINES, format_size, truncate_head


def test_defaults():
    assert DEFAULT_MAX_LINES == 2000
    assert DEFAULT_MAX_BYTES == 50 * 1024


def test_within_limits():
    result = truncate_head("a\nb\nc")
    assert result.truncated is False
    assert result.truncated_by is None
    assert result.content == "a\nb\nc"
    assert result.output_lines == 3
    assert result.total_bytes == 5


def test_truncated_by_lines():
    result = truncate_head("\n".join(str(i) for i in range(10)), max_lines=3)
    assert result.truncated is True
    assert result.truncated_by == "lines"
    assert result.content == "0\n1\n2"
    assert (result.output_lines, result.total_lines) == (3, 10)


def test_truncated_by_bytes_keeps_whole_lines():
    result = truncate_head("aaaa\nbbbb\ncccc", max_bytes=10)
    assert result.truncated_by == "bytes"
    assert result.content == "aaaa\nbbbb"
    assert result.output_bytes == 9


def test_bytes_counted_as_utf8():
    result = truncate_head("éé\nb", max_bytes=5)
    assert result.content == "éé"
    assert result.output_bytes == 4


def test_first_line_exceeds_limit():
    result = truncate_head("x" * 20 + "\nshort", max_bytes=10)
    assert result.first_line_exceeds_limit is True
    assert result.content == ""
    assert result.output_lines == 0


@pytest.mark.parametrize(
    "num_bytes, expected",
    [(0, "0B"), (512, "512B"), (1024, "1.0KB"), (51200, "50.0KB"), (1572864, "1.5MB")],
)
def test_format_size(num_bytes, expected):
    assert format_size(num_bytes) == expected
