"""Tests for head truncation by lines and bytes."""

from __future__ import annotations

import pytest

from toolwire.output.bounding import DEFAULT_MAX_BYTES, DEFAULT_MAX_LINES, bound


class TestBound:
    def test_within_limits_is_untouched(self) -> None:
        result = bound("one\ntwo\nthree", max_lines=10, max_bytes=100)
        assert not result.truncated
        assert result.truncated_by is None
        assert result.content == "one\ntwo\nthree"
        assert result.total_lines == 3
        assert result.output_bytes == result.total_bytes == 13

    def test_defaults(self) -> None:
        result = bound("x")
        assert result.max_lines == DEFAULT_MAX_LINES == 2000
        assert result.max_bytes == DEFAULT_MAX_BYTES == 51200

    def test_cut_by_lines(self) -> None:
        text = "\n".join("abcdefghij")
        result = bound(text, max_lines=5, max_bytes=1000)
        assert result.truncated
        assert result.truncated_by == "lines"
        assert result.content == "a\nb\nc\nd\ne"
        assert result.output_lines == 5
        assert result.total_lines == 10

    def test_cut_by_bytes_spans_into_next_line(self) -> None:
        text = "a" * 600 + "\n" + "b" * 600
        result = bound(text, max_lines=1000, max_bytes=1000)
        assert result.truncated_by == "bytes"
        assert result.output_bytes == 1000
        assert result.content == "a" * 600 + "\n" + "b" * 399
        assert result.output_lines == 2

    def test_first_line_too_large(self) -> None:
        result = bound("z" * 2000, max_lines=10, max_bytes=100)
        assert result.first_line_exceeds_limit
        assert result.truncated_by == "bytes"
        assert result.content == "z" * 100

    def test_first_line_flag_only_when_first_line_overflows(self) -> None:
        result = bound("short\n" + "z" * 2000, max_lines=10, max_bytes=100)
        assert result.truncated
        assert not result.first_line_exceeds_limit

    def test_never_splits_a_multibyte_character(self) -> None:
        # "é" is two bytes; a 5-byte budget fits two of them, not two and a half.
        result = bound("é" * 10, max_lines=10, max_bytes=5)
        assert result.content == "éé"
        assert result.output_bytes == 4

    def test_bounded_output_respects_both_limits(self) -> None:
        text = "\n".join(f"line {i} " + "ü" * i for i in range(300))
        result = bound(text, max_lines=50, max_bytes=700)
        assert result.output_lines <= 50
        assert result.output_bytes <= 700

    def test_deterministic_and_idempotent(self) -> None:
        text = "\n".join(str(i) * 40 for i in range(100))
        first = bound(text, max_lines=20, max_bytes=500)
        assert bound(text, max_lines=20, max_bytes=500) == first
        again = bound(first.content, max_lines=20, max_bytes=500)
        assert not again.truncated
        assert again.content == first.content

    def test_empty_text(self) -> None:
        result = bound("", max_lines=1, max_bytes=1)
        assert not result.truncated
        assert result.total_lines == 1
        assert result.total_bytes == 0

    @pytest.mark.parametrize(("max_lines", "max_bytes"), [(0, 10), (10, 0), (-1, -1)])
    def test_rejects_non_positive_limits(self, max_lines: int, max_bytes: int) -> None:
        with pytest.raises(ValueError, match="positive"):
            bound("text", max_lines=max_lines, max_bytes=max_bytes)
